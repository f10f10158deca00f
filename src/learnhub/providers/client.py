"""Cliente HTTP para catálogos externos (Coursera / Udemy)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..config import get_config

logger = logging.getLogger(__name__)

RESULT_LIMIT = 10


@dataclass(frozen=True)
class ExternalCourse:
    """Curso de un proveedor externo."""

    id: str
    title: str
    description: str
    provider: str  # Coursera, Udemy
    url: str
    level: str | None = None
    skills: tuple[str, ...] = field(default_factory=tuple)
    instructor: str = ""
    thumbnail: str | None = None
    preview_video_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "provider": self.provider,
            "url": self.url,
            "level": self.level,
            "skills": list(self.skills),
            "instructor": self.instructor,
            "thumbnail": self.thumbnail,
            "preview_video_url": self.preview_video_url,
        }


def map_level(value: str | None) -> str | None:
    """Traducir nivel del proveedor a Beginner/Intermediate/Advanced."""
    if not value:
        return None
    lowered = value.lower()
    if "beginner" in lowered:
        return "Beginner"
    if "intermediate" in lowered:
        return "Intermediate"
    if "advanced" in lowered:
        return "Advanced"
    return None


COURSERA_FALLBACK = [
    ExternalCourse(
        id="coursera-fallback-react",
        title="React Basics",
        description="Learn the fundamentals of React on Coursera.",
        provider="Coursera",
        url="https://www.coursera.org/",
        level="Beginner",
        skills=("React", "JavaScript", "Frontend"),
        instructor="Coursera",
        thumbnail="https://images.pexels.com/photos/1181671/pexels-photo-1181671.jpeg?auto=compress&cs=tinysrgb&w=1200",
        preview_video_url="https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4",
    ),
]

UDEMY_FALLBACK = [
    ExternalCourse(
        id="udemy-fallback-node",
        title="Node.js Masterclass",
        description="Master Node.js with hands-on projects on Udemy.",
        provider="Udemy",
        url="https://www.udemy.com/",
        level="Intermediate",
        skills=("Node.js", "Express", "Backend"),
        instructor="Udemy",
        thumbnail="https://images.pexels.com/photos/1181243/pexels-photo-1181243.jpeg?auto=compress&cs=tinysrgb&w=1200",
        preview_video_url="https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/ElephantsDream.mp4",
    ),
]


class ExternalCatalogClient:
    """Cliente para catálogos públicos de proveedores externos."""

    def __init__(
        self,
        coursera_url: str | None = None,
        udemy_url: str | None = None,
        udemy_token: str | None = None,
        timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializar cliente."""
        config = get_config()
        self.coursera_url = coursera_url or config.coursera_url
        self.udemy_url = udemy_url or config.udemy_url
        self.udemy_token = udemy_token or config.udemy_token
        self.timeout = timeout or config.provider_timeout
        self.client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def fetch_coursera(self, search: str) -> list[ExternalCourse]:
        """Buscar en Coursera; ante cualquier fallo, muestra curada."""
        params = {"q": "search", "query": search, "limit": RESULT_LIMIT}
        try:
            response = await self.client.get(self.coursera_url, params=params)
            response.raise_for_status()
            data = response.json()
            elements = data.get("elements", []) if isinstance(data, dict) else []
            return [self._parse_coursera(item) for item in elements][:RESULT_LIMIT]
        except (httpx.HTTPError, json.JSONDecodeError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Coursera no disponible, se usa muestra: %s", e)
            return list(COURSERA_FALLBACK)

    async def fetch_udemy(self, search: str) -> list[ExternalCourse]:
        """Buscar en Udemy; ante cualquier fallo, muestra curada."""
        params = {"search": search, "page_size": RESULT_LIMIT}
        headers = {"Content-Type": "application/json"}
        if self.udemy_token:
            headers["Authorization"] = f"Bearer {self.udemy_token}"

        try:
            response = await self.client.get(self.udemy_url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
            results = data.get("results", []) if isinstance(data, dict) else []
            return [self._parse_udemy(item) for item in results][:RESULT_LIMIT]
        except (httpx.HTTPError, json.JSONDecodeError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Udemy no disponible, se usa muestra: %s", e)
            return list(UDEMY_FALLBACK)

    def _parse_coursera(self, item: dict[str, Any]) -> ExternalCourse:
        skills = item.get("skills")
        return ExternalCourse(
            id=f"coursera-{item.get('id')}",
            title=item.get("name", ""),
            description=item.get("description") or "Course on Coursera",
            provider="Coursera",
            url=f"https://www.coursera.org/learn/{item.get('slug') or item.get('id')}",
            level=map_level(item.get("courseLevel")),
            skills=tuple(skills) if isinstance(skills, list) else (),
            instructor="Coursera Instructor" if item.get("instructorIds") else "Coursera",
            thumbnail=item.get("photoUrl"),
        )

    def _parse_udemy(self, item: dict[str, Any]) -> ExternalCourse:
        instructors = item.get("visible_instructors") or []
        instructor = instructors[0].get("display_name") if instructors else None
        return ExternalCourse(
            id=f"udemy-{item.get('id')}",
            title=item.get("title", ""),
            description=item.get("headline") or "Course on Udemy",
            provider="Udemy",
            url=f"https://www.udemy.com{item.get('url', '')}",
            level=map_level(item.get("instructional_level")),
            instructor=instructor or "Udemy Instructor",
            thumbnail=item.get("image_480x270") or item.get("image_240x135"),
            preview_video_url=item.get("preview_url") or None,
        )

    async def close(self) -> None:
        """Cerrar cliente HTTP."""
        await self.client.aclose()
