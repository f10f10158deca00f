"""Modelos de datos para cursos, lecciones y catálogo."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

LEVELS = ("Beginner", "Intermediate", "Advanced")

DEFAULT_TOPICS = [
    "Introduction and Setup",
    "Core Concepts",
    "Practical Examples",
    "Advanced Techniques",
    "Best Practices",
    "Real-world Projects",
    "Troubleshooting",
    "Performance Optimization",
    "Security Considerations",
    "Deployment Strategies",
]

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.yaml"


class CatalogError(ValueError):
    """Documento de catálogo inválido."""

    pass


class CourseNotFoundError(LookupError):
    """Curso inexistente en el catálogo."""

    def __init__(self, course_id: str) -> None:
        super().__init__(f"Curso no encontrado: {course_id}")
        self.course_id = course_id


class LessonNotFoundError(LookupError):
    """Lección inexistente dentro de un curso."""

    def __init__(self, course_id: str, lesson_id: str) -> None:
        super().__init__(f"Lección no encontrada: {lesson_id} (curso {course_id})")
        self.course_id = course_id
        self.lesson_id = lesson_id


@dataclass(frozen=True)
class Lesson:
    """Una lección en video."""

    id: str
    title: str
    description: str = ""
    duration: int = 0  # segundos

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        """Crear desde diccionario."""
        if not data.get("id"):
            raise CatalogError("Lección sin id")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            duration=int(data.get("duration", 0)),
        )


def generate_lessons(prefix: str, count: int, topics: list[str] | None = None) -> list[Lesson]:
    """Generar lecciones de relleno con los temas por defecto."""
    lesson_topics = topics or DEFAULT_TOPICS
    return [
        Lesson(
            id=f"{prefix}-lesson-{i + 1}",
            title=lesson_topics[i % len(lesson_topics)] or f"Lesson {i + 1}",
            description="Comprehensive lesson with hands-on exercises and real-world applications.",
            duration=600 + (i % 5) * 120,
        )
        for i in range(count)
    ]


@dataclass(frozen=True)
class Course:
    """Curso del catálogo. Inmutable tras la carga."""

    id: str
    title: str
    description: str
    level: str = "Beginner"
    price: float = 0.0
    duration: str = ""  # p.ej. "8h 30m"
    students: int = 0
    rating: float = 0.0  # 0-5
    skills: tuple[str, ...] = ()
    instructor: str = ""
    thumbnail: str = ""
    lessons: tuple[Lesson, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "level": self.level,
            "price": self.price,
            "duration": self.duration,
            "students": self.students,
            "rating": self.rating,
            "skills": list(self.skills),
            "instructor": self.instructor,
            "thumbnail": self.thumbnail,
            "lessons": [lesson.to_dict() for lesson in self.lessons],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Course:
        """Crear desde diccionario, validando el registro."""
        course_id = data.get("id")
        if not course_id:
            raise CatalogError("Curso sin id")

        level = data.get("level", "Beginner")
        if level not in LEVELS:
            raise CatalogError(f"Nivel inválido para {course_id}: {level}")

        rating = float(data.get("rating", 0.0))
        if not 0.0 <= rating <= 5.0:
            raise CatalogError(f"Rating fuera de rango para {course_id}: {rating}")

        students = int(data.get("students", 0))
        price = float(data.get("price", 0.0))
        if students < 0 or price < 0:
            raise CatalogError(f"Valores negativos en {course_id}")

        if "lessons" in data:
            lessons = [Lesson.from_dict(item) for item in data.get("lessons") or []]
        else:
            lessons = generate_lessons(
                data.get("lesson_prefix", course_id),
                int(data.get("lesson_count", 0)),
            )

        seen: set[str] = set()
        for lesson in lessons:
            if lesson.id in seen:
                raise CatalogError(f"Lección duplicada en {course_id}: {lesson.id}")
            seen.add(lesson.id)

        return cls(
            id=str(course_id),
            title=data.get("title", ""),
            description=data.get("description", ""),
            level=level,
            price=price,
            duration=data.get("duration", ""),
            students=students,
            rating=rating,
            skills=tuple(data.get("skills", [])),
            instructor=data.get("instructor", ""),
            thumbnail=data.get("thumbnail", ""),
            lessons=tuple(lessons),
        )

    def get_lesson(self, lesson_id: str) -> Lesson | None:
        """Obtener lección por id."""
        for lesson in self.lessons:
            if lesson.id == lesson_id:
                return lesson
        return None

    def lesson_index(self, lesson_id: str) -> int:
        """Posición de la lección en el curso, -1 si no existe."""
        for index, lesson in enumerate(self.lessons):
            if lesson.id == lesson_id:
                return index
        return -1


class Catalog:
    """Lista fija de cursos, en el orden de carga."""

    def __init__(self, courses: Iterable[Course]) -> None:
        """Inicializar con los cursos ya validados."""
        self._courses: tuple[Course, ...] = tuple(courses)
        self._by_id: dict[str, Course] = {}
        for course in self._courses:
            if course.id in self._by_id:
                raise CatalogError(f"Curso duplicado: {course.id}")
            self._by_id[course.id] = course

    @classmethod
    def from_dicts(cls, items: Iterable[dict[str, Any]]) -> Catalog:
        """Crear catálogo desde registros sin tipar."""
        return cls(Course.from_dict(item) for item in items)

    @classmethod
    def load(cls, path: Path | None = None) -> Catalog:
        """Cargar catálogo desde YAML (por defecto, el incluido)."""
        catalog_file = Path(path) if path else BUNDLED_CATALOG

        if not catalog_file.exists():
            raise FileNotFoundError(f"Catalog file not found: {catalog_file}")

        with open(catalog_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict) or not isinstance(data.get("courses", []), list):
            raise CatalogError(f"Formato de catálogo inválido: {catalog_file}")

        catalog = cls.from_dicts(data.get("courses", []))
        logger.info("Catálogo cargado: %d cursos desde %s", len(catalog), catalog_file)
        return catalog

    def __len__(self) -> int:
        return len(self._courses)

    def __contains__(self, course_id: object) -> bool:
        return course_id in self._by_id

    def list_courses(self) -> list[Course]:
        """Listar cursos en el orden de carga."""
        return list(self._courses)

    def get_course(self, course_id: str) -> Course:
        """Obtener curso por id."""
        try:
            return self._by_id[course_id]
        except KeyError:
            raise CourseNotFoundError(course_id) from None

    def search(self, term: str = "", level: str = "All") -> list[Course]:
        """Filtrar por texto en título/descripción y por nivel."""
        needle = term.strip().lower()
        results = []
        for course in self._courses:
            matches_search = (
                needle in course.title.lower() or needle in course.description.lower()
            )
            matches_level = level == "All" or course.level == level
            if matches_search and matches_level:
                results.append(course)
        return results
