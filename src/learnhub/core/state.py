"""Estado del progreso del estudiante."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def progress_key(user_id: str, course_id: str) -> str:
    return f"progress_{user_id}_{course_id}"


def completed_key(user_id: str) -> str:
    return f"completed_{user_id}"


def watch_key(user_id: str, lesson_id: str) -> str:
    return f"watch_{user_id}_{lesson_id}"


def last_lesson_key(user_id: str, course_id: str) -> str:
    return f"last_lesson_{user_id}_{course_id}"


def round_half_up(numerator: int, denominator: int) -> int:
    """Redondear numerator/denominator * 100 al entero más cercano (.5 hacia arriba)."""
    return (200 * numerator + denominator) // (2 * denominator)


@dataclass
class ProgressRecord:
    """Lecciones vistas de un usuario en un curso."""

    user_id: str
    course_id: str
    lessons: dict[str, bool] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return progress_key(self.user_id, self.course_id)

    def is_complete(self, lesson_id: str) -> bool:
        """Verificar si una lección está marcada como vista."""
        return bool(self.lessons.get(lesson_id, False))

    def mark(self, lesson_id: str) -> bool:
        """Marcar lección como vista. Retorna True si cambió algo."""
        if self.is_complete(lesson_id):
            return False
        self.lessons[lesson_id] = True
        return True

    def completed_count(self, lesson_ids: list[str]) -> int:
        """Contar lecciones vistas entre las indicadas."""
        return sum(1 for lesson_id in lesson_ids if self.is_complete(lesson_id))

    def percent(self, lesson_ids: list[str]) -> int:
        """Porcentaje de avance (0-100) sobre las lecciones indicadas."""
        if not lesson_ids:
            return 0
        return round_half_up(self.completed_count(lesson_ids), len(lesson_ids))

    def to_dict(self) -> dict[str, bool]:
        """Convertir a diccionario."""
        return dict(self.lessons)

    @classmethod
    def from_dict(cls, user_id: str, course_id: str, data: dict[str, Any]) -> ProgressRecord:
        """Crear desde diccionario."""
        return cls(
            user_id=user_id,
            course_id=course_id,
            lessons={str(k): bool(v) for k, v in data.items()},
        )


@dataclass
class CompletionRecord:
    """Cursos aprobados por un usuario (solo se añade)."""

    user_id: str
    course_ids: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return completed_key(self.user_id)

    def __contains__(self, course_id: object) -> bool:
        return course_id in self.course_ids

    def add(self, course_id: str) -> bool:
        """Añadir curso. Retorna True si no estaba."""
        if course_id in self.course_ids:
            return False
        self.course_ids.append(course_id)
        return True

    def to_list(self) -> list[str]:
        """Convertir a lista."""
        return list(self.course_ids)

    @classmethod
    def from_list(cls, user_id: str, data: list[Any]) -> CompletionRecord:
        """Crear desde lista."""
        course_ids: list[str] = []
        for item in data:
            if str(item) not in course_ids:
                course_ids.append(str(item))
        return cls(user_id=user_id, course_ids=course_ids)
