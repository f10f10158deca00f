"""Seguimiento de lecciones vistas y cursos completados."""

from __future__ import annotations

import json
import logging
from typing import Any

from .course import Catalog, Course, Lesson, LessonNotFoundError
from .persistence import ProgressStore
from .state import (
    CompletionRecord,
    ProgressRecord,
    completed_key,
    last_lesson_key,
    progress_key,
    watch_key,
)

logger = logging.getLogger(__name__)

SEEK_TOLERANCE = 5.0  # segundos


def is_lesson_unlocked(course: Course, lesson_index: int, progress: ProgressRecord) -> bool:
    """La lección i está disponible solo si la i-1 está vista."""
    if lesson_index < 0 or lesson_index >= len(course.lessons):
        return False
    if lesson_index == 0:
        return True
    previous = course.lessons[lesson_index - 1]
    return progress.is_complete(previous.id)


class ProgressTracker:
    """Registra avance por (usuario, curso) sobre un ProgressStore."""

    def __init__(self, catalog: Catalog, store: ProgressStore, watch_ratio: float = 0.95) -> None:
        """Inicializar tracker."""
        self.catalog = catalog
        self.store = store
        self.watch_ratio = watch_ratio

    # --- lectura/escritura de registros ---

    def _read_json(self, key: str, default: Any) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Valor corrupto en %s, se ignora", key)
            return default
        if not isinstance(value, type(default)):
            logger.warning("Valor con tipo inesperado en %s, se ignora", key)
            return default
        return value

    def _write_json(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value))

    def load_progress(self, user_id: str, course_id: str) -> ProgressRecord:
        """Cargar registro de progreso (vacío si no existe)."""
        data = self._read_json(progress_key(user_id, course_id), {}) if user_id else {}
        return ProgressRecord.from_dict(user_id, course_id, data)

    def load_completions(self, user_id: str) -> CompletionRecord:
        """Cargar cursos completados del usuario."""
        data = self._read_json(completed_key(user_id), []) if user_id else []
        return CompletionRecord.from_list(user_id, data)

    # --- operaciones ---

    def mark_lesson_complete(self, user_id: str, course_id: str, lesson_id: str) -> None:
        """Marcar lección como vista. Sin usuario no se registra nada."""
        if not user_id:
            return

        course = self.catalog.get_course(course_id)
        if course.get_lesson(lesson_id) is None:
            raise LessonNotFoundError(course_id, lesson_id)

        record = self.load_progress(user_id, course_id)
        if record.mark(lesson_id):
            self._write_json(record.key, record.to_dict())
            logger.info("Lección completada: %s/%s (usuario %s)", course_id, lesson_id, user_id)

    def get_progress(self, user_id: str, course_id: str) -> int:
        """Porcentaje de lecciones vistas (0-100)."""
        if not user_id:
            return 0
        course = self.catalog.get_course(course_id)
        record = self.load_progress(user_id, course_id)
        return record.percent([lesson.id for lesson in course.lessons])

    def is_lesson_unlocked(self, user_id: str, course_id: str, lesson_index: int) -> bool:
        """Verificar desbloqueo secuencial para un usuario."""
        course = self.catalog.get_course(course_id)
        return is_lesson_unlocked(course, lesson_index, self.load_progress(user_id, course_id))

    def next_lesson(self, user_id: str, course: Course) -> Lesson | None:
        """Primera lección aún no vista."""
        record = self.load_progress(user_id, course.id)
        for lesson in course.lessons:
            if not record.is_complete(lesson.id):
                return lesson
        return None

    def complete_course(self, user_id: str, course_id: str) -> None:
        """Registrar curso aprobado (idempotente)."""
        if not user_id:
            return
        record = self.load_completions(user_id)
        if record.add(course_id):
            self._write_json(record.key, record.to_list())
            logger.info("Curso completado: %s (usuario %s)", course_id, user_id)

    def is_course_completed(self, user_id: str, course_id: str) -> bool:
        """Verificar si el usuario aprobó el curso."""
        if not user_id:
            return False
        return course_id in self.load_completions(user_id)

    # --- reproducción de video ---

    def get_watched_time(self, user_id: str, lesson_id: str) -> float:
        """Posición más avanzada vista de una lección (segundos)."""
        if not user_id:
            return 0.0
        raw = self.store.get(watch_key(user_id, lesson_id))
        try:
            return float(raw) if raw is not None else 0.0
        except ValueError:
            logger.warning("Tiempo visto corrupto para %s, se ignora", lesson_id)
            return 0.0

    def record_watch_time(
        self,
        user_id: str,
        course_id: str,
        lesson_id: str,
        position: float,
        duration: float,
    ) -> bool:
        """Registrar avance de reproducción. Retorna True si la lección quedó vista."""
        if not user_id:
            return False

        course = self.catalog.get_course(course_id)
        index = course.lesson_index(lesson_id)
        if index < 0:
            raise LessonNotFoundError(course_id, lesson_id)

        record = self.load_progress(user_id, course_id)
        if not is_lesson_unlocked(course, index, record):
            logger.warning("Lección bloqueada: %s/%s (usuario %s)", course_id, lesson_id, user_id)
            return record.is_complete(lesson_id)

        previous = self.get_watched_time(user_id, lesson_id)
        position = float(position)
        if not record.is_complete(lesson_id):
            # sin saltar por delante de lo visto
            position = min(position, previous + SEEK_TOLERANCE)
        watched = max(previous, position)
        self.store.set(watch_key(user_id, lesson_id), str(watched))
        self.store.set(last_lesson_key(user_id, course_id), lesson_id)

        if duration > 0 and watched >= duration * self.watch_ratio:
            self.mark_lesson_complete(user_id, course_id, lesson_id)

        return self.load_progress(user_id, course_id).is_complete(lesson_id)

    def play_lesson(self, user_id: str, course_id: str, lesson_id: str) -> bool:
        """Reproducir de corrido desde lo ya visto hasta el final."""
        lesson = self.catalog.get_course(course_id).get_lesson(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(course_id, lesson_id)

        position = self.get_watched_time(user_id, lesson_id)
        completed = self.record_watch_time(user_id, course_id, lesson_id, position, lesson.duration)
        while not completed and position < lesson.duration:
            next_position = min(position + SEEK_TOLERANCE, float(lesson.duration))
            completed = self.record_watch_time(user_id, course_id, lesson_id, next_position, lesson.duration)
            if self.get_watched_time(user_id, lesson_id) <= position:
                break
            position = next_position
        return completed

    def get_last_lesson_id(self, user_id: str, course_id: str) -> str | None:
        """Última lección visitada, para retomar."""
        if not user_id:
            return None
        return self.store.get(last_lesson_key(user_id, course_id))

    # --- panel ---

    def in_progress_courses(self, user_id: str) -> list[Course]:
        """Cursos empezados y sin terminar."""
        return [
            course
            for course in self.catalog.list_courses()
            if 0 < self.get_progress(user_id, course.id) < 100
        ]

    def completed_courses(self, user_id: str) -> list[Course]:
        """Cursos aprobados, en orden de catálogo."""
        record = self.load_completions(user_id)
        return [course for course in self.catalog.list_courses() if course.id in record]
