"""Fachada de la plataforma: catálogo, progreso, recomendaciones y evaluaciones."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from .certificates.manager import CertificateError, CertificateManager
from .config import Config, get_config
from .content import recommender
from .content.attempt import AssessmentAttempt, AssessmentLockedError
from .content.generator import AssessmentQuestion, AssessmentScore, generate_questions, score
from .core.course import Catalog, Course
from .core.persistence import JsonFileStore, ProgressStore
from .core.progress import ProgressTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dashboard:
    """Resumen del estudiante."""

    in_progress: list[Course]
    completed: list[Course]
    recommended: list[Course]


class LearnHub:
    """Coordina catálogo, progreso y evaluaciones para la interfaz."""

    def __init__(
        self,
        catalog: Catalog,
        store: ProgressStore,
        config: Config | None = None,
        certificates: CertificateManager | None = None,
    ) -> None:
        """Inicializar servicio con dependencias explícitas."""
        self.config = config or get_config()
        self.catalog = catalog
        self.tracker = ProgressTracker(catalog, store, watch_ratio=self.config.watch_ratio)
        self.certificates = certificates or CertificateManager(self.config.certificates_dir)

    @classmethod
    def from_config(cls, config: Config | None = None) -> LearnHub:
        """Construir con catálogo y almacén definidos en la configuración."""
        config = config or get_config()
        catalog = Catalog.load(config.catalog_path)
        return cls(catalog, JsonFileStore(config.store_path), config=config)

    # --- catálogo y recomendaciones ---

    def list_courses(self) -> list[Course]:
        return self.catalog.list_courses()

    def get_course(self, course_id: str) -> Course:
        return self.catalog.get_course(course_id)

    def search_courses(self, term: str = "", level: str = "All") -> list[Course]:
        return self.catalog.search(term, level)

    def list_recommended(self, skills: Iterable[str]) -> list[Course]:
        """Todos los cursos ordenados por relevancia."""
        return recommender.rank_courses(self.catalog.list_courses(), skills)

    def recommendation_sections(self, skills: Iterable[str]) -> dict[str, list[Course]]:
        """Secciones de la página de recomendaciones."""
        courses = self.catalog.list_courses()
        skill_list = list(skills)
        return {
            "popular": recommender.popular_courses(courses),
            "skill_matched": recommender.skill_matched_courses(courses, skill_list),
            "beginner": recommender.beginner_courses(courses),
            "trending": recommender.trending_courses(courses),
        }

    # --- progreso ---

    def get_progress(self, user_id: str, course_id: str) -> int:
        return self.tracker.get_progress(user_id, course_id)

    def mark_lesson_complete(self, user_id: str, course_id: str, lesson_id: str) -> None:
        self.tracker.mark_lesson_complete(user_id, course_id, lesson_id)

    def is_lesson_unlocked(self, user_id: str, course_id: str, lesson_index: int) -> bool:
        return self.tracker.is_lesson_unlocked(user_id, course_id, lesson_index)

    def record_watch_time(
        self,
        user_id: str,
        course_id: str,
        lesson_id: str,
        position: float,
        duration: float,
    ) -> bool:
        return self.tracker.record_watch_time(user_id, course_id, lesson_id, position, duration)

    def play_lesson(self, user_id: str, course_id: str, lesson_id: str) -> bool:
        return self.tracker.play_lesson(user_id, course_id, lesson_id)

    def is_course_completed(self, user_id: str, course_id: str) -> bool:
        return self.tracker.is_course_completed(user_id, course_id)

    def dashboard(self, user_id: str, skills: Iterable[str] = ()) -> Dashboard:
        """Cursos en curso, completados y recomendados."""
        return Dashboard(
            in_progress=self.tracker.in_progress_courses(user_id),
            completed=self.tracker.completed_courses(user_id),
            recommended=self.list_recommended(skills),
        )

    # --- evaluaciones ---

    def generate_questions(self, course_id: str) -> list[AssessmentQuestion]:
        course = self.catalog.get_course(course_id)
        return generate_questions(course, self.config.question_count)

    def can_take_assessment(self, user_id: str, course_id: str) -> bool:
        """La evaluación se habilita al ver todas las lecciones."""
        return self.get_progress(user_id, course_id) == 100

    def submit_assessment(
        self,
        user_id: str,
        course_id: str,
        answers: Sequence[int | None],
    ) -> AssessmentScore:
        """Corregir respuestas; si aprueba, registrar el curso como completado."""
        questions = self.generate_questions(course_id)
        result = score(answers, questions, self.config.pass_threshold)
        if result.passed:
            self.tracker.complete_course(user_id, course_id)
        logger.info(
            "Evaluación de %s para %s: %d%% (%s)",
            course_id,
            user_id or "anónimo",
            result.percent,
            "aprobada" if result.passed else "suspendida",
        )
        return result

    def start_assessment(
        self,
        user_id: str,
        course_id: str,
        clock: Callable[[], float] | None = None,
        on_deadline_exceeded: Callable[[AssessmentAttempt], None] | None = None,
    ) -> AssessmentAttempt:
        """Crear y comenzar un intento cronometrado."""
        if not self.can_take_assessment(user_id, course_id):
            raise AssessmentLockedError(
                f"Completa todas las lecciones de {course_id} antes de la evaluación"
            )

        attempt = AssessmentAttempt(
            question_factory=lambda: self.generate_questions(course_id),
            time_limit=self.config.time_limit,
            pass_threshold=self.config.pass_threshold,
            on_passed=lambda _result: self.tracker.complete_course(user_id, course_id),
            clock=clock or time.monotonic,
            on_deadline_exceeded=on_deadline_exceeded,
        )
        attempt.start()
        return attempt

    # --- certificados ---

    def issue_certificate(
        self,
        user_id: str,
        learner_name: str,
        course_id: str,
        completed_on: date | None = None,
    ) -> Path:
        """Emitir certificado de un curso aprobado."""
        course = self.catalog.get_course(course_id)
        if not self.is_course_completed(user_id, course_id):
            raise CertificateError(f"El curso {course_id} no está completado")
        return self.certificates.issue(learner_name, course, completed_on)

    def list_certificates(self) -> list[dict[str, Any]]:
        return self.certificates.list_certificates()
