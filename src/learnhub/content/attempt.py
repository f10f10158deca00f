"""Intento de evaluación con límite de tiempo."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .generator import PASS_THRESHOLD, AssessmentQuestion, AssessmentScore, score

logger = logging.getLogger(__name__)

NOT_STARTED = "not_started"
IN_PROGRESS = "in_progress"
SUBMITTED = "submitted"
GRADED = "graded"
PASSED = "passed"
FAILED = "failed"

DEFAULT_TIME_LIMIT = 1800  # segundos


class AssessmentStateError(Exception):
    """Transición no permitida en un intento de evaluación."""

    pass


class AssessmentLockedError(Exception):
    """La evaluación aún no está disponible para el estudiante."""

    pass


class AssessmentAttempt:
    """Un intento: not_started -> in_progress -> submitted -> graded -> passed | failed.

    El plazo se compara contra un reloj monótono inyectable. Al vencer, el
    intento se entrega con las respuestas que haya y se invoca
    ``on_deadline_exceeded`` una sola vez.
    """

    def __init__(
        self,
        question_factory: Callable[[], list[AssessmentQuestion]],
        time_limit: float = DEFAULT_TIME_LIMIT,
        pass_threshold: int = PASS_THRESHOLD,
        clock: Callable[[], float] = time.monotonic,
        on_passed: Callable[[AssessmentScore], None] | None = None,
        on_deadline_exceeded: Callable[[AssessmentAttempt], None] | None = None,
    ) -> None:
        """Inicializar intento."""
        self._question_factory = question_factory
        self.time_limit = time_limit
        self.pass_threshold = pass_threshold
        self._clock = clock
        self._on_passed = on_passed
        self._on_deadline_exceeded = on_deadline_exceeded

        self.status = NOT_STARTED
        self.questions: list[AssessmentQuestion] = question_factory()
        self.answers: list[int | None] = [None] * len(self.questions)
        self.current_index = 0
        self.deadline: float | None = None
        self.result: AssessmentScore | None = None
        self.timed_out = False

    # --- consultas ---

    @property
    def is_finished(self) -> bool:
        return self.status in (PASSED, FAILED)

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer is not None)

    @property
    def all_answered(self) -> bool:
        return self.answered_count == len(self.questions)

    @property
    def current_question(self) -> AssessmentQuestion:
        return self.questions[self.current_index]

    def remaining_time(self) -> float:
        """Segundos restantes (el límite completo si no ha empezado)."""
        if self.deadline is None:
            return float(self.time_limit)
        return max(0.0, self.deadline - self._clock())

    # --- transiciones ---

    def _require(self, *states: str) -> None:
        if self.status not in states:
            raise AssessmentStateError(
                f"Operación no permitida en estado '{self.status}' (se requiere {', '.join(states)})"
            )

    def start(self) -> None:
        """Comenzar el intento y fijar el plazo."""
        self._require(NOT_STARTED)
        self.deadline = self._clock() + self.time_limit
        self.status = IN_PROGRESS

    def check_deadline(self) -> bool:
        """Entregar automáticamente si venció el plazo. Retorna True si lo hizo."""
        if self.status != IN_PROGRESS or self.deadline is None:
            return False
        if self._clock() < self.deadline:
            return False

        logger.info("Tiempo agotado: entrega automática con %d respuestas", self.answered_count)
        self.timed_out = True
        self.submit()
        if self._on_deadline_exceeded is not None:
            self._on_deadline_exceeded(self)
        return True

    def _ensure_active(self) -> None:
        self.check_deadline()
        self._require(IN_PROGRESS)

    def select_answer(self, option: int) -> None:
        """Registrar respuesta para la pregunta actual."""
        self._ensure_active()
        if not 0 <= option < len(self.current_question.options):
            raise ValueError(f"Opción fuera de rango: {option}")
        self.answers[self.current_index] = option

    def go_to(self, index: int) -> None:
        """Saltar a una pregunta."""
        self._ensure_active()
        if not 0 <= index < len(self.questions):
            raise IndexError(f"Pregunta fuera de rango: {index}")
        self.current_index = index

    def next_question(self) -> None:
        self.go_to(min(self.current_index + 1, len(self.questions) - 1))

    def previous_question(self) -> None:
        self.go_to(max(0, self.current_index - 1))

    def submit(self) -> AssessmentScore:
        """Entregar y corregir."""
        self._require(IN_PROGRESS)
        self.status = SUBMITTED

        self.result = score(self.answers, self.questions, self.pass_threshold)
        self.status = GRADED
        logger.info(
            "Evaluación corregida: %d/%d (%d%%)",
            self.result.correct_count,
            len(self.questions),
            self.result.percent,
        )

        if self.result.passed:
            self.status = PASSED
            if self._on_passed is not None:
                self._on_passed(self.result)
        else:
            self.status = FAILED
        return self.result

    def retry(self) -> None:
        """Volver a empezar tras suspender, con preguntas regeneradas."""
        self._require(FAILED)
        self.questions = self._question_factory()
        self.answers = [None] * len(self.questions)
        self.current_index = 0
        self.deadline = None
        self.result = None
        self.timed_out = False
        self.status = NOT_STARTED
