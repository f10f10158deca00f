"""Generador determinista de evaluaciones de opción múltiple."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from ..core.state import round_half_up

if TYPE_CHECKING:
    from ..core.course import Course
    from ..providers.client import ExternalCourse

logger = logging.getLogger(__name__)

QUESTION_COUNT = 10
EXTERNAL_QUESTION_COUNT = 8
OPTION_COUNT = 4
PASS_THRESHOLD = 70

FALLBACK_TOPIC = "Core Concepts"
FALLBACK_SKILL = "Concept"


@dataclass(frozen=True)
class AssessmentQuestion:
    """Una pregunta con cuatro opciones y una correcta."""

    stem: str
    options: tuple[str, ...]
    correct_index: int

    def __post_init__(self) -> None:
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"Se esperaban {OPTION_COUNT} opciones, hay {len(self.options)}")
        if not 0 <= self.correct_index < OPTION_COUNT:
            raise ValueError(f"Índice correcto fuera de rango: {self.correct_index}")

    def is_correct(self, answer: int | None) -> bool:
        return answer is not None and answer == self.correct_index

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "question": self.stem,
            "options": list(self.options),
            "correctAnswer": self.correct_index,
        }


@dataclass(frozen=True)
class AssessmentScore:
    """Resultado de corregir una evaluación."""

    correct_count: int
    percent: int
    passed: bool

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "correct_count": self.correct_count,
            "percent": self.percent,
            "passed": self.passed,
        }


def _place_accurate(options: list[str], correct: int) -> tuple[str, ...]:
    """Rotar a la derecha para que la opción 0 quede en ``correct``."""
    rotated = deque(options)
    rotated.rotate(correct)
    return tuple(rotated)


def generate_questions(course: Course, count: int = QUESTION_COUNT) -> list[AssessmentQuestion]:
    """Generar la evaluación de un curso a partir de sus lecciones y skills.

    La semilla es la longitud del id del curso: misma entrada, misma salida.
    """
    topics = [lesson.title for lesson in course.lessons] or [FALLBACK_TOPIC]
    skills = list(course.skills) or [FALLBACK_SKILL]
    seed = len(course.id)

    questions = []
    for i in range(count):
        topic = topics[i % len(topics)] or f"Topic {i + 1}"
        skill = skills[(i + seed) % len(skills)]
        correct = (i + seed) % OPTION_COUNT
        options = [
            f"A practical application of {topic} in {skill}.",
            f"An unrelated fact not tied to {topic}.",
            f"A definition that partially describes {topic}.",
            f"A common misconception about {topic}.",
        ]
        questions.append(
            AssessmentQuestion(
                stem=f'In the context of {skill}, which statement about "{topic}" is most accurate?',
                options=_place_accurate(options, correct),
                correct_index=correct,
            )
        )

    logger.debug("Evaluación generada para %s: %d preguntas", course.id, len(questions))
    return questions


def generate_external_questions(
    item: ExternalCourse,
    count: int = EXTERNAL_QUESTION_COUNT,
) -> list[AssessmentQuestion]:
    """Generar evaluación para un curso de un proveedor externo."""
    topics = list(item.skills) + ([item.title] if item.title else [])
    if not topics:
        topics = [FALLBACK_TOPIC]
    seed = len(item.id)

    questions = []
    for i in range(count):
        topic = topics[i % len(topics)] or f"Topic {i + 1}"
        correct = (i + seed) % OPTION_COUNT
        options = [
            f"A best-practice application of {topic}.",
            f"An unrelated statement about {topic}.",
            f"A partially correct statement about {topic}.",
            f"A common mistake when applying {topic}.",
        ]
        questions.append(
            AssessmentQuestion(
                stem=f'Which statement best reflects {topic} in "{item.title}"?',
                options=_place_accurate(options, correct),
                correct_index=correct,
            )
        )
    return questions


def score(
    answers: Sequence[int | None],
    questions: Sequence[AssessmentQuestion],
    pass_threshold: int = PASS_THRESHOLD,
) -> AssessmentScore:
    """Corregir respuestas. Sin preguntas, la evaluación se da por suspendida."""
    if not questions:
        return AssessmentScore(correct_count=0, percent=0, passed=False)

    correct_count = 0
    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else None
        if question.is_correct(answer):
            correct_count += 1

    total = len(questions)
    percent = round_half_up(correct_count, total)
    return AssessmentScore(
        correct_count=correct_count,
        percent=percent,
        passed=percent >= pass_threshold,
    )
