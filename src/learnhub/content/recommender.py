"""Ordenación de cursos por relevancia para un estudiante."""

from __future__ import annotations

from typing import Iterable

from ..core.course import Course

POPULARITY_THRESHOLD = 10000
POPULARITY_BOOST = 0.5
RATING_BASELINE = 4.0
RATING_WEIGHT = 0.5


def score_course(course: Course, skills: Iterable[str]) -> float:
    """Coincidencias de skills + impulso por popularidad + impulso por rating."""
    skill_set = set(skills)
    overlap = sum(1 for skill in course.skills if skill in skill_set)
    popularity = POPULARITY_BOOST if course.students > POPULARITY_THRESHOLD else 0.0
    rating = (course.rating - RATING_BASELINE) * RATING_WEIGHT
    return overlap + popularity + rating


def rank_courses(courses: Iterable[Course], skills: Iterable[str]) -> list[Course]:
    """Todos los cursos, de mayor a menor puntuación.

    ``sorted`` es estable incluso con ``reverse=True``: los empates
    conservan el orden del catálogo.
    """
    skill_set = set(skills)
    return sorted(courses, key=lambda c: score_course(c, skill_set), reverse=True)


def popular_courses(courses: Iterable[Course], limit: int = 6) -> list[Course]:
    """Más populares por rating * estudiantes."""
    ranked = sorted(courses, key=lambda c: c.rating * c.students, reverse=True)
    return ranked[:limit]


def skill_matched_courses(courses: Iterable[Course], skills: Iterable[str], limit: int = 6) -> list[Course]:
    """Cursos que comparten al menos una skill, por rating."""
    skill_set = set(skills)
    if not skill_set:
        return []
    matched = [c for c in courses if any(skill in skill_set for skill in c.skills)]
    return sorted(matched, key=lambda c: c.rating, reverse=True)[:limit]


def beginner_courses(courses: Iterable[Course], limit: int = 6) -> list[Course]:
    """Cursos de nivel inicial, por rating."""
    matched = [c for c in courses if c.level == "Beginner"]
    return sorted(matched, key=lambda c: c.rating, reverse=True)[:limit]


def trending_courses(courses: Iterable[Course], limit: int = 4) -> list[Course]:
    """Cursos con más de 10000 estudiantes, por estudiantes."""
    matched = [c for c in courses if c.students > POPULARITY_THRESHOLD]
    return sorted(matched, key=lambda c: c.students, reverse=True)[:limit]
