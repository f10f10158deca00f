from __future__ import annotations

from pathlib import Path

import pytest

from learnhub.config import Config, set_config
from learnhub.core.course import Catalog, Course, Lesson
from learnhub.core.persistence import MemoryStore
from learnhub.service import LearnHub


@pytest.fixture(autouse=True)
def config(tmp_path: Path) -> Config:
    """Configuración aislada en un directorio temporal para cada test."""
    cfg = Config(data_dir=tmp_path / "data")
    set_config(cfg)
    return cfg


def _lessons(prefix: str, titles: list[str]) -> tuple[Lesson, ...]:
    return tuple(
        Lesson(id=f"{prefix}-{i}", title=title, duration=600)
        for i, title in enumerate(titles)
    )


@pytest.fixture
def python_course() -> Course:
    return Course(
        id="py-basics",
        title="Python Basics",
        description="Learn Python from scratch.",
        level="Beginner",
        students=12000,
        rating=4.6,
        skills=("Python", "Programming"),
        instructor="Ada Lovelace",
        lessons=_lessons("py", ["Intro", "Variables", "Functions"]),
    )


@pytest.fixture
def empty_course() -> Course:
    return Course(id="empty", title="Coming Soon", description="No lessons yet.")


@pytest.fixture
def catalog(python_course: Course, empty_course: Course) -> Catalog:
    return Catalog([python_course, empty_course])


@pytest.fixture
def hub(catalog: Catalog, config: Config) -> LearnHub:
    return LearnHub(catalog, MemoryStore(), config=config)
