"""Core: catálogo, estado, persistencia y progreso."""

from .course import Catalog, CatalogError, Course, CourseNotFoundError, Lesson, LessonNotFoundError
from .persistence import JsonFileStore, MemoryStore, ProgressStore
from .progress import ProgressTracker, is_lesson_unlocked
from .state import CompletionRecord, ProgressRecord

__all__ = [
    "Catalog",
    "CatalogError",
    "Course",
    "CourseNotFoundError",
    "Lesson",
    "LessonNotFoundError",
    "JsonFileStore",
    "MemoryStore",
    "ProgressStore",
    "ProgressTracker",
    "is_lesson_unlocked",
    "CompletionRecord",
    "ProgressRecord",
]
