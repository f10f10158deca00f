"""Tests para seguimiento de progreso."""

import json
import tempfile
from pathlib import Path

import pytest

from learnhub.core.course import Catalog, Course, CourseNotFoundError, LessonNotFoundError
from learnhub.core.persistence import JsonFileStore, MemoryStore
from learnhub.core.progress import ProgressTracker, is_lesson_unlocked
from learnhub.core.state import CompletionRecord, ProgressRecord, round_half_up


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def tracker(catalog: Catalog, store: MemoryStore) -> ProgressTracker:
    return ProgressTracker(catalog, store)


class TestProgressTracker:
    """Tests para lecciones vistas y porcentaje."""

    def test_progress_starts_at_zero(self, tracker: ProgressTracker) -> None:
        """Test sin registro previo."""
        assert tracker.get_progress("ana", "py-basics") == 0

    def test_progress_is_rounded(self, tracker: ProgressTracker) -> None:
        """Test porcentaje redondeado."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert tracker.get_progress("ana", "py-basics") == 33

        tracker.mark_lesson_complete("ana", "py-basics", "py-1")
        assert tracker.get_progress("ana", "py-basics") == 67

        tracker.mark_lesson_complete("ana", "py-basics", "py-2")
        assert tracker.get_progress("ana", "py-basics") == 100

    def test_progress_is_monotonic(self, tracker: ProgressTracker) -> None:
        """Test el avance nunca baja."""
        previous = 0
        for lesson_id in ["py-2", "py-0", "py-2", "py-1", "py-0"]:
            tracker.mark_lesson_complete("ana", "py-basics", lesson_id)
            current = tracker.get_progress("ana", "py-basics")
            assert previous <= current <= 100
            previous = current

    def test_mark_is_idempotent(self, tracker: ProgressTracker, store: MemoryStore) -> None:
        """Test marcar dos veces deja el mismo registro."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        once = store.get("progress_ana_py-basics")
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")

        assert store.get("progress_ana_py-basics") == once
        assert json.loads(once) == {"py-0": True}

    def test_anonymous_user_is_not_tracked(self, tracker: ProgressTracker, store: MemoryStore) -> None:
        """Test usuario vacío: no-op y lecturas a cero."""
        tracker.mark_lesson_complete("", "py-basics", "py-0")
        tracker.complete_course("", "py-basics")

        assert store.keys() == []
        assert tracker.get_progress("", "py-basics") == 0
        assert tracker.is_course_completed("", "py-basics") is False

    def test_zero_lesson_course(self, tracker: ProgressTracker) -> None:
        """Test curso sin lecciones no divide por cero."""
        assert tracker.get_progress("ana", "empty") == 0

    def test_unknown_course_raises(self, tracker: ProgressTracker) -> None:
        """Test curso inexistente."""
        with pytest.raises(CourseNotFoundError):
            tracker.get_progress("ana", "nope")
        with pytest.raises(CourseNotFoundError):
            tracker.mark_lesson_complete("ana", "nope", "py-0")

    def test_unknown_lesson_raises(self, tracker: ProgressTracker) -> None:
        """Test lección ajena al curso."""
        with pytest.raises(LessonNotFoundError):
            tracker.mark_lesson_complete("ana", "py-basics", "other-1")

    def test_progress_is_per_user(self, tracker: ProgressTracker) -> None:
        """Test claves separadas por usuario."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert tracker.get_progress("bob", "py-basics") == 0

    def test_corrupt_value_reads_as_empty(self, tracker: ProgressTracker, store: MemoryStore) -> None:
        """Test valor corrupto en el almacén."""
        store.set("progress_ana_py-basics", "{not json")
        assert tracker.get_progress("ana", "py-basics") == 0

        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert tracker.get_progress("ana", "py-basics") == 33

    def test_next_lesson(self, tracker: ProgressTracker, python_course: Course) -> None:
        """Test siguiente lección pendiente."""
        assert tracker.next_lesson("ana", python_course).id == "py-0"
        for lesson in python_course.lessons:
            tracker.mark_lesson_complete("ana", "py-basics", lesson.id)
        assert tracker.next_lesson("ana", python_course) is None


class TestLessonUnlock:
    """Tests para desbloqueo secuencial."""

    def test_first_lesson_always_unlocked(self, python_course: Course) -> None:
        """Test lección 0."""
        record = ProgressRecord(user_id="ana", course_id="py-basics")
        assert is_lesson_unlocked(python_course, 0, record)
        assert not is_lesson_unlocked(python_course, 1, record)

    def test_out_of_order_completion_does_not_unlock(self, python_course: Course) -> None:
        """Test L2 sigue bloqueada aunque L0 y L2 estén vistas."""
        record = ProgressRecord(
            user_id="ana",
            course_id="py-basics",
            lessons={"py-0": True, "py-2": True},
        )
        assert is_lesson_unlocked(python_course, 1, record)
        assert not is_lesson_unlocked(python_course, 2, record)

        record.mark("py-1")
        assert is_lesson_unlocked(python_course, 2, record)

    def test_index_out_of_range(self, python_course: Course) -> None:
        """Test índices fuera de la lista."""
        record = ProgressRecord(user_id="ana", course_id="py-basics")
        assert not is_lesson_unlocked(python_course, -1, record)
        assert not is_lesson_unlocked(python_course, 3, record)

    def test_tracker_unlock_uses_store(self, tracker: ProgressTracker) -> None:
        """Test desbloqueo a partir del registro guardado."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert tracker.is_lesson_unlocked("ana", "py-basics", 1)
        assert not tracker.is_lesson_unlocked("ana", "py-basics", 2)


class TestCompletion:
    """Tests para cursos completados."""

    def test_complete_course_is_idempotent(self, tracker: ProgressTracker, store: MemoryStore) -> None:
        """Test añadir dos veces."""
        tracker.complete_course("ana", "py-basics")
        tracker.complete_course("ana", "py-basics")

        assert json.loads(store.get("completed_ana")) == ["py-basics"]
        assert tracker.is_course_completed("ana", "py-basics")
        assert not tracker.is_course_completed("ana", "empty")

    def test_dashboard_lists(self, tracker: ProgressTracker) -> None:
        """Test cursos en curso y completados."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert [c.id for c in tracker.in_progress_courses("ana")] == ["py-basics"]

        tracker.complete_course("ana", "py-basics")
        assert [c.id for c in tracker.completed_courses("ana")] == ["py-basics"]

    def test_record_serialization(self) -> None:
        """Test registro de completados desde lista con repetidos."""
        record = CompletionRecord.from_list("ana", ["a", "b", "a"])
        assert record.to_list() == ["a", "b"]
        assert record.key == "completed_ana"


class TestWatchTime:
    """Tests para reproducción de video."""

    def test_watch_time_is_monotonic(self, tracker: ProgressTracker) -> None:
        """Test la posición vista solo avanza."""
        tracker.record_watch_time("ana", "py-basics", "py-0", 4, 600)
        tracker.record_watch_time("ana", "py-basics", "py-0", 2, 600)

        assert tracker.get_watched_time("ana", "py-0") == 4.0
        assert tracker.get_last_lesson_id("ana", "py-basics") == "py-0"

    def test_cannot_skip_ahead(self, tracker: ProgressTracker) -> None:
        """Test saltar al final solo avanza cinco segundos."""
        assert tracker.record_watch_time("ana", "py-basics", "py-0", 600, 600) is False
        assert tracker.get_watched_time("ana", "py-0") == 5.0

        assert tracker.record_watch_time("ana", "py-basics", "py-0", 9, 600) is False
        assert tracker.get_watched_time("ana", "py-0") == 9.0
        assert tracker.get_progress("ana", "py-basics") == 0

    def test_locked_lesson_is_not_recorded(self, tracker: ProgressTracker, store: MemoryStore) -> None:
        """Test lección bloqueada no registra avance."""
        assert tracker.record_watch_time("ana", "py-basics", "py-2", 600, 600) is False

        assert store.keys() == []
        assert tracker.get_watched_time("ana", "py-2") == 0.0
        assert tracker.get_progress("ana", "py-basics") == 0

    def test_completed_lesson_can_seek_freely(self, tracker: ProgressTracker) -> None:
        """Test lección vista admite saltos."""
        tracker.mark_lesson_complete("ana", "py-basics", "py-0")
        assert tracker.record_watch_time("ana", "py-basics", "py-0", 500, 600) is True
        assert tracker.get_watched_time("ana", "py-0") == 500.0

    def test_lesson_completes_at_95_percent(self, tracker: ProgressTracker) -> None:
        """Test umbral de finalización con reproducción continua."""
        completed = False
        for position in range(5, 571, 5):
            completed = tracker.record_watch_time("ana", "py-basics", "py-0", position, 600)
            if position < 570:
                assert completed is False
        assert completed is True
        assert tracker.get_progress("ana", "py-basics") == 33

    def test_play_lesson_in_order(self, tracker: ProgressTracker) -> None:
        """Test reproducir lecciones una tras otra."""
        assert tracker.play_lesson("ana", "py-basics", "py-1") is False
        assert tracker.play_lesson("ana", "py-basics", "py-0") is True
        assert tracker.play_lesson("ana", "py-basics", "py-1") is True
        assert tracker.get_progress("ana", "py-basics") == 67

    def test_unknown_duration_never_completes(self, tracker: ProgressTracker) -> None:
        """Test duración desconocida."""
        assert tracker.record_watch_time("ana", "py-basics", "py-0", 900, 0) is False


class TestStores:
    """Tests para almacenes clave-valor."""

    def test_json_store_persists(self) -> None:
        """Test guardar y recargar."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "progress.json"
            store = JsonFileStore(path)
            store.set("progress_ana_py-basics", json.dumps({"py-0": True}))

            reloaded = JsonFileStore(path)
            assert reloaded.get("progress_ana_py-basics") == '{"py-0": true}'
            assert reloaded.get("missing") is None

    def test_json_store_corrupt_file(self) -> None:
        """Test archivo corrupto se trata como vacío."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "progress.json"
            path.write_text("{broken", encoding="utf-8")

            store = JsonFileStore(path)
            assert store.keys() == []

    def test_tracker_over_file_store(self, catalog: Catalog) -> None:
        """Test progreso sobrevive a reabrir el almacén."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "progress.json"
            ProgressTracker(catalog, JsonFileStore(path)).mark_lesson_complete("ana", "py-basics", "py-0")

            tracker = ProgressTracker(catalog, JsonFileStore(path))
            assert tracker.get_progress("ana", "py-basics") == 33


def test_round_half_up() -> None:
    assert round_half_up(1, 8) == 13
    assert round_half_up(1, 3) == 33
    assert round_half_up(0, 5) == 0
    assert round_half_up(7, 7) == 100
