"""
Tests for the debounced local persistence layer.
"""

import json
import logging
from pathlib import Path

import pytest

from flowfocus.models.entities import Note
from flowfocus.models.settings import StorageKeys
from flowfocus.models.storage import InMemoryBackend, JsonFileBackend, LocalPersistence, create_persistence


class TestLocalPersistenceLoad:
    """Test cases for reading from persistence."""

    def test_missing_key_returns_none(self, persistence: LocalPersistence) -> None:
        """Absent keys load as None."""
        assert persistence.load("nothing-here") is None

    def test_malformed_json_is_logged_and_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unparseable stored data is treated as absent."""
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: "{not json"}), debounce_seconds=0)

        with caplog.at_level(logging.ERROR):
            assert persistence.load(StorageKeys.NOTES) is None

        assert StorageKeys.NOTES in caplog.text

    def test_load_collection_falls_back_to_default_copy(self) -> None:
        """Malformed data yields a fresh copy of the default collection."""
        default = [Note(id="n1", title="Default")]
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: "garbage"}), debounce_seconds=0)

        loaded = persistence.load_collection(StorageKeys.NOTES, Note, default)

        assert [note.id for note in loaded] == ["n1"]
        assert loaded[0] is not default[0]

    def test_load_collection_rejects_non_list(self) -> None:
        """A JSON object where an array is expected falls back to the default."""
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: '{"id": "n1"}'}), debounce_seconds=0)

        assert persistence.load_collection(StorageKeys.NOTES, Note, ()) == []

    def test_load_collection_skips_invalid_records(self, caplog: pytest.LogCaptureFixture) -> None:
        """Records failing validation are dropped, the rest survive."""
        records = [
            {"id": "n1", "title": "Good", "createdAt": "2024-01-01T10:00:00+00:00",
             "updatedAt": "2024-01-01T10:00:00+00:00"},
            {"title": "No id"},
        ]
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: json.dumps(records)}), debounce_seconds=0)

        with caplog.at_level(logging.WARNING):
            loaded = persistence.load_collection(StorageKeys.NOTES, Note)

        assert [note.id for note in loaded] == ["n1"]
        assert "Skipping invalid Note record #1" in caplog.text

    def test_load_collection_keeps_last_duplicate_id(self, caplog: pytest.LogCaptureFixture) -> None:
        """Only the last record stored under an id survives."""
        records = [{"id": "a", "title": "1"}, {"id": "b", "title": "other"}, {"id": "a", "title": "2"}]
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: json.dumps(records)}), debounce_seconds=0)

        with caplog.at_level(logging.WARNING):
            loaded = persistence.load_collection(StorageKeys.NOTES, Note)

        assert [(note.id, note.title) for note in loaded] == [("b", "other"), ("a", "2")]
        assert "Dropping duplicate Note id 'a'" in caplog.text

    def test_missing_fields_take_defaults(self) -> None:
        """Older records without newer fields still load."""
        persistence = LocalPersistence(InMemoryBackend({StorageKeys.NOTES: '[{"id": "n1"}]'}), debounce_seconds=0)

        note = persistence.load_collection(StorageKeys.NOTES, Note)[0]

        assert note.is_pinned is False
        assert note.tags == []


class TestLocalPersistenceDebounce:
    """Test cases for debounced writes."""

    def test_burst_of_saves_writes_once(self, debounced_persistence, backend, fake_timers) -> None:
        """Only the last save of a burst reaches the backend."""
        for count in range(5):
            debounced_persistence.save("tasks", [{"n": count}])

        assert backend.write_count == 0
        assert all(timer.cancelled for timer in fake_timers[:-1])

        fake_timers[-1].fire()

        assert backend.write_count == 1
        assert json.loads(backend.data["tasks"]) == [{"n": 4}]

    def test_timers_are_daemons_with_configured_delay(self, debounced_persistence, fake_timers) -> None:
        """Scheduled writes wait the debounce interval on a daemon thread."""
        debounced_persistence.save("notes", [])

        assert fake_timers[0].interval == 0.5
        assert fake_timers[0].daemon is True
        assert fake_timers[0].started is True

    def test_keys_are_debounced_independently(self, debounced_persistence, backend, fake_timers) -> None:
        """A save on one key does not cancel another key's write."""
        debounced_persistence.save("notes", ["a"])
        debounced_persistence.save("tasks", ["b"])

        assert not fake_timers[0].cancelled
        fake_timers[0].fire()
        fake_timers[1].fire()

        assert set(backend.data) == {"notes", "tasks"}

    def test_pending_write_is_visible_to_load(self, debounced_persistence) -> None:
        """Loading a key with a pending write returns the pending state."""
        debounced_persistence.save("notes", ["pending"])

        assert debounced_persistence.load("notes") == ["pending"]

    def test_flush_writes_pending_state(self, debounced_persistence, backend, fake_timers) -> None:
        """Flushing writes immediately and cancels the timers."""
        debounced_persistence.save("notes", ["x"])
        debounced_persistence.save("tasks", ["y"])

        debounced_persistence.flush()

        assert backend.write_count == 2
        assert debounced_persistence.pending_keys == []
        assert all(timer.cancelled for timer in fake_timers)

    def test_flush_single_key(self, debounced_persistence, backend) -> None:
        """Flushing one key leaves the others pending."""
        debounced_persistence.save("notes", ["x"])
        debounced_persistence.save("tasks", ["y"])

        debounced_persistence.flush("notes")

        assert "notes" in backend.data
        assert debounced_persistence.pending_keys == ["tasks"]

    def test_fired_timer_after_flush_is_noop(self, debounced_persistence, backend, fake_timers) -> None:
        """A timer that fires after a flush does not write again."""
        debounced_persistence.save("notes", ["x"])
        debounced_persistence.flush()
        fake_timers[0].function(*fake_timers[0].args)

        assert backend.write_count == 1

    def test_payload_is_snapshotted_at_save(self, debounced_persistence, backend) -> None:
        """Mutating the payload after saving does not change what is written."""
        payload = [{"n": 1}]
        debounced_persistence.save("notes", payload)
        payload.append({"n": 2})

        debounced_persistence.flush()

        assert json.loads(backend.data["notes"]) == [{"n": 1}]

    def test_remove_drops_pending_write(self, debounced_persistence, backend) -> None:
        """Removing a key cancels its pending write and deletes it."""
        backend.data["layout"] = "{}"
        debounced_persistence.save("layout", {"lg": []})

        debounced_persistence.remove("layout")
        debounced_persistence.flush()

        assert "layout" not in backend.data

    def test_write_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Backend errors during a write are logged, not raised."""
        class BrokenBackend(InMemoryBackend):
            def set(self, key: str, value: str) -> None:
                raise OSError("disk full")

        persistence = LocalPersistence(BrokenBackend(), debounce_seconds=0)

        with caplog.at_level(logging.ERROR):
            persistence.save("notes", [])

        assert "disk full" in caplog.text


class TestJsonFileBackend:
    """Test cases for the file-per-key backend."""

    def test_roundtrip_through_files(self, tmp_path: Path) -> None:
        """Values are stored as <key>.json inside the data directory."""
        backend = JsonFileBackend(tmp_path / "data")

        backend.set("notes", "[1, 2]")

        assert (tmp_path / "data" / "notes.json").read_text() == "[1, 2]"
        assert backend.get("notes") == "[1, 2]"
        assert not (tmp_path / "data" / "notes.json.tmp").exists()

    def test_missing_file_and_delete(self, tmp_path: Path) -> None:
        """Missing keys read as None; deleting a missing key is fine."""
        backend = JsonFileBackend(tmp_path)

        assert backend.get("tasks") is None
        backend.delete("tasks")

    def test_create_persistence_survives_restart(self, tmp_path: Path) -> None:
        """Data flushed by one adapter is read by the next."""
        first = create_persistence(tmp_path, debounce_seconds=10)
        first.save("habits", [{"id": "h1"}])
        first.close()

        second = create_persistence(tmp_path)

        assert second.load("habits") == [{"id": "h1"}]
