"""
Tests for the shared FlowFocus utilities.
"""

from pathlib import Path

from flowfocus.utils import (
    generate_entity_id,
    safe_load_json,
    safe_save_json,
    sanitize_filename,
    strip_note_extension,
    truncate_string,
)


class TestEntityIds:
    """Test cases for generate_entity_id."""

    def test_prefix_and_digits(self) -> None:
        entity_id = generate_entity_id("plan_")

        assert entity_id.startswith("plan_")
        assert entity_id[len("plan_"):].isdigit()

    def test_ids_are_unique_and_increasing(self) -> None:
        ids = [generate_entity_id("n") for _ in range(50)]

        assert len(set(ids)) == 50
        assert [int(i[1:]) for i in ids] == sorted(int(i[1:]) for i in ids)


class TestJsonFiles:
    """Test cases for safe_load_json / safe_save_json."""

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "data.json"

        assert safe_save_json([{"id": "a"}], path) is True
        assert safe_load_json(path) == [{"id": "a"}]

    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert safe_load_json(tmp_path / "missing.json") is None

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert safe_load_json(path) is None


class TestStrings:
    """Test cases for the string helpers."""

    def test_sanitize_filename(self) -> None:
        assert sanitize_filename("My Note: Part 1!") == "my_note__part_1_"

    def test_strip_note_extension(self) -> None:
        assert strip_note_extension("Chapter.MD") == "Chapter"
        assert strip_note_extension("notes.txt") == "notes"
        assert strip_note_extension("archive.md.zip") == "archive.md.zip"

    def test_truncate_string(self) -> None:
        assert truncate_string("short", max_length=10) == "short"
        assert truncate_string("a" * 20, max_length=10) == "aaaaaaa..."
