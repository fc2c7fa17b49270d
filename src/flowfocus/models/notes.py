"""
FlowFocus Notes Collection

Markdown notes with tags, pinning, search and markdown import/export.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .collection import Collection
from .entities import Note
from .settings import DefaultSettings, StorageKeys
from ..utils import get_datetime_now, sanitize_filename, strip_note_extension

# Set up module logger
logger = logging.getLogger(__name__)

WELCOME_NOTE_BODY = """## Welcome to Your New Notes Section!

This is a simple note-taking app with **Markdown** support.

- Create, edit, and delete notes.
- Organize with tags.
- Search your notes.
- Your data is saved locally.

Happy note-taking!"""


class NoteCollection(Collection[Note]):
    """
    Notes, searchable by title and body, filterable by tag.

    The view lists pinned notes first, each group newest-updated first.
    """

    storage_key = StorageKeys.NOTES
    entity_model = Note
    id_prefix = DefaultSettings.NOTE_ID_PREFIX
    searchable_fields = ("title", "body")
    immutable_fields = ("id", "created_at")
    touches_updated_at = True

    @classmethod
    def default_items(cls) -> List[Note]:
        return [
            Note(
                id="n1",
                title="Welcome to FlowFocus Notes",
                body=WELCOME_NOTE_BODY,
                tags=["welcome", "getting-started"],
                is_pinned=True,
            )
        ]

    def _default_fields(self) -> Dict[str, Any]:
        now = get_datetime_now()
        return {
            "title": DefaultSettings.UNTITLED_NOTE,
            "body": "",
            "tags": [],
            "created_at": now,
            "updated_at": now,
            "is_pinned": False,
        }

    def _matches_filter(self, item: Note, value: str) -> bool:
        return value in item.tags

    def _sort_key(self, item: Note) -> Tuple[int, float]:
        return (0 if item.is_pinned else 1, -item.updated_at.timestamp())

    @property
    def selected_tag(self) -> Optional[str]:
        """Alias of ``filter_value`` for notes."""
        return self.filter_value

    @selected_tag.setter
    def selected_tag(self, tag: Optional[str]) -> None:
        self.filter_value = tag

    def create(self, **fields: Any) -> Note:
        """Create a note and clear the search so it is visible."""
        note = super().create(**fields)
        self.search_term = ""
        self.filter_value = None
        return note

    def toggle_pin(self, note_id: str) -> Optional[Note]:
        """
        Flip the pinned flag of a note.

        Pinning is not an edit, so ``updated_at`` is left alone.

        Args:
            note_id: ID of the note

        Returns:
            The updated note, or None when the id is not found
        """
        note = self.get(note_id)
        if note is None:
            return None
        return self.replace(note.model_copy(update={"is_pinned": not note.is_pinned}))

    @property
    def all_tags(self) -> List[str]:
        """Every tag used by any note, sorted."""
        return sorted({tag for note in self._items for tag in note.tags})

    def select_next(self) -> Optional[Note]:
        """Move the selection one note down the current view."""
        return self._step_selection(1)

    def select_prev(self) -> Optional[Note]:
        """Move the selection one note up the current view."""
        return self._step_selection(-1)

    def _step_selection(self, step: int) -> Optional[Note]:
        view = self.view()
        ids = [note.id for note in view]
        if self.active_id not in ids:
            return self.active

        new_index = ids.index(self.active_id) + step
        if 0 <= new_index < len(view):
            self.active_id = ids[new_index]
        return self.active

    def import_markdown(self, filename: str, body: str, tags: Optional[List[str]] = None) -> Note:
        """
        Create a note from an imported markdown or text file.

        Args:
            filename: Original file name; ``.md``/``.txt`` is stripped for the title
            body: File contents
            tags: Tags to apply, ``["imported"]`` by default

        Returns:
            The created note
        """
        title = strip_note_extension(filename)
        note_tags = tags if tags is not None else [DefaultSettings.IMPORTED_NOTE_TAG]
        return self.create(title=title, body=body, tags=note_tags)

    def export_markdown(self, note_id: str) -> str:
        """
        Render a note as a markdown document.

        Args:
            note_id: ID of the note

        Returns:
            ``# {title}`` followed by a blank line and the body

        Raises:
            KeyError: If the note does not exist
        """
        note = self.get(note_id)
        if note is None:
            raise KeyError(f"Note not found: {note_id}")
        return f"# {note.title}\n\n{note.body}"

    def markdown_filename(self, note_id: str) -> str:
        """
        File name for a note's markdown export.

        Raises:
            KeyError: If the note does not exist
        """
        note = self.get(note_id)
        if note is None:
            raise KeyError(f"Note not found: {note_id}")
        return f"{sanitize_filename(note.title)}.md"
