"""
FlowFocus: a local-first study and productivity toolkit.

FlowFocus keeps notes, tasks, habits, flashcard decks, study plans and
Pomodoro history as JSON collections on your machine, and uses AI flows to
generate flashcards, study plans and video summaries.
"""

__version__ = "0.3.0"

from .cli.main import main
from .utils import (
    get_datetime_now,
    get_today,
    generate_entity_id,
    safe_load_json,
    safe_save_json,
    sanitize_filename,
    strip_note_extension,
    truncate_string
)

__all__ = [
    "main",
    # Utils functions
    "get_datetime_now",
    "get_today",
    "generate_entity_id",
    "safe_load_json",
    "safe_save_json",
    "sanitize_filename",
    "strip_note_extension",
    "truncate_string",
]
