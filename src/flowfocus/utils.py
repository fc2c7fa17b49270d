"""
FlowFocus Utilities Module

This module contains shared utility functions used throughout the FlowFocus application.
"""

import json
import logging
import re
import threading
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

# Set up module logger
logger = logging.getLogger(__name__)

_id_lock = threading.Lock()
_last_id_millis = 0


# ====================================================================
# Timestamp Utilities
# ====================================================================

def get_datetime_now() -> datetime:
    """
    Get current datetime object in the local timezone.

    Returns:
        Timezone-aware current datetime
    """
    return datetime.now().astimezone()


def get_today() -> date:
    """Get the current local date."""
    return date.today()


# ====================================================================
# Identifier Utilities
# ====================================================================

def generate_entity_id(prefix: str) -> str:
    """
    Generate a timestamp-derived identifier such as ``n1718022334123``.

    Identifiers are milliseconds since the epoch. Two calls within the same
    millisecond get consecutive values, so ids stay unique within a process.

    Args:
        prefix: Entity prefix (e.g. ``n`` for notes, ``plan_`` for study plans)

    Returns:
        Prefixed identifier string
    """
    global _last_id_millis

    with _id_lock:
        millis = int(time.time() * 1000)
        if millis <= _last_id_millis:
            millis = _last_id_millis + 1
        _last_id_millis = millis

    return f"{prefix}{millis}"


# ====================================================================
# File Utilities
# ====================================================================

def safe_load_json(file_path: Path) -> Optional[Any]:
    """
    Safely load a JSON file with error handling.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data or None if loading fails
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Failed to load JSON from {file_path}: {e}")
        return None


def safe_save_json(data: Any, file_path: Path, indent: int = 2) -> bool:
    """
    Safely save data to a JSON file with error handling.

    Args:
        data: Data to save
        file_path: Path to save to
        indent: JSON indentation level

    Returns:
        True if saved successfully, False otherwise
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, default=str)
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save JSON to {file_path}: {e}")
        return False


# ====================================================================
# String Manipulation Utilities
# ====================================================================

def sanitize_filename(filename: str) -> str:
    """
    Turn a title into a lower-case filename stem.

    Every character outside ``[a-z0-9]`` becomes an underscore, matching the
    names produced by the markdown note export.

    Args:
        filename: Title to sanitize

    Returns:
        Sanitized filename stem
    """
    return re.sub(r"[^a-z0-9]", "_", filename, flags=re.IGNORECASE).lower()[:255]


def strip_note_extension(filename: str) -> str:
    """Remove a trailing ``.md`` or ``.txt`` extension, case-insensitively."""
    return re.sub(r"\.(md|txt)$", "", filename, flags=re.IGNORECASE)


def truncate_string(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length with suffix.

    Args:
        text: String to truncate
        max_length: Maximum length (including suffix)
        suffix: Suffix to add when truncating

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
