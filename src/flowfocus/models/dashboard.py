"""
FlowFocus Dashboard Layout

Per-breakpoint widget placement for the dashboard, persisted as one document.
"""

import copy
import logging
from typing import Any, Dict, List

from .settings import StorageKeys
from .storage import LocalPersistence

# Set up module logger
logger = logging.getLogger(__name__)

Layouts = Dict[str, List[Dict[str, Any]]]


def _widget(i: str, x: int, y: int, w: int, h: int, min_h: int, min_w: int) -> Dict[str, Any]:
    return {"i": i, "x": x, "y": y, "w": w, "h": h, "minH": min_h, "minW": min_w}


DEFAULT_LAYOUTS: Layouts = {
    "lg": [
        _widget("agenda", 0, 0, 7, 11, 6, 4),
        _widget("notes", 7, 0, 5, 11, 6, 3),
        _widget("progress", 0, 11, 4, 6, 5, 3),
        _widget("pomodoro", 4, 11, 4, 9, 8, 3),
        _widget("features", 8, 11, 4, 6, 5, 3),
    ],
    "md": [
        _widget("agenda", 0, 0, 6, 11, 6, 4),
        _widget("notes", 6, 0, 4, 11, 6, 3),
        _widget("progress", 0, 11, 5, 6, 5, 3),
        _widget("pomodoro", 5, 11, 5, 9, 8, 3),
        _widget("features", 0, 17, 10, 6, 5, 3),
    ],
    "sm": [
        _widget("agenda", 0, 0, 6, 9, 6, 4),
        _widget("pomodoro", 0, 9, 6, 9, 8, 3),
        _widget("notes", 0, 18, 6, 9, 6, 3),
        _widget("progress", 0, 27, 6, 6, 5, 3),
        _widget("features", 0, 33, 6, 6, 5, 3),
    ],
    "xs": [
        _widget("agenda", 0, 0, 4, 9, 6, 2),
        _widget("pomodoro", 0, 9, 4, 9, 8, 2),
        _widget("notes", 0, 18, 4, 9, 6, 2),
        _widget("progress", 0, 27, 4, 6, 5, 2),
        _widget("features", 0, 33, 4, 6, 5, 2),
    ],
    "xxs": [
        _widget("agenda", 0, 0, 2, 9, 6, 2),
        _widget("pomodoro", 0, 9, 2, 9, 8, 2),
        _widget("notes", 0, 18, 2, 9, 6, 2),
        _widget("progress", 0, 27, 2, 6, 5, 2),
        _widget("features", 0, 33, 2, 6, 5, 2),
    ],
}


class DashboardLayout:
    """Stored dashboard layouts with a built-in default."""

    def __init__(self, persistence: LocalPersistence) -> None:
        self.persistence = persistence
        stored = persistence.load(StorageKeys.DASHBOARD_LAYOUT)
        if stored is not None and not isinstance(stored, dict):
            logger.error("Invalid dashboard layout in storage, using defaults")
            stored = None
        self.layouts: Layouts = stored if stored is not None else copy.deepcopy(DEFAULT_LAYOUTS)

    def update(self, layouts: Layouts) -> None:
        """Replace the layouts and save them."""
        self.layouts = copy.deepcopy(layouts)
        self.persistence.save(StorageKeys.DASHBOARD_LAYOUT, self.layouts)

    def reset(self) -> None:
        """Restore the default layouts and forget the stored ones."""
        self.layouts = copy.deepcopy(DEFAULT_LAYOUTS)
        self.persistence.remove(StorageKeys.DASHBOARD_LAYOUT)
