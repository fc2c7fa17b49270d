"""
FlowFocus Store

This module wires every collection to a single persistence adapter so callers
work with one object for the whole workspace.
"""

import logging
from typing import Optional

from .config import FlowFocusConfig
from .dashboard import DashboardLayout
from .decks import DeckCollection
from .entities import Task
from .habits import HabitCollection
from .notes import NoteCollection
from .pomodoro import PomodoroTracker
from .storage import LocalPersistence, create_persistence
from .study_plans import StudyPlanCollection
from .tasks import TaskCollection

# Set up module logger
logger = logging.getLogger(__name__)


class FlowFocusStore:
    """
    All FlowFocus collections backed by one persistence adapter.

    Use as a context manager to make sure pending writes are flushed.
    """

    def __init__(self, persistence: LocalPersistence) -> None:
        self.persistence = persistence
        self.notes = NoteCollection(persistence)
        self.tasks = TaskCollection(persistence)
        self.habits = HabitCollection(persistence)
        self.decks = DeckCollection(persistence)
        self.study_plans = StudyPlanCollection(persistence)
        self.pomodoro = PomodoroTracker(persistence)
        self.dashboard = DashboardLayout(persistence)

    def complete_task(self, task_id: str, completed: bool = True) -> Optional[Task]:
        """
        Mark a task done or open and mirror it onto its linked habit.

        Args:
            task_id: ID of the task
            completed: New completion state

        Returns:
            The updated task, or None when the id is not found
        """
        return self.tasks.set_completed(task_id, completed, habits=self.habits)

    def flush(self) -> None:
        """Write every pending change now."""
        self.persistence.flush()

    def close(self) -> None:
        self.persistence.close()
        logger.debug("Store closed")

    def __enter__(self) -> "FlowFocusStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_store(config: FlowFocusConfig) -> FlowFocusStore:
    """
    Factory function to create a file-backed store from configuration.

    Args:
        config: FlowFocus configuration with the data directory and debounce

    Returns:
        Configured FlowFocusStore instance
    """
    persistence = create_persistence(config.data_dir, debounce_seconds=config.debounce_seconds)
    return FlowFocusStore(persistence)
