"""
FlowFocus Data Models

This package contains the Pydantic entity models, the debounced local
persistence layer, the per-entity collections and the configuration models.
"""

from .config import FlowFocusConfig, get_config_path, get_config_dir, get_default_data_dir
from .config_manager import ConfigManager
from .entities import (
    Entity, Note, Task, Habit, Flashcard, Deck,
    StudyTask, StudyPlanInput, StudyPlan, PomodoroSettings
)
from .settings import DefaultSettings, StorageKeys, ValidationSettings
from .storage import InMemoryBackend, JsonFileBackend, LocalPersistence, create_persistence
from .collection import Collection
from .notes import NoteCollection
from .tasks import TaskCollection
from .habits import HabitCollection
from .decks import DeckCollection
from .study_plans import StudyPlanCollection
from .deck_player import DeckPlayer
from .pomodoro import PomodoroTracker, PomodoroTimer
from .dashboard import DashboardLayout
from .store import FlowFocusStore, create_store

__all__ = [
    # Configuration
    "FlowFocusConfig",
    "ConfigManager",
    "get_config_path",
    "get_config_dir",
    "get_default_data_dir",

    # Settings
    "DefaultSettings",
    "StorageKeys",
    "ValidationSettings",

    # Entities
    "Entity",
    "Note",
    "Task",
    "Habit",
    "Flashcard",
    "Deck",
    "StudyTask",
    "StudyPlanInput",
    "StudyPlan",
    "PomodoroSettings",

    # Persistence
    "InMemoryBackend",
    "JsonFileBackend",
    "LocalPersistence",
    "create_persistence",

    # Collections
    "Collection",
    "NoteCollection",
    "TaskCollection",
    "HabitCollection",
    "DeckCollection",
    "StudyPlanCollection",

    # Study tools
    "DeckPlayer",
    "PomodoroTracker",
    "PomodoroTimer",
    "DashboardLayout",

    # Store
    "FlowFocusStore",
    "create_store"
]
