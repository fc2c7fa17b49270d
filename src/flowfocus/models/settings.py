"""
FlowFocus Centralized Settings

This module contains all centralized configuration constants and default values
used throughout the FlowFocus application.
"""

from typing import Dict


class DefaultSettings:
    """
    Centralized default settings for FlowFocus.

    Single source of truth for the constants shared by the storage layer,
    the collections, the deck player and the AI flows.
    """

    # AI Model Configuration
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TEMPERATURE = 0.7
    FLASHCARD_TEMPERATURE = 0.4
    STUDY_PLAN_TEMPERATURE = 0.7
    SUMMARY_TEMPERATURE = 0.3

    # YAML Configuration
    YAML_LINE_WIDTH = 120
    YAML_PRESERVE_QUOTES = True

    # File Names
    CONFIG_FILE = "config.yaml"
    KEY_FILE = "openai_key.txt"
    PLAN_EXPORT_FILE = "flowfocus_study_plans_{date}.json"

    # Persistence
    DEBOUNCE_SECONDS = 0.5

    # Flashcards
    CARD_TRANSITION_DELAY = 0.15
    DEFAULT_FLASHCARD_COUNT = 10
    MIN_FLASHCARD_COUNT = 1
    MAX_FLASHCARD_COUNT = 50

    # Pomodoro durations in minutes
    POMODORO_MINUTES = 25
    SHORT_BREAK_MINUTES = 5
    LONG_BREAK_MINUTES = 15

    # Entity id prefixes
    NOTE_ID_PREFIX = "n"
    TASK_ID_PREFIX = "t"
    HABIT_ID_PREFIX = "h"
    DECK_ID_PREFIX = "d"
    CARD_ID_PREFIX = "c"
    PLAN_ID_PREFIX = "plan_"

    # Notes
    UNTITLED_NOTE = "Untitled Note"
    IMPORTED_NOTE_TAG = "imported"
    SUMMARY_NOTE_TAGS = ["summarized", "youtube"]

    # Logging Configuration
    DEFAULT_LOG_LEVEL = "WARNING"


class StorageKeys:
    """
    Fixed storage keys, one per persisted collection.
    """

    DASHBOARD_LAYOUT = "flowfocus_dashboard_layout"
    HABITS = "flowfocus_habits"
    TASKS = "flowfocus_tasks"
    NOTES = "flowfocus_notes"
    DECKS = "flowfocus_decks"
    POMODORO_SETTINGS = "pomodoro_settings"
    POMODORO_SESSIONS = "pomodoro_sessions"
    STUDY_PLANS = "flowfocus_study_plans"


class ValidationSettings:
    """
    Settings related to form validation and imports.
    """

    MIN_TASK_NAME_LENGTH = 2
    MIN_CATEGORY_LENGTH = 2
    MIN_DECK_NAME_LENGTH = 2
    MIN_SUBJECT_LENGTH = 3
    MIN_DURATION_LENGTH = 5
    MIN_FLASHCARD_CONTENT_LENGTH = 50

    # Fields every imported study plan must carry
    STUDY_PLAN_IMPORT_FIELDS = ("id", "title", "tasks")


# Priority ordering used when sorting tasks
PRIORITY_RANK: Dict[str, int] = {
    "high": 0,
    "medium": 1,
    "low": 2,
}
