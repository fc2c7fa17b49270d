"""
FlowFocus Entity Models

This module defines the data structures for notes, tasks, habits, flashcard
decks and study plans. Records persist with camelCase keys; Python code uses
the snake_case attribute names.
"""

import datetime as dt
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .settings import DefaultSettings, ValidationSettings
from ..utils import get_datetime_now

Number = Union[int, float]
TaskPriority = Literal["low", "medium", "high"]
HabitType = Literal["binary", "quantitative"]


class Entity(BaseModel):
    """
    Base class for every persisted record.

    Unknown keys in stored records are ignored, missing keys take the field
    defaults.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the JSON-compatible storage shape."""
        return self.model_dump(mode="json", by_alias=True)


class Note(Entity):
    """
    A markdown note.
    """
    id: str = Field(description="Unique note identifier")
    title: str = Field(default=DefaultSettings.UNTITLED_NOTE)
    body: str = Field(default="", description="Markdown text")
    tags: List[str] = Field(default_factory=list)
    created_at: dt.datetime = Field(default_factory=get_datetime_now)
    updated_at: dt.datetime = Field(default_factory=get_datetime_now)
    is_pinned: bool = Field(default=False)

    @field_validator("tags")
    @classmethod
    def deduplicate_tags(cls, v: List[str]) -> List[str]:
        """Tags behave as a set; keep first occurrence order."""
        return list(dict.fromkeys(tag.strip() for tag in v if tag.strip()))

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, v: dt.datetime) -> dt.datetime:
        """Naive timestamps are read as local time."""
        return v if v.tzinfo else v.astimezone()

    @model_validator(mode="after")
    def check_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not be earlier than createdAt")
        return self


class Task(Entity):
    """
    A to-do item, optionally linked to a habit by id.
    """
    id: str
    name: str = Field(min_length=ValidationSettings.MIN_TASK_NAME_LENGTH)
    description: Optional[str] = None
    category: str = Field(default="General", min_length=ValidationSettings.MIN_CATEGORY_LENGTH)
    completed: bool = False
    due_date: Optional[dt.date] = None
    priority: TaskPriority = "medium"
    habit_id: Optional[str] = Field(default=None, description="Weak reference to a Habit")

    @field_validator("due_date", mode="before")
    @classmethod
    def truncate_datetime(cls, v: Any) -> Any:
        """Accept full ISO datetimes and keep only their date."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return dt.datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v


class Habit(Entity):
    """
    A recurring habit, either done/not-done or measured against a target.
    """
    id: str
    name: str
    category: str
    type: HabitType = "binary"
    streak: int = Field(default=0, ge=0)
    completed_today: bool = False
    value: Number = 0
    target: Number = 1
    unit: str = ""
    goal_streak: Optional[int] = Field(default=None, ge=1)

    @field_validator("name", "category")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("value", "target")
    @classmethod
    def require_non_negative(cls, v: Number) -> Number:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @model_validator(mode="after")
    def normalize_binary(self) -> "Habit":
        if self.type == "binary":
            self.target = 1
            self.unit = ""
        return self


class Flashcard(Entity):
    """A single question/answer card."""
    id: str
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class Deck(Entity):
    """
    An ordered deck of flashcards. The deck owns its cards.
    """
    id: str
    name: str = Field(min_length=ValidationSettings.MIN_DECK_NAME_LENGTH)
    description: Optional[str] = None
    cards: List[Flashcard] = Field(default_factory=list)

    def get_card(self, card_id: str) -> Optional[Flashcard]:
        """Get a card by its ID."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


class StudyTask(Entity):
    """
    A single scheduled study session within a plan.
    """
    id: str
    topic: str
    description: str = ""
    duration: str = ""
    completed: bool = False
    date: dt.date
    resource: Optional[str] = None


class StudyPlanInput(Entity):
    """
    The user's answers that produced a study plan.

    Stored on the plan as a snapshot; the generator flow applies stricter
    rules to fresh requests.
    """
    subject: str
    duration: str = ""
    details: Optional[str] = None
    start_date: dt.date


class StudyPlan(Entity):
    """
    A study plan made of dated study tasks.
    """
    id: str
    title: str
    goal: str = ""
    tasks: List[StudyTask] = Field(default_factory=list)
    user_input: Optional[StudyPlanInput] = None
    start_date: Optional[dt.date] = None

    def get_task(self, task_id: str) -> Optional[StudyTask]:
        """Get a study task by its ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def completion_percentage(self) -> float:
        """Share of completed tasks, 0 for an empty plan."""
        if not self.tasks:
            return 0.0
        done = sum(1 for task in self.tasks if task.completed)
        return done / len(self.tasks) * 100


class PomodoroSettings(Entity):
    """Timer lengths in minutes."""
    pomodoro: int = Field(default=DefaultSettings.POMODORO_MINUTES, ge=1)
    short_break: int = Field(default=DefaultSettings.SHORT_BREAK_MINUTES, ge=1)
    long_break: int = Field(default=DefaultSettings.LONG_BREAK_MINUTES, ge=1)
