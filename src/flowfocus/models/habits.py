"""
FlowFocus Habits Collection

Binary and quantitative habits grouped by category.
"""

import logging
from typing import Any, Dict, List, Optional

from .collection import Collection
from .entities import Habit, Number
from .settings import DefaultSettings, StorageKeys

# Set up module logger
logger = logging.getLogger(__name__)


class HabitCollection(Collection[Habit]):
    """
    Habits, searchable by name and category, filterable by category.
    """

    storage_key = StorageKeys.HABITS
    entity_model = Habit
    id_prefix = DefaultSettings.HABIT_ID_PREFIX
    searchable_fields = ("name", "category")

    @classmethod
    def default_items(cls) -> List[Habit]:
        return [
            Habit(id="h1", name="Read", category="Mind", type="quantitative", streak=12, target=30, unit="min"),
            Habit(id="h2", name="Workout", category="Health", type="binary", streak=5),
            Habit(id="h3", name="Code", category="Work", type="quantitative", streak=27, target=60, unit="min"),
            Habit(id="h4", name="Meditate", category="Mind", type="binary", streak=2),
            Habit(id="h5", name="Drink water", category="Health", type="binary", streak=40, value=1),
        ]

    def _default_fields(self) -> Dict[str, Any]:
        return {
            "type": "binary",
            "streak": 0,
            "completed_today": False,
            "value": 0,
            "target": 1,
            "unit": "",
        }

    def _sort_key(self, item: Habit) -> int:
        return 1 if item.completed_today else 0

    def toggle_binary(self, habit_id: str) -> Optional[Habit]:
        """
        Flip today's completion of a habit.

        Args:
            habit_id: ID of the habit

        Returns:
            The updated habit, or None when the id is not found
        """
        habit = self.get(habit_id)
        if habit is None:
            return None
        return self.update(habit_id, completed_today=not habit.completed_today)

    def set_quantity(self, habit_id: str, value: Number) -> Optional[Habit]:
        """
        Record today's amount for a quantitative habit.

        Negative values are clamped to zero; the habit counts as done once the
        value reaches a positive target.

        Args:
            habit_id: ID of the habit
            value: Amount done today

        Returns:
            The updated habit, or None when the id is not found
        """
        habit = self.get(habit_id)
        if habit is None:
            return None

        value = max(0, value or 0)
        completed = value >= habit.target if habit.target > 0 else False
        return self.update(habit_id, value=value, completed_today=completed)

    def mark_from_task(self, habit_id: str, completed: bool) -> Optional[Habit]:
        """
        Mirror a linked task's completion onto a habit.

        Returns:
            The updated habit, or None when the habit no longer exists
        """
        habit = self.get(habit_id)
        if habit is None:
            logger.debug(f"Linked habit {habit_id} no longer exists")
            return None
        return self.update(
            habit_id,
            completed_today=completed,
            value=habit.target if completed else 0,
        )

    def grouped_by_category(self) -> Dict[str, List[Habit]]:
        """Habits grouped by category, in stored order."""
        groups: Dict[str, List[Habit]] = {}
        for habit in self._items:
            groups.setdefault(habit.category or "Uncategorized", []).append(habit)
        return groups
