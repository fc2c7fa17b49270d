"""
FlowFocus Tasks Collection

One-off to-dos with priorities and due dates. A task may point at a habit by
id; the link is resolved on demand and survives deletion of either side.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from .collection import Collection
from .entities import Habit, Task
from .settings import PRIORITY_RANK, DefaultSettings, StorageKeys
from ..utils import get_today

if TYPE_CHECKING:
    from .habits import HabitCollection

# Set up module logger
logger = logging.getLogger(__name__)


class TaskCollection(Collection[Task]):
    """
    Tasks, searchable by name and description, filterable by category.

    The view lists open tasks first, then by priority and due date.
    """

    storage_key = StorageKeys.TASKS
    entity_model = Task
    id_prefix = DefaultSettings.TASK_ID_PREFIX
    searchable_fields = ("name", "description", "category")

    @classmethod
    def default_items(cls) -> List[Task]:
        today = get_today()
        return [
            Task(id="t1", name="Finish project report", category="Work",
                 due_date=today + timedelta(days=1), priority="high"),
            Task(id="t2", name="Go for a 30-min run", category="Health",
                 due_date=today, priority="medium", habit_id="h2"),
            Task(id="t3", name="Read 1 chapter of a book", category="Mind",
                 due_date=today, priority="low", habit_id="h1"),
            Task(id="t4", name="Buy groceries", category="Personal", completed=True,
                 due_date=today - timedelta(days=1), priority="medium"),
            Task(id="t5", name="Review PRs", category="Work",
                 due_date=today, priority="high", habit_id="h3"),
        ]

    def _default_fields(self) -> Dict[str, Any]:
        return {
            "category": "General",
            "completed": False,
            "due_date": None,
            "priority": "medium",
        }

    def _sort_key(self, item: Task) -> Tuple[int, int, str]:
        due = item.due_date.isoformat() if item.due_date else "9999-12-31"
        return (1 if item.completed else 0, PRIORITY_RANK[item.priority], due)

    def linked_habit(self, task_id: str, habits: "HabitCollection") -> Optional[Habit]:
        """
        Resolve the habit a task points at.

        Args:
            task_id: ID of the task
            habits: Collection to look the habit up in

        Returns:
            The linked habit, or None when the task has no link or the habit is gone
        """
        task = self.get(task_id)
        if task is None or not task.habit_id:
            return None
        return habits.get(task.habit_id)

    def set_completed(
        self,
        task_id: str,
        completed: bool,
        habits: Optional["HabitCollection"] = None
    ) -> Optional[Task]:
        """
        Mark a task done or open, mirroring the state onto its linked habit.

        Args:
            task_id: ID of the task
            completed: New completion state
            habits: Habit collection to update through the task's link

        Returns:
            The updated task, or None when the id is not found
        """
        task = self.update(task_id, completed=completed)
        if task is None:
            return None

        if habits is not None and task.habit_id:
            habits.mark_from_task(task.habit_id, completed)

        return task

    def grouped_by_category(self) -> Dict[str, List[Task]]:
        """Tasks grouped by category; open tasks first within each group."""
        groups: Dict[str, List[Task]] = {}
        for task in self._items:
            groups.setdefault(task.category or "Uncategorized", []).append(task)
        return {
            category: sorted(tasks, key=lambda t: t.completed)
            for category, tasks in groups.items()
        }

    def due_on(self, day) -> List[Task]:
        """Tasks in the current view (search and category applied) due on a given date."""
        return [task for task in self.view() if task.due_date == day]
