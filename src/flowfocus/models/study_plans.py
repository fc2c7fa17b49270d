"""
FlowFocus Study Plans Collection

Study plans plus their JSON file export/import.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .collection import Collection
from .entities import StudyPlan
from .settings import DefaultSettings, StorageKeys, ValidationSettings
from ..exceptions import ImportFormatError
from ..utils import get_today, safe_load_json, safe_save_json

# Set up module logger
logger = logging.getLogger(__name__)


class StudyPlanCollection(Collection[StudyPlan]):
    """
    Study plans, searchable by title and goal.

    Plans are whole documents: importing a plan whose id already exists
    replaces it, tasks included.
    """

    storage_key = StorageKeys.STUDY_PLANS
    entity_model = StudyPlan
    id_prefix = DefaultSettings.PLAN_ID_PREFIX
    searchable_fields = ("title", "goal")
    required_import_fields = ValidationSettings.STUDY_PLAN_IMPORT_FIELDS

    def _matches_filter(self, item: StudyPlan, value: str) -> bool:
        return item.goal == value

    def _sort_key(self, item: StudyPlan) -> Tuple[int]:
        # newest start date first, undated plans last
        return (-item.start_date.toordinal() if item.start_date else 0,)

    def add_plan(self, plan: StudyPlan) -> StudyPlan:
        """
        Store a finished plan, typically one returned by the generator.

        A plan whose id is already present is left as is.

        Returns:
            The stored plan
        """
        existing = self.get(plan.id)
        if existing is not None:
            logger.debug(f"Study plan {plan.id} already stored")
            return existing
        return self.add(plan)

    def set_task_completed(self, plan_id: str, task_id: str, completed: bool) -> Optional[StudyPlan]:
        """
        Mark one study task of a plan done or open.

        Returns:
            The updated plan, or None when the plan or task does not exist
        """
        plan = self.get(plan_id)
        if plan is None or plan.get_task(task_id) is None:
            return None

        tasks = [
            task.model_copy(update={"completed": completed}) if task.id == task_id else task
            for task in plan.tasks
        ]
        return self.replace(plan.model_copy(update={"tasks": tasks}))

    def progress(self, plan_id: str) -> float:
        """
        Completion percentage of a plan.

        Raises:
            KeyError: If the plan does not exist
        """
        plan = self.get(plan_id)
        if plan is None:
            raise KeyError(f"Study plan not found: {plan_id}")
        return plan.completion_percentage

    def export_filename(self) -> str:
        """Export file name embedding today's date."""
        return DefaultSettings.PLAN_EXPORT_FILE.format(date=get_today().isoformat())

    def export_json(self, directory: Path) -> Path:
        """
        Write every plan to a dated JSON file.

        Args:
            directory: Directory to write into

        Returns:
            Path of the written file

        Raises:
            ValueError: If there are no plans to export
            OSError: If the file could not be written
        """
        if not self._items:
            raise ValueError("No plans to export")

        path = Path(directory) / self.export_filename()
        if not safe_save_json(self.to_records(), path):
            raise OSError(f"Unable to write study plan export to {path}")

        logger.info(f"Exported {len(self._items)} study plans to {path}")
        return path

    def import_file(self, path: Path) -> List[StudyPlan]:
        """
        Import plans from an export file.

        Args:
            path: JSON file holding an array of plans

        Returns:
            The imported plans

        Raises:
            ImportFormatError: If the file is unreadable or not a valid export
        """
        data = safe_load_json(Path(path))
        if data is None:
            raise ImportFormatError(f"The selected file is not a valid study plan export: {path}")

        return self.import_items(data)
