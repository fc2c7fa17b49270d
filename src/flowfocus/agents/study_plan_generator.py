"""
FlowFocus Study Plan Generator

This module generates a dated, day-by-day study plan from a learning goal
and a time commitment.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base_flow import GenerationFlow
from ..models.entities import StudyPlan, StudyPlanInput, StudyTask
from ..models.settings import DefaultSettings, ValidationSettings
from ..utils import generate_entity_id

# Set up module logger
logger = logging.getLogger(__name__)


class StudyPlanRequest(StudyPlanInput):
    """
    A fresh study plan request.

    Same shape as the snapshot stored on a plan, with the form rules applied.
    """
    subject: str = Field(
        min_length=ValidationSettings.MIN_SUBJECT_LENGTH,
        description="Subject or topic to study"
    )
    duration: str = Field(
        min_length=ValidationSettings.MIN_DURATION_LENGTH,
        description='Total duration and frequency, e.g. "3 weeks, 4 days a week, 2 hours per day"'
    )


class StudyTaskDraft(BaseModel):
    """One study session as proposed by the model."""
    id: str = Field(description="Unique task identifier such as 't1'")
    topic: str = Field(description="Specific topic for this session")
    description: str = Field(default="", description="What to cover")
    duration: str = Field(default="", description='Estimated time, e.g. "90 minutes"')
    date: dt.date = Field(description="Scheduled date in YYYY-MM-DD format")
    resource: Optional[str] = Field(default=None, description="Publicly accessible resource URL")


class StudyPlanDraft(BaseModel):
    """Structured study plan as proposed by the model."""
    title: str = Field(min_length=1, description="Concise, engaging plan title")
    tasks: List[StudyTaskDraft] = Field(description="Flat list of all study tasks")


class StudyPlanGenerator(GenerationFlow[StudyPlanRequest, StudyPlan]):
    """
    Generates study plans.

    The result is a complete ``StudyPlan`` ready to be stored: it gets a new
    ``plan_`` id, keeps a snapshot of the request, and every task starts out
    not completed whatever the model said.
    """

    name = "study plan generation"
    input_model = StudyPlanRequest
    output_model = StudyPlanDraft
    temperature = DefaultSettings.STUDY_PLAN_TEMPERATURE
    template = """
You are an expert curriculum designer. Build a detailed, day-by-day study plan for the learner.

Learning goal: {subject}
Time commitment: {duration}
Start date: {start_date}
Preferences and details: {details}

Requirements:
1. Give the whole plan a concise, engaging title.
2. Break the subject into specific, actionable tasks, one or more per study day.
3. Give every task a topic, a short description and an estimated duration.
4. Suggest a relevant, publicly accessible resource URL for every task.
5. Assign every task a date in YYYY-MM-DD format, starting on the start date and following the weekly frequency.
6. Give every task a unique id such as t1, t2, t3.

Return a flat list of tasks; do not group them by week.

{format_instructions}
"""

    def _prompt_variables(self, request: StudyPlanRequest) -> Dict[str, Any]:
        return {
            "subject": request.subject,
            "duration": request.duration,
            "start_date": request.start_date.isoformat(),
            "details": request.details or "None provided",
        }

    def _postprocess(self, request: StudyPlanRequest, output: StudyPlanDraft) -> StudyPlan:
        tasks = [
            StudyTask(**task.model_dump(), completed=False)
            for task in output.tasks
        ]
        plan = StudyPlan(
            id=generate_entity_id(DefaultSettings.PLAN_ID_PREFIX),
            title=output.title,
            goal=request.subject,
            tasks=tasks,
            user_input=StudyPlanInput.model_validate(request.model_dump()),
            start_date=request.start_date,
        )
        logger.info(f"Generated study plan {plan.id} with {len(tasks)} tasks")
        return plan
