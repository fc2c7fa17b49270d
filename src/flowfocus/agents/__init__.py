"""
FlowFocus AI Flows

This package contains the LangChain generation flows for flashcards, study
plans and transcript summaries.
"""

from .base_flow import GenerationFlow, create_chat_model, load_api_key
from .flashcard_generator import (
    FlashcardGenerator,
    FlashcardRequest,
    GeneratedCard,
    GeneratedFlashcards,
    cards_as_records
)
from .study_plan_generator import StudyPlanGenerator, StudyPlanRequest, StudyPlanDraft, StudyTaskDraft
from .transcript_summarizer import (
    TranscriptSummarizer,
    TranscriptSummaryRequest,
    TranscriptSummary,
    save_summary_as_note
)

__all__ = [
    "GenerationFlow",
    "create_chat_model",
    "load_api_key",
    "FlashcardGenerator",
    "FlashcardRequest",
    "GeneratedCard",
    "GeneratedFlashcards",
    "cards_as_records",
    "StudyPlanGenerator",
    "StudyPlanRequest",
    "StudyPlanDraft",
    "StudyTaskDraft",
    "TranscriptSummarizer",
    "TranscriptSummaryRequest",
    "TranscriptSummary",
    "save_summary_as_note"
]
