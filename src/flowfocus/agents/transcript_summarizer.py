"""
FlowFocus Transcript Summarizer

This module turns a raw video transcript into structured Markdown study notes.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .base_flow import GenerationFlow
from ..models.entities import Note
from ..models.notes import NoteCollection
from ..models.settings import DefaultSettings

# Set up module logger
logger = logging.getLogger(__name__)


class TranscriptSummaryRequest(BaseModel):
    """Request model for transcript summarization."""
    transcript: str = Field(min_length=1, description="Full transcript of a video")
    video_title: Optional[str] = Field(default=None, description="Original title of the video")
    summary_style: Optional[str] = Field(
        default=None,
        description='Persona and writing style, e.g. "Academic" or "Simple"'
    )


class TranscriptSummary(BaseModel):
    """Structured study notes."""
    title: str = Field(min_length=1, description="Concise, descriptive title for the notes")
    summary: str = Field(min_length=1, description="Study notes in Markdown with headings, lists and key takeaways")


class TranscriptSummarizer(GenerationFlow[TranscriptSummaryRequest, TranscriptSummary]):
    """
    Summarizes video transcripts into study notes.
    """

    name = "transcript summary"
    input_model = TranscriptSummaryRequest
    output_model = TranscriptSummary
    temperature = DefaultSettings.SUMMARY_TEMPERATURE
    template = """
You are an expert academic assistant who turns raw text into structured study material.

Summarize the video transcript below into detailed study notes.
{style_section}
Guidelines:
- Write a concise, engaging title; take inspiration from the video title when one is given.
- Format the notes in Markdown with clear headings and subheadings.
- Use bullet points for key concepts, steps and lists, and bold the key terms.
- Include important definitions, examples and explanations where useful.
- Keep the tone educational and clear unless the requested style says otherwise.
{title_section}
Transcript:
\"\"\"
{transcript}
\"\"\"

{format_instructions}
"""

    def _prompt_variables(self, request: TranscriptSummaryRequest) -> Dict[str, Any]:
        style_section = ""
        if request.summary_style:
            style_section = (
                f"\nYou MUST adopt the following persona and writing style: {request.summary_style}\n"
            )

        title_section = ""
        if request.video_title:
            title_section = f"\nOriginal video title: {request.video_title}\n"

        return {
            "transcript": request.transcript,
            "style_section": style_section,
            "title_section": title_section,
        }


def save_summary_as_note(notes: NoteCollection, summary: TranscriptSummary) -> Note:
    """
    Store generated study notes as a new note.

    Args:
        notes: Note collection to add to
        summary: Transcript summary

    Returns:
        The created note, tagged as a summarized video
    """
    note = notes.create(
        title=summary.title,
        body=summary.summary,
        tags=list(DefaultSettings.SUMMARY_NOTE_TAGS),
    )
    logger.info(f"Saved summary '{summary.title}' as note {note.id}")
    return note
