"""
FlowFocus Flashcard Generator

This module turns a block of study text into question/answer flashcards.
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .base_flow import GenerationFlow
from ..models.settings import DefaultSettings, ValidationSettings

# Set up module logger
logger = logging.getLogger(__name__)


class FlashcardRequest(BaseModel):
    """Request model for flashcard generation."""
    content: str = Field(
        min_length=ValidationSettings.MIN_FLASHCARD_CONTENT_LENGTH,
        description="Text to turn into flashcards"
    )
    card_count: int = Field(
        default=DefaultSettings.DEFAULT_FLASHCARD_COUNT,
        ge=DefaultSettings.MIN_FLASHCARD_COUNT,
        le=DefaultSettings.MAX_FLASHCARD_COUNT,
        description="Number of flashcards to generate"
    )


class GeneratedCard(BaseModel):
    question: str = Field(min_length=1, description="The question for the flashcard")
    answer: str = Field(min_length=1, description="The answer to the flashcard question")


class GeneratedFlashcards(BaseModel):
    """Structured flashcard generation result."""
    cards: List[GeneratedCard] = Field(description="The generated flashcards")


class FlashcardGenerator(GenerationFlow[FlashcardRequest, GeneratedFlashcards]):
    """
    Generates flashcards from study text.

    The cards are returned as-is; saving them into a deck is up to the caller
    (see ``DeckCollection.add_generated_cards``).
    """

    name = "flashcard generation"
    input_model = FlashcardRequest
    output_model = GeneratedFlashcards
    temperature = DefaultSettings.FLASHCARD_TEMPERATURE
    template = """
You are an AI study assistant who writes clear, focused flashcards.

Read the text below and write exactly {card_count} flashcards in question and answer form.
Cover the most important concepts, definitions and takeaways.
Keep each question unambiguous and each answer short.

Text:
\"\"\"
{content}
\"\"\"

{format_instructions}
"""

    def _postprocess(self, request: FlashcardRequest, output: GeneratedFlashcards) -> GeneratedFlashcards:
        if len(output.cards) != request.card_count:
            logger.warning(
                f"Requested {request.card_count} flashcards, model returned {len(output.cards)}"
            )
        return output


def cards_as_records(result: GeneratedFlashcards) -> List[Dict[str, Any]]:
    """
    Convert generated cards to plain question/answer mappings.

    Args:
        result: Flashcard generation result

    Returns:
        List of ``{"question": ..., "answer": ...}`` dictionaries
    """
    return [card.model_dump() for card in result.cards]
