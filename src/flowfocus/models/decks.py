"""
FlowFocus Flashcard Decks Collection
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .collection import Collection
from .entities import Deck, Flashcard
from .settings import DefaultSettings, StorageKeys
from ..utils import generate_entity_id

# Set up module logger
logger = logging.getLogger(__name__)


class DeckCollection(Collection[Deck]):
    """
    Flashcard decks. Each deck owns its cards, so deleting a deck deletes them.
    """

    storage_key = StorageKeys.DECKS
    entity_model = Deck
    id_prefix = DefaultSettings.DECK_ID_PREFIX
    searchable_fields = ("name", "description")

    @classmethod
    def default_items(cls) -> List[Deck]:
        return [
            Deck(
                id="d1",
                name="React Fundamentals",
                description="Key concepts for mastering React.",
                cards=[
                    Flashcard(id="c1", question="What is React?",
                              answer="A JavaScript library for building user interfaces."),
                    Flashcard(id="c2", question="What is JSX?",
                              answer="A syntax extension for JavaScript, used with React to describe what the UI should look like."),
                    Flashcard(id="c3", question="What is the virtual DOM?",
                              answer="A programming concept where a virtual representation of a UI is kept in memory and synced with the 'real' DOM."),
                ],
            ),
            Deck(
                id="d2",
                name="JavaScript Essentials",
                description="Core JS concepts every developer should know.",
                cards=[
                    Flashcard(id="c4", question="What are Promises?",
                              answer="An object representing the eventual completion or failure of an asynchronous operation."),
                    Flashcard(id="c5", question="Difference between `let`, `const`, and `var`?",
                              answer="`var` is function-scoped, `let` and `const` are block-scoped. `const` cannot be reassigned."),
                ],
            ),
        ]

    def _default_fields(self) -> Dict[str, Any]:
        return {"description": None, "cards": []}

    def _matches_filter(self, item: Deck, value: str) -> bool:
        return item.name == value

    def add_card(self, deck_id: str, question: str, answer: str) -> Optional[Flashcard]:
        """
        Append a new card to a deck.

        Returns:
            The created card, or None when the deck does not exist
        """
        deck = self.get(deck_id)
        if deck is None:
            return None

        card = Flashcard(id=generate_entity_id(DefaultSettings.CARD_ID_PREFIX), question=question, answer=answer)
        self.replace(deck.model_copy(update={"cards": [*deck.cards, card]}))
        return card

    def add_generated_cards(self, deck_id: str, cards: Iterable[Mapping[str, str]]) -> List[Flashcard]:
        """
        Append AI-generated question/answer pairs to a deck.

        Args:
            deck_id: ID of the target deck
            cards: Mappings with ``question`` and ``answer`` keys

        Returns:
            The created cards (empty when the deck does not exist)
        """
        deck = self.get(deck_id)
        if deck is None:
            return []

        new_cards = [
            Flashcard(
                id=generate_entity_id(DefaultSettings.CARD_ID_PREFIX),
                question=card["question"],
                answer=card["answer"],
            )
            for card in cards
        ]
        self.replace(deck.model_copy(update={"cards": [*deck.cards, *new_cards]}))
        logger.info(f"Added {len(new_cards)} generated cards to deck {deck_id}")
        return new_cards

    def update_card(self, deck_id: str, card_id: str, **fields: str) -> Optional[Flashcard]:
        """
        Edit the question and/or answer of a card.

        Returns:
            The updated card, or None when the deck or card does not exist
        """
        deck = self.get(deck_id)
        if deck is None or deck.get_card(card_id) is None:
            return None

        cards = []
        updated_card = None
        for card in deck.cards:
            if card.id == card_id:
                data = card.model_dump()
                data.update({k: v for k, v in fields.items() if k in ("question", "answer")})
                updated_card = Flashcard.model_validate(data)
                cards.append(updated_card)
            else:
                cards.append(card)

        self.replace(deck.model_copy(update={"cards": cards}))
        return updated_card

    def delete_card(self, deck_id: str, card_id: str) -> bool:
        """
        Remove a card from a deck.

        Returns:
            True if a card was removed
        """
        deck = self.get(deck_id)
        if deck is None or deck.get_card(card_id) is None:
            return False

        self.replace(deck.model_copy(update={"cards": [c for c in deck.cards if c.id != card_id]}))
        return True
