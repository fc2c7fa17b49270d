"""
FlowFocus Deck Player

Study-mode state machine for a single deck: one card at a time, question side
first, with flip, next/previous and shuffle.
"""

import random
import time
from typing import Callable, List, Optional

from .entities import Deck, Flashcard
from .settings import DefaultSettings


class DeckPlayer:
    """
    Walks through a deck's cards.

    The play order is a list of card ids. Moving to another card always shows
    the question side first; the flip back happens before the move, separated
    by ``transition_delay`` seconds so a front end can animate it.
    """

    def __init__(
        self,
        deck: Deck,
        transition_delay: float = DefaultSettings.CARD_TRANSITION_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None
    ) -> None:
        """
        Initialize the player in insertion order on the first card.

        Args:
            deck: Deck to play
            transition_delay: Seconds between flipping back and changing card
            sleep: Function used to wait out the transition delay
            rng: Random source for shuffling
        """
        self.deck = deck
        self.transition_delay = transition_delay
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.order: List[str] = [card.id for card in deck.cards]
        self.index = 0
        self.is_flipped = False
        self.is_shuffled = False

    def __len__(self) -> int:
        return len(self.order)

    @property
    def current_card(self) -> Optional[Flashcard]:
        """The card being shown, or None for an empty deck."""
        if not self.order:
            return None
        return self.deck.get_card(self.order[self.index])

    @property
    def visible_text(self) -> Optional[str]:
        """Question or answer, depending on the side shown."""
        card = self.current_card
        if card is None:
            return None
        return card.answer if self.is_flipped else card.question

    def flip(self) -> None:
        """Toggle between question and answer."""
        if self.order:
            self.is_flipped = not self.is_flipped

    def next(self) -> Optional[Flashcard]:
        """Go to the next card, wrapping around at the end."""
        return self._move(1)

    def prev(self) -> Optional[Flashcard]:
        """Go to the previous card, wrapping around at the start."""
        return self._move(-1)

    def _move(self, step: int) -> Optional[Flashcard]:
        if not self.order:
            return None

        self.is_flipped = False
        if self.transition_delay > 0:
            self._sleep(self.transition_delay)

        self.index = (self.index + step) % len(self.order)
        return self.current_card

    def shuffle(self) -> None:
        """Play the cards in a uniformly random order, from the first card."""
        self._rng.shuffle(self.order)
        self.is_shuffled = True
        self._restart()

    def unshuffle(self) -> None:
        """Return to the deck's insertion order, from the first card."""
        self.order = [card.id for card in self.deck.cards]
        self.is_shuffled = False
        self._restart()

    def sync(self, deck: Deck) -> None:
        """
        Follow edits made to the deck.

        Cards that disappeared leave the play order, new cards are appended,
        and the position is clamped into range.

        Args:
            deck: Updated version of the deck being played
        """
        self.deck = deck
        known = {card.id for card in deck.cards}
        self.order = [card_id for card_id in self.order if card_id in known]
        self.order.extend(card.id for card in deck.cards if card.id not in self.order)
        self._clamp()

    def remove_card(self, card_id: str) -> None:
        """Drop a card from the play order, clamping the position."""
        self.deck = self.deck.model_copy(update={"cards": [c for c in self.deck.cards if c.id != card_id]})
        self.order = [existing for existing in self.order if existing != card_id]
        self._clamp()

    def _clamp(self) -> None:
        if self.index >= len(self.order):
            self.index = max(0, len(self.order) - 1)

    def _restart(self) -> None:
        self.index = 0
        self.is_flipped = False
