"""
Game State - Card and board containers for the Memory Match engine.

Design principles:
- Cards are small value objects; a board replaces a card to change it
- The board owns the pair invariant and a matched-card counter
- Boards are replaced wholesale on replay, never resized in place
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class GamePhase(Enum):
    """High-level phases of one Memory Match board."""
    UNINITIALIZED = "uninitialized"
    UNREADY = "unready"  # Construction failed, empty board
    READY = "ready"
    SELECTING = "selecting"  # One or two cards pending
    WON = "won"


@dataclass(frozen=True)
class Card:
    """
    A card on the board.

    `id` is the card's position at board creation and is never reused
    within the same board.
    """
    id: int
    value: str
    is_flipped: bool = False
    is_matched: bool = False

    def flipped(self) -> Card:
        return replace(self, is_flipped=True)

    def hidden(self) -> Card:
        return replace(self, is_flipped=False)

    def matched(self) -> Card:
        return replace(self, is_flipped=True, is_matched=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "value": self.value,
            "is_flipped": self.is_flipped,
            "is_matched": self.is_matched,
        }


@dataclass
class Board:
    """
    Ordered sequence of cards.

    Rep:
      - every value present is carried by exactly two cards
      - matched => flipped
      - matched_count == number of matched cards
    An empty board is only legal with ready=False.
    """
    cards: list[Card] = field(default_factory=list)
    ready: bool = True
    matched_count: int = 0

    @classmethod
    def from_values(cls, values: list[str]) -> Board:
        """Wrap a shuffled value sequence into face-down cards."""
        return cls(cards=[Card(id=i, value=v) for i, v in enumerate(values)])

    @classmethod
    def unready(cls) -> Board:
        """Empty board flagged as not ready (construction failed)."""
        return cls(cards=[], ready=False)

    def __len__(self) -> int:
        return len(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    @property
    def all_matched(self) -> bool:
        """True once every card on a non-empty board is matched."""
        return not self.is_empty and self.matched_count == len(self.cards)

    def contains(self, index: Any) -> bool:
        """Check that index is an int referencing an existing card."""
        return (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < len(self.cards)
        )

    def flip_up(self, index: int) -> Card:
        card = self.cards[index].flipped()
        self.cards[index] = card
        return card

    def flip_down(self, index: int) -> bool:
        """Turn a card face-down unless it has been matched."""
        card = self.cards[index]
        if card.is_matched or not card.is_flipped:
            return False
        self.cards[index] = card.hidden()
        return True

    def mark_matched(self, first: int, second: int) -> None:
        for index in (first, second):
            if not self.cards[index].is_matched:
                self.cards[index] = self.cards[index].matched()
                self.matched_count += 1

    def values(self) -> list[str]:
        return [c.value for c in self.cards]
