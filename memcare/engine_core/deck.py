"""
Deck construction - symbols, pair counts and the shuffle.

The random source is injected so tests can script the exact card order.
Anything with a `randrange(stop)` method works (random.Random does).
"""

from __future__ import annotations
import logging
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


DEFAULT_PALETTE: tuple[str, ...] = (
    "🍎", "🍌", "🍇", "🍉", "🍓", "🍒",
    "🍑", "🍍", "🥝", "🥭", "🥥", "🍅",
)

PAIRS_BY_DIFFICULTY = {1: 6, 2: 8, 3: 10}
DEFAULT_PAIRS = 6


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


class DeckError(Exception):
    """Raised when symbol generation or shuffling yields unusable data."""


def pair_count(difficulty: int) -> int:
    """Number of pairs for a difficulty; unknown levels fall back to 6."""
    return PAIRS_BY_DIFFICULTY.get(difficulty, DEFAULT_PAIRS)


def card_symbols(difficulty: int, palette: Sequence[str] = DEFAULT_PALETTE) -> list[str]:
    """First pair_count palette symbols, duplicated to form pairs."""
    selected = list(palette[:pair_count(difficulty)])
    symbols = selected + selected
    logger.debug("Generated %d symbols for difficulty %s", len(symbols), difficulty)
    return symbols


def shuffle(values: Sequence[str], rng: RandomSource) -> list[str]:
    """
    Fisher-Yates shuffle returning a new list.

    For i from the last index down to 1, swap element i with the element
    at rng.randrange(i + 1).
    """
    shuffled = list(values)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        if not 0 <= j <= i:
            raise DeckError(f"random source returned {j} outside 0..{i}")
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_values(
    difficulty: int,
    rng: RandomSource,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> list[str]:
    """
    Build the shuffled value sequence for a new board.

    Raises:
        DeckError: if the symbols or the shuffled result are empty, do not
            form pairs, or fall short of 2 x pair_count(difficulty)
    """
    symbols = card_symbols(difficulty, palette)
    if not symbols:
        raise DeckError("symbol generation returned no symbols")
    expected = 2 * pair_count(difficulty)
    if len(symbols) != expected:
        raise DeckError(
            f"palette gives {len(symbols)} symbols, difficulty {difficulty} needs {expected}"
        )

    shuffled = shuffle(symbols, rng)
    if not shuffled or sorted(shuffled) != sorted(symbols):
        raise DeckError("shuffle returned empty or altered data")

    _check_pairs(shuffled)
    return shuffled


def _check_pairs(values: Sequence[str]) -> None:
    counts: dict[str, int] = {}
    for v in values:
        if not isinstance(v, str) or not v:
            raise DeckError(f"invalid symbol: {v!r}")
        counts[v] = counts.get(v, 0) + 1
    bad = [v for v, n in counts.items() if n != 2]
    if bad:
        raise DeckError(f"symbols not paired: {bad}")
