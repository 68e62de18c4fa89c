"""
Difficulty Policy - Adapts the next game's difficulty to performance.

A DifficultyPolicy takes a finished game's outcome and returns the
difficulty for the next one:
- Fast, high-scoring games step difficulty up
- Low scores or slow games step it down
- Everything else keeps the current level
"""

from __future__ import annotations
from dataclasses import dataclass

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 3


@dataclass(frozen=True)
class DifficultyPolicy:
    """
    Threshold policy for difficulty adjustment.

    Raise when score >= raise_score and time_taken < difficulty * fast_seconds.
    Lower when score < lower_score or time_taken > difficulty * slow_seconds.
    """
    raise_score: int = 75
    lower_score: int = 40
    fast_seconds: int = 45  # Per difficulty level
    slow_seconds: int = 90  # Per difficulty level
    min_difficulty: int = MIN_DIFFICULTY
    max_difficulty: int = MAX_DIFFICULTY

    def next_difficulty(self, score: int, time_taken: int, difficulty: int) -> int:
        """
        Difficulty for the next game.

        Args:
            score: Score of the finished game
            time_taken: Seconds the finished game took
            difficulty: Difficulty the game was played at

        Raises:
            ValueError: if difficulty is not an integer
        """
        if not isinstance(difficulty, int) or isinstance(difficulty, bool):
            raise ValueError(f"Invalid difficulty level: {difficulty!r}")

        if score >= self.raise_score and time_taken < difficulty * self.fast_seconds:
            return min(difficulty + 1, self.max_difficulty)
        if score < self.lower_score or time_taken > difficulty * self.slow_seconds:
            return max(difficulty - 1, self.min_difficulty)
        return difficulty


DEFAULT_POLICY = DifficultyPolicy()


def next_difficulty(score: int, time_taken: int, difficulty: int) -> int:
    """Apply the default policy."""
    return DEFAULT_POLICY.next_difficulty(score, time_taken, difficulty)
