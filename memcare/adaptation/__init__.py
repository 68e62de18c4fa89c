"""
Adaptation Module - Difficulty adjustment between games.

The engine only reports outcomes; the host decides the next level.
"""

from .policy import (
    DifficultyPolicy,
    DEFAULT_POLICY,
    MIN_DIFFICULTY,
    MAX_DIFFICULTY,
    next_difficulty,
)

__all__ = [
    "DifficultyPolicy",
    "DEFAULT_POLICY",
    "MIN_DIFFICULTY",
    "MAX_DIFFICULTY",
    "next_difficulty",
]
