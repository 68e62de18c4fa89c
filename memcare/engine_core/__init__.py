"""
Engine Core - Memory Match board state, transitions and scoring.

The engine is the runtime that:
1. Builds a shuffled board of pairs for a difficulty
2. Accepts card clicks and resolves pairs
3. Reverts mismatches after a cancellable delay
4. Reports (score, time_taken) to its host on a win
"""

from .state import Board, Card, GamePhase
from .action import Action, ActionType, ActionResult, RejectReason
from .deck import DEFAULT_PALETTE, DeckError, build_values, pair_count, shuffle
from .timers import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle
from .engine import MemoryMatchEngine, compute_score

__all__ = [
    "Board",
    "Card",
    "GamePhase",
    "Action",
    "ActionType",
    "ActionResult",
    "RejectReason",
    "DEFAULT_PALETTE",
    "DeckError",
    "build_values",
    "pair_count",
    "shuffle",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "MemoryMatchEngine",
    "compute_score",
]
