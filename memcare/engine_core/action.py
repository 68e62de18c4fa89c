"""
Action System - Actions and results for the Memory Match engine.

Actions represent:
1. Player actions (click a card, replay)
2. System actions (mismatch reversion, difficulty change)

Every engine transition returns an ActionResult. Rejected clicks are
reported through a failure result, never raised.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the engine."""
    # Player actions
    CLICK = "click"
    REPLAY = "replay"

    # System actions
    SET_DIFFICULTY = "set_difficulty"
    REVERT_MISMATCH = "revert_mismatch"


class RejectReason(Enum):
    """Why a click was ignored."""
    OUT_OF_RANGE = "out_of_range"
    NOT_READY = "not_ready"
    GAME_WON = "game_won"
    SELECTION_FULL = "selection_full"
    ALREADY_FLIPPED = "already_flipped"
    ALREADY_MATCHED = "already_matched"


@dataclass
class Action:
    """
    An action applied to the engine.

    Logged in the engine history for debugging.
    """
    action_type: ActionType
    index: int | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def click(cls, index: int) -> Action:
        """Factory for click action."""
        return cls(action_type=ActionType.CLICK, index=index)

    @classmethod
    def replay(cls) -> Action:
        """Factory for replay action."""
        return cls(action_type=ActionType.REPLAY)

    @classmethod
    def set_difficulty(cls, difficulty: int) -> Action:
        """Factory for difficulty change."""
        return cls(
            action_type=ActionType.SET_DIFFICULTY,
            params={"difficulty": difficulty},
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was accepted
    - Why it was ignored (if rejected)
    - What happened (for UI updates and logs)
    """
    success: bool
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)
    matched: bool | None = None  # Set once a pair has been resolved
    won: bool = False

    @classmethod
    def failure(cls, error: str, error_code: RejectReason | str | None = None) -> ActionResult:
        """Create a failure result."""
        if isinstance(error_code, RejectReason):
            error_code = error_code.value
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(cls, changes: list[str] | None = None, **kwargs: Any) -> ActionResult:
        """Create a success result."""
        return cls(success=True, state_changes=changes or [], **kwargs)
