"""
Memory Match Engine - card grid lifecycle, matching and scoring.

The engine is the single point of board mutation:
1. Builds a shuffled board for the difficulty
2. Accepts clicks and resolves pairs
3. Flips mismatched pairs back after a cancellable delay
4. Detects the win once and reports (score, time_taken) to its host

Design principles:
- Single-threaded: every transition runs to completion
- Invalid clicks are ignored (failure result, no state change)
- Nothing here raises into the host; failures degrade to no-ops
  or an empty unready board
"""

from __future__ import annotations
import logging
import math
import random
import time
from typing import Any, Callable, Sequence

from .action import Action, ActionResult, ActionType, RejectReason
from .deck import DEFAULT_PALETTE, RandomSource, build_values, pair_count
from .state import Board, Card, GamePhase
from .timers import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

MISMATCH_DELAY_SECONDS = 1.0
MAX_SCORE = 100
SECONDS_PER_PENALTY = 5

CompletionCallback = Callable[[int, int], None]


def compute_score(moves: int, time_taken: int) -> int:
    """Score for a won board: 100 minus moves minus one point per 5 seconds."""
    return max(0, MAX_SCORE - moves - time_taken // SECONDS_PER_PENALTY)


class MemoryMatchEngine:
    """
    One Memory Match game, owned by one host.

    Usage:
        engine = MemoryMatchEngine("patient-1", difficulty=2, on_complete=report)
        engine.click(0)
        engine.click(5)
        ...
        engine.replay()

    The rng, scheduler and clock are injectable. The default scheduler
    uses the running asyncio loop, so sync callers (tests, CLI) should
    pass a ManualScheduler.
    """

    def __init__(
        self,
        context_id: str,
        difficulty: int = 1,
        on_complete: CompletionCallback | None = None,
        *,
        rng: RandomSource | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] | None = None,
        palette: Sequence[str] = DEFAULT_PALETTE,
        mismatch_delay: float = MISMATCH_DELAY_SECONDS,
    ):
        self.context_id = context_id
        self._difficulty = difficulty
        self._on_complete = on_complete
        self._rng = rng or random.Random()
        self._scheduler = scheduler or AsyncioScheduler()
        self._clock = clock or time.time
        self._palette = tuple(palette)
        self.mismatch_delay = mismatch_delay

        self._board: Board | None = None
        self._pending: list[int] = []
        self._moves = 0
        self._start_time: float | None = None
        self._won = False
        self._time_taken: int | None = None
        self._score: int | None = None
        self._timer: TimerHandle | None = None
        self._generation = 0

        # Actions on the current board; reset on every rebuild
        self.history: list[Action] = []

        self._initialize()

    # =========================================================================
    # Rendering surface
    # =========================================================================

    @property
    def difficulty(self) -> int:
        return self._difficulty

    @property
    def pair_count(self) -> int:
        return pair_count(self._difficulty)

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._board.cards) if self._board else ()

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def won(self) -> bool:
        return self._won

    @property
    def pending(self) -> tuple[int, ...]:
        return tuple(self._pending)

    @property
    def ready(self) -> bool:
        return self._board is not None and self._board.ready

    @property
    def start_time(self) -> float | None:
        return self._start_time

    @property
    def time_taken(self) -> int | None:
        """Elapsed whole seconds, set only once the board is won."""
        return self._time_taken

    @property
    def score(self) -> int | None:
        return self._score

    @property
    def mismatch_pending(self) -> bool:
        return self._timer is not None

    @property
    def phase(self) -> GamePhase:
        if self._board is None:
            return GamePhase.UNINITIALIZED
        if not self._board.ready:
            return GamePhase.UNREADY
        if self._won:
            return GamePhase.WON
        if self._pending:
            return GamePhase.SELECTING
        return GamePhase.READY

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of the engine for renderers and logs."""
        return {
            "context_id": self.context_id,
            "difficulty": self._difficulty,
            "pair_count": self.pair_count,
            "phase": self.phase.value,
            "moves": self._moves,
            "won": self._won,
            "pending": list(self._pending),
            "score": self._score,
            "time_taken": self._time_taken,
            "cards": [c.to_dict() for c in self.cards],
        }

    # =========================================================================
    # Intake
    # =========================================================================

    def click(self, index: int) -> ActionResult:
        """
        Reveal the card at index.

        Ignored (failure result, no state change) when the index is out of
        range, the board is not ready or already won, two cards are pending,
        or the card is already face-up or matched.
        """
        rejection = self._validate_click(index)
        if rejection:
            reason, message = rejection
            logger.debug("Click on %r ignored: %s", index, message)
            return ActionResult.failure(message, error_code=reason)

        board = self._board
        self._moves += 1
        card = board.flip_up(index)
        self._pending.append(index)
        self.history.append(Action.click(index))
        changes = [f"Card {index} flipped ({card.value})"]

        if len(self._pending) < 2:
            return ActionResult.ok(changes)

        return self._resolve_selection(changes)

    def replay(self) -> ActionResult:
        """Start a fresh board at the current difficulty."""
        self._initialize()
        self.history.append(Action.replay())
        if not self.ready:
            return ActionResult.failure(
                "Board could not be built", error_code=RejectReason.NOT_READY,
            )
        return ActionResult.ok([f"New board with {len(self.cards)} cards"])

    def set_difficulty(self, difficulty: int) -> ActionResult:
        """Rebuild the board when the difficulty changes."""
        if difficulty == self._difficulty and self._board is not None:
            return ActionResult.ok()
        logger.info(
            "Difficulty for %s changed from %s to %s",
            self.context_id, self._difficulty, difficulty,
        )
        self._difficulty = difficulty
        self._initialize()
        self.history.append(Action.set_difficulty(difficulty))
        return ActionResult.ok([f"Difficulty set to {difficulty}"])

    def close(self) -> None:
        """Tear down: cancel the pending reversion and drop the board."""
        self._cancel_timer()
        self._generation += 1
        self._board = None
        self._pending = []
        self.history = []

    # =========================================================================
    # Transitions
    # =========================================================================

    def _initialize(self) -> None:
        """(Re)build the board and reset counters."""
        self._cancel_timer()
        self._generation += 1
        self._pending = []
        self._moves = 0
        self._won = False
        self._time_taken = None
        self._score = None
        self._start_time = self._clock()
        self.history = []

        try:
            values = build_values(self._difficulty, self._rng, self._palette)
            self._board = Board.from_values(values)
        except Exception:
            logger.exception(
                "Board construction failed for %s at difficulty %s",
                self.context_id, self._difficulty,
            )
            self._board = Board.unready()
            return

        logger.debug(
            "Initialized board for %s: %d cards at difficulty %s",
            self.context_id, len(self._board), self._difficulty,
        )

    def _validate_click(self, index: Any) -> tuple[RejectReason, str] | None:
        board = self._board
        if board is None or not board.ready:
            return RejectReason.NOT_READY, "Board is not ready"
        if not board.contains(index):
            return RejectReason.OUT_OF_RANGE, f"No card at index {index!r}"
        if self._won:
            return RejectReason.GAME_WON, "Game is already won"
        if len(self._pending) >= 2:
            return RejectReason.SELECTION_FULL, "Two cards are already pending"
        card = board[index]
        if card.is_matched:
            return RejectReason.ALREADY_MATCHED, f"Card {index} is already matched"
        if card.is_flipped:
            return RejectReason.ALREADY_FLIPPED, f"Card {index} is already face-up"
        return None

    def _resolve_selection(self, changes: list[str]) -> ActionResult:
        board = self._board
        first, second = self._pending
        if not (board.contains(first) and board.contains(second)):
            logger.warning(
                "Selection %s no longer matches the board, clearing", self._pending,
            )
            self._pending = []
            return ActionResult.ok(changes)

        if board[first].value == board[second].value:
            board.mark_matched(first, second)
            self._pending = []
            changes.append(f"Cards {first} and {second} matched")
            won = self._check_win()
            return ActionResult.ok(changes, matched=True, won=won)

        generation = self._generation
        self._timer = self._scheduler.call_later(
            self.mismatch_delay,
            lambda: self._revert_mismatch(generation, first, second),
        )
        changes.append(f"Cards {first} and {second} do not match")
        return ActionResult.ok(changes, matched=False)

    def _revert_mismatch(self, generation: int, first: int, second: int) -> None:
        if generation != self._generation or self._board is None:
            logger.debug("Stale mismatch reversion ignored")
            return
        self._timer = None
        board = self._board
        for index in (first, second):
            if board.contains(index):
                board.flip_down(index)
        self._pending = []
        self.history.append(
            Action(action_type=ActionType.REVERT_MISMATCH, params={"cards": [first, second]})
        )

    def _check_win(self) -> bool:
        if self._won or self._board is None or not self._board.all_matched:
            return False

        self._won = True
        elapsed = self._clock() - (self._start_time or 0.0)
        self._time_taken = max(0, math.floor(elapsed + 0.5))
        self._score = compute_score(self._moves, self._time_taken)
        logger.info(
            "Board won for %s: score=%s moves=%s time=%ss",
            self.context_id, self._score, self._moves, self._time_taken,
        )

        if self._on_complete:
            try:
                self._on_complete(self._score, self._time_taken)
            except Exception:
                logger.exception("Completion callback failed for %s", self.context_id)
        return True

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
