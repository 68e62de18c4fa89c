"""
Session Manager - Creates and manages game sessions.

A session is the engine's host:
1. Front-end opens a session for a patient and a game
2. Session creates the engine at the stage's starting difficulty
3. During play:
   - Renderer forwards clicks to the engine
   - Engine reports (score, time_taken) when the board is won
   - Session records the outcome and adapts the difficulty
4. Replay starts a new board at the adapted difficulty
5. Session ends -> timers cancelled, ALL state dropped

PERSISTENCE RULES:
- NO database for gameplay
- Sessions are in-memory only
- Storing scores for a patient is the caller's responsibility
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging
import time
import uuid

from ..adaptation import DEFAULT_POLICY, DifficultyPolicy
from ..engine_core import ActionResult, MemoryMatchEngine, RejectReason, Scheduler
from ..engine_core.deck import RandomSource
from ..engine_core.engine import MISMATCH_DELAY_SECONDS
from ..games import games_for_stage, get_game, initial_difficulty

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Board in play
    GAME_OVER = "game_over"  # Ended after play
    ABANDONED = "abandoned"  # User quit or session went stale


@dataclass
class GameOutcome:
    """One finished board, as reported by the engine."""
    score: int
    time_taken: int
    difficulty: int
    next_difficulty: int
    completed_at: float


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The patient context (opaque id and stage)
    - The engine for the current board
    - Outcomes of boards won in this session
    - The host-side difficulty used for the next board
    """
    session_id: str
    patient_id: str
    game_id: str
    difficulty: int
    created_at: float
    patient_stage: str | None = None

    state: SessionState = SessionState.ACTIVE
    engine: MemoryMatchEngine | None = None
    outcomes: list[GameOutcome] = field(default_factory=list)
    last_activity: float = 0.0

    policy: DifficultyPolicy = DEFAULT_POLICY
    clock: Callable[[], float] = time.time

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    @property
    def last_outcome(self) -> GameOutcome | None:
        return self.outcomes[-1] if self.outcomes else None

    def click(self, index: int) -> ActionResult:
        """Forward a card click to the engine."""
        if not self.engine or not self.is_active():
            return ActionResult.failure("Session is not active", error_code=RejectReason.NOT_READY)
        self.last_activity = self.clock()
        return self.engine.click(index)

    def replay(self) -> ActionResult:
        """Start a new board, switching to the adapted difficulty if it changed."""
        if not self.engine or not self.is_active():
            return ActionResult.failure("Session is not active", error_code=RejectReason.NOT_READY)
        self.last_activity = self.clock()
        if self.engine.difficulty != self.difficulty:
            return self.engine.set_difficulty(self.difficulty)
        return self.engine.replay()

    def on_game_complete(self, score: int, time_taken: int) -> None:
        """Completion callback handed to the engine."""
        played = self.engine.difficulty if self.engine else self.difficulty
        try:
            next_level = self.policy.next_difficulty(score, time_taken, played)
        except ValueError:
            logger.error("Invalid difficulty level for game %s: %r", self.game_id, played)
            return

        self.outcomes.append(GameOutcome(
            score=score,
            time_taken=time_taken,
            difficulty=played,
            next_difficulty=next_level,
            completed_at=self.clock(),
        ))
        logger.info(
            "Game %s completed for %s: score=%s time=%ss",
            self.game_id, self.patient_id, score, time_taken,
        )
        if next_level != self.difficulty:
            logger.info(
                "Adjusted difficulty for %s from %s to %s",
                self.game_id, self.difficulty, next_level,
            )
        self.difficulty = next_level


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions (and their engines) for a patient and game
    - Track active sessions
    - Tear down ended or stale sessions

    The scheduler factory, rng factory and clock are passed through to
    every engine so tests can drive time deterministically.
    """

    def __init__(
        self,
        scheduler_factory: Callable[[], Scheduler] | None = None,
        rng_factory: Callable[[], RandomSource] | None = None,
        clock: Callable[[], float] | None = None,
        policy: DifficultyPolicy = DEFAULT_POLICY,
        mismatch_delay: float = MISMATCH_DELAY_SECONDS,
    ):
        self._sessions: dict[str, Session] = {}
        self._scheduler_factory = scheduler_factory
        self._rng_factory = rng_factory
        self._clock = clock or time.time
        self._policy = policy
        self._mismatch_delay = mismatch_delay

    def create_session(
        self,
        patient_id: str,
        patient_stage: str | None = None,
        game_id: str | None = None,
        difficulty: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            patient_id: Opaque id of the playing context
            patient_stage: Patient stage (early/moderate/advanced)
            game_id: Game to play (defaults to the stage's first game)
            difficulty: Starting difficulty (defaults to the stage's level)

        Returns:
            New Session with a ready board

        Raises:
            ValueError: if the game is unknown or not playable
        """
        if game_id is None:
            game_id = games_for_stage(patient_stage)[0].game_id
        game = get_game(game_id)
        if game is None:
            raise ValueError(f"Unknown game: {game_id}")
        if not game.playable:
            raise ValueError(f"Game {game_id} is not playable yet")

        if difficulty is None:
            difficulty = initial_difficulty(patient_stage)

        now = self._clock()
        session = Session(
            session_id=str(uuid.uuid4()),
            patient_id=patient_id,
            patient_stage=patient_stage,
            game_id=game_id,
            difficulty=difficulty,
            created_at=now,
            last_activity=now,
            policy=self._policy,
            clock=self._clock,
        )
        session.engine = MemoryMatchEngine(
            context_id=patient_id,
            difficulty=difficulty,
            on_complete=session.on_game_complete,
            rng=self._rng_factory() if self._rng_factory else None,
            scheduler=self._scheduler_factory() if self._scheduler_factory else None,
            clock=self._clock,
            mismatch_delay=self._mismatch_delay,
        )

        self._sessions[session.session_id] = session
        logger.info(
            "Session %s created for %s: game=%s difficulty=%s",
            session.session_id, patient_id, game_id, difficulty,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Cancels any pending mismatch reversion and drops the board.
        Returns False if the session does not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED

        if session.engine:
            session.engine.close()
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the IDs removed.
        """
        current_time = self._clock()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
