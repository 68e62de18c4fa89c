"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/engine calls
2. Manages sessions
3. Formats boards for the renderer (face-down values hidden)

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    SessionResponse,
    ClickResponse,
    ReplayResponse,
    CatalogResponse,
    ErrorResponse,
    # Shared
    BoardInfo,
    CardInfo,
    GameInfo,
    OutcomeInfo,
    # Enums
    BoardPhase,
    ErrorCode,
    SessionStatus,
)
from ..engine_core import MemoryMatchEngine
from ..games import games_for_stage, initial_difficulty
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for the front-end.

    Usage:
        service = APIService()

        # Open a game
        session = service.create_session(CreateSessionRequest(patient_id="p1"))

        # Forward clicks
        response = service.click(session.session_id, 3)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def catalog(self, stage: str | None = None) -> CatalogResponse:
        """Games offered at a patient stage."""
        return CatalogResponse(
            stage=stage,
            initial_difficulty=initial_difficulty(stage),
            games=[GameInfo.model_validate(g) for g in games_for_stage(stage)],
        )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises:
            ValueError: if the game is unknown or not playable
        """
        session = self.session_manager.create_session(
            patient_id=request.patient_id,
            patient_stage=request.patient_stage,
            game_id=request.game_id,
            difficulty=request.difficulty,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status and board."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def cleanup_sessions(self, max_age_seconds: int) -> list[str]:
        """End idle sessions."""
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        if removed:
            logger.info("Removed %d stale session(s)", len(removed))
        return removed

    def click(self, session_id: str, index: int) -> ClickResponse | ErrorResponse:
        """
        Forward a card click.

        Ignored clicks are not errors: they come back with accepted=False
        and the reason.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = session.click(index)
        return ClickResponse(
            session_id=session_id,
            accepted=result.success,
            reason=result.error_code,
            matched=result.matched,
            won=result.won,
            changes=result.state_changes,
            board=self._board_info(session.engine),
        )

    def replay(self, session_id: str) -> ReplayResponse | ErrorResponse:
        """Start a new board at the session's current difficulty."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = session.replay()
        return ReplayResponse(
            session_id=session_id,
            success=result.success,
            difficulty=session.engine.difficulty,
            board=self._board_info(session.engine),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            patient_id=session.patient_id,
            game_id=session.game_id,
            status=SessionStatus(session.state.value),
            difficulty=session.difficulty,
            board=self._board_info(session.engine),
            outcomes=[OutcomeInfo.model_validate(o) for o in session.outcomes],
            created_at=session.created_at,
        )

    def _board_info(self, engine: MemoryMatchEngine) -> BoardInfo:
        return BoardInfo(
            phase=BoardPhase(engine.phase.value),
            difficulty=engine.difficulty,
            pair_count=engine.pair_count,
            moves=engine.moves,
            won=engine.won,
            pending=list(engine.pending),
            mismatch_pending=engine.mismatch_pending,
            score=engine.score,
            time_taken=engine.time_taken,
            cards=[
                CardInfo(
                    id=card.id,
                    value=card.value if card.is_flipped or card.is_matched else None,
                    is_flipped=card.is_flipped,
                    is_matched=card.is_matched,
                )
                for card in engine.cards
            ],
        )
