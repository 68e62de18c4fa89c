"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the front-end renderer and the
engine. Face-down card values are never sent: `value` is null until the
card is flipped or matched.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_GAME: Game id unknown or not playable
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class BoardPhase(str, Enum):
    """Board phase values (mirror of the engine's GamePhase)."""
    UNINITIALIZED = "uninitialized"
    UNREADY = "unready"
    READY = "ready"
    SELECTING = "selecting"
    WON = "won"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_GAME = "INVALID_GAME"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """A card as the renderer sees it."""
    id: int
    value: Optional[str] = Field(None, description="Symbol, null while face-down")
    is_flipped: bool = False
    is_matched: bool = False

    model_config = {"from_attributes": True}


class BoardInfo(BaseModel):
    """Board state for display."""
    phase: BoardPhase
    difficulty: int
    pair_count: int
    moves: int = 0
    won: bool = False
    pending: list[int] = Field(default_factory=list)
    mismatch_pending: bool = False
    score: Optional[int] = None
    time_taken: Optional[int] = None
    cards: list[CardInfo] = Field(default_factory=list)


class GameInfo(BaseModel):
    """A game offered to a patient."""
    game_id: str
    title: str
    description: str
    playable: bool = False

    model_config = {"from_attributes": True}


class OutcomeInfo(BaseModel):
    """A finished board."""
    score: int = Field(ge=0)
    time_taken: int = Field(ge=0)
    difficulty: int
    next_difficulty: int
    completed_at: float

    model_config = {"from_attributes": True}


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Open a game for a patient."""
    patient_id: str = Field(min_length=1, description="Opaque patient identifier")
    patient_stage: Optional[str] = Field(
        None, description="early, moderate or advanced"
    )
    game_id: Optional[str] = Field(
        None, description="Game to play (defaults to the stage's first game)"
    )
    difficulty: Optional[int] = Field(
        None, description="Starting difficulty (defaults to the stage's level)"
    )


class ClickRequest(BaseModel):
    """Reveal the card at index."""
    index: int


# =============================================================================
# Responses
# =============================================================================

class SessionResponse(BaseModel):
    """Session status with its current board."""
    session_id: str
    patient_id: str
    game_id: str
    status: SessionStatus
    difficulty: int = Field(description="Difficulty for the next board")
    board: BoardInfo
    outcomes: list[OutcomeInfo] = Field(default_factory=list)
    created_at: float


class ClickResponse(BaseModel):
    """Result of a click; ignored clicks have accepted=false."""
    session_id: str
    accepted: bool
    reason: Optional[str] = None
    matched: Optional[bool] = None
    won: bool = False
    changes: list[str] = Field(default_factory=list)
    board: BoardInfo


class ReplayResponse(BaseModel):
    """Result of starting a new board."""
    session_id: str
    success: bool
    difficulty: int
    board: BoardInfo


class SessionListResponse(BaseModel):
    """Active session IDs."""
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    """Result of ending a session."""
    success: bool
    session_id: str


class CatalogResponse(BaseModel):
    """Games offered at a stage."""
    stage: Optional[str] = None
    initial_difficulty: int
    games: list[GameInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check."""
    status: str = "ok"
    version: str
    environment: str
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    """Error payload."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
