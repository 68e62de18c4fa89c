"""
API Module - Front-end interface.

Exposes the engine via REST API for the puzzle-games panel.
The front-end:
1. Fetches the games for a patient's stage
2. Creates a game session
3. Forwards card clicks and renders the returned board
4. Replays at the adapted difficulty

All state is session-scoped. Nothing is persisted.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ClickRequest,
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
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ClickRequest",
    # Responses
    "SessionResponse",
    "ClickResponse",
    "ReplayResponse",
    "CatalogResponse",
    "ErrorResponse",
    # Shared
    "BoardInfo",
    "CardInfo",
    "GameInfo",
    "OutcomeInfo",
    # Service
    "APIService",
    "create_app",
]
