"""
FastAPI Application - REST API for the puzzle-games front-end.

Endpoints:
    GET    /api/v1/health                     Health check
    GET    /api/v1/catalog                    Games for a patient stage
    POST   /api/v1/sessions                   Create game session
    GET    /api/v1/sessions                   List active sessions
    GET    /api/v1/sessions/{id}              Get session and board
    DELETE /api/v1/sessions/{id}              End session
    POST   /api/v1/sessions/{id}/click        Reveal a card
    POST   /api/v1/sessions/{id}/replay       Start a new board

Mismatch flow:
    1. Second click on a different symbol returns matched=false
    2. Both cards stay face-up for MEMCARE_MISMATCH_DELAY seconds
    3. The engine flips them back; the next GET shows them face-down

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    ClickRequest,
    # Response models
    SessionResponse,
    ClickResponse,
    ReplayResponse,
    SessionListResponse,
    EndSessionResponse,
    CatalogResponse,
    HealthResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
)
from ..engine_core import AsyncioScheduler
from ..session import SessionManager

logger = logging.getLogger(__name__)

# Environment configuration
MEMCARE_ENV = os.getenv("MEMCARE_ENV", "development")
MEMCARE_MISMATCH_DELAY = float(os.getenv("MEMCARE_MISMATCH_DELAY", "1.0"))
MEMCARE_SESSION_MAX_AGE = int(os.getenv("MEMCARE_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_service() -> APIService:
    """Service wired for the event loop: mismatch timers run on asyncio."""
    manager = SessionManager(
        scheduler_factory=AsyncioScheduler,
        mismatch_delay=MEMCARE_MISMATCH_DELAY,
    )
    return APIService(session_manager=manager)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Memcare Puzzle Games API",
        description="""
Memory Match engine for the memory-care assistant.

## Play Flow

1. `POST /sessions` with the patient id and stage
2. Render `board.cards`; face-down cards have `value: null`
3. `POST /sessions/{id}/click` with the clicked index
4. When `won` is true, the outcome is recorded and the difficulty adapted
5. `POST /sessions/{id}/replay` starts the next board

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_GAME` | Game id unknown or not playable |
| `VALIDATION_ERROR` | Request failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or create_service()
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ]},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    # =========================================================================
    # Health & Catalog
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            environment=MEMCARE_ENV,
            active_sessions=len(api_service.list_sessions()),
        )

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Games"],
        summary="Games offered at a patient stage",
    )
    async def catalog(
        stage: Annotated[Optional[str], Query(description="early, moderate or advanced")] = None,
    ) -> CatalogResponse:
        return api_service.catalog(stage)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid game"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Open a game for a patient.

        Without `game_id` the stage's first game is used; without
        `difficulty` the stage's starting level is used.
        """
        api_service.cleanup_sessions(MEMCARE_SESSION_MAX_AGE)
        try:
            return api_service.create_session(body)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_GAME, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status and board",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a session and cancel its timers."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/click",
        response_model=ClickResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Reveal a card",
    )
    async def click(session_id: str, body: ClickRequest) -> Union[ClickResponse, JSONResponse]:
        """
        Reveal the card at `index`.

        Clicks the engine ignores (out of range, already face-up, two
        cards pending, game won) return `accepted: false`.
        """
        response = api_service.click(session_id, body.index)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/replay",
        response_model=ReplayResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start a new board",
    )
    async def replay(session_id: str) -> Union[ReplayResponse, JSONResponse]:
        response = api_service.replay(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    return app


# For running directly: uvicorn memcare.api.app:app
app = create_app()
