"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /api/v1/health                   Health check
    GET    /api/v1/levels                   List levels with unlock state
    GET    /api/v1/progress                 Get the progress ledger
    POST   /api/v1/sessions                 Start a level
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session status
    DELETE /api/v1/sessions/{id}            End session
    GET    /api/v1/sessions/{id}/state      Get game state
    POST   /api/v1/sessions/{id}/actions    Submit move/wait/undo
    POST   /api/v1/sessions/{id}/restart    Restart the level

All responses are JSON with explicit Pydantic schemas. A rejected action is
a normal 200 response with `accepted=false`.
"""

from typing import Optional, Union
import os

from .. import __version__


def parse_history_limit(value: str) -> Optional[int]:
    """Undo depth from the environment. Empty or 0 means unbounded."""
    value = value.strip()
    if not value or value == "0":
        return None
    return int(value)


# Environment configuration
SIGNALPATH_ENV = os.getenv("SIGNALPATH_ENV", "development")
SIGNALPATH_LEVELS_DIR = os.getenv("SIGNALPATH_LEVELS_DIR", None)
SIGNALPATH_SAVE_PATH = os.getenv("SIGNALPATH_SAVE_PATH", None)
SIGNALPATH_HISTORY_LIMIT = parse_history_limit(os.getenv("SIGNALPATH_HISTORY_LIMIT", "256"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateSessionRequest,
        # Response models
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        LevelListResponse,
        ProgressResponse,
        SessionListResponse,
        SessionResponse,
        TurnResponse,
        # Enums
        ErrorCode,
    )
    from ..levels.loader import LevelRepository
    from ..progress.storage import SaveStore
    from ..session import SessionManager

    app = FastAPI(
        title="Signal Path API",
        description="""
Turn-based grid puzzle engine. Guide the signal to the goal before the
energy runs out.

## Turn Flow

1. `POST /sessions` with a `level_id` from `GET /levels`
2. `POST /sessions/{id}/actions` with `move` (and a direction), `wait` or `undo`
3. Each response carries the full game state and `valid_actions`
4. Winning a level records progress and returns `next_level_id`

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist or has ended |
| `LEVEL_NOT_FOUND` | Level id is not in the manifest |
| `LEVEL_LOCKED` | Previous level not completed yet |
| `INVALID_LEVEL` | Level file failed validation |
| `INVALID_ACTION` | Malformed action body |
| `VALIDATION_ERROR` | Malformed request body |
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

    # Service instance
    api_service = service or APIService(
        session_manager=SessionManager(history_limit=SIGNALPATH_HISTORY_LIMIT),
        level_repository=LevelRepository(SIGNALPATH_LEVELS_DIR),
        save_store=SaveStore(SIGNALPATH_SAVE_PATH),
    )
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

    def from_service_error(response: ErrorResponse) -> JSONResponse:
        status_code = {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.LEVEL_NOT_FOUND: 404,
            ErrorCode.LEVEL_LOCKED: 403,
        }.get(response.error_code, 400)
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_code,
            details=response.details,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        code = ErrorCode.VALIDATION_ERROR
        if request.url.path.endswith("/actions"):
            code = ErrorCode.INVALID_ACTION
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request"
        return make_error_response(
            code,
            message,
            status_code=422,
            details={"errors": [
                {"loc": [str(part) for part in e["loc"]], "msg": e["msg"]}
                for e in errors
            ]},
        )

    # =========================================================================
    # Levels and Progress
    # =========================================================================
    # Handlers that load or persist the save file are plain functions,
    # so FastAPI runs them in its threadpool.

    @app.get(
        "/api/v1/levels",
        response_model=LevelListResponse,
        tags=["Levels"],
        summary="List levels in play order",
    )
    def list_levels() -> LevelListResponse:
        """All levels with their unlock state and personal bests."""
        return api_service.list_levels()

    @app.get(
        "/api/v1/progress",
        response_model=ProgressResponse,
        tags=["Levels"],
        summary="Get the progress ledger",
    )
    def get_progress() -> ProgressResponse:
        return api_service.get_progress()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            403: {"model": ErrorResponse, "description": "Level is locked"},
            404: {"model": ErrorResponse, "description": "Unknown level"},
            400: {"model": ErrorResponse, "description": "Level file is invalid"},
        },
        tags=["Sessions"],
        summary="Start a level",
    )
    def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Start a new session on a level.

        A level is playable once the level before it has been completed.
        Set `ignore_locks` to skip the check.
        """
        response = api_service.create_session(request)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        return api_service.list_sessions_response()

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session and release its state and undo history."""
        return api_service.end_session_response(session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=TurnResponse,
        responses={
            404: {"model": ErrorResponse},
            422: {"model": ErrorResponse, "description": "Malformed action"},
        },
        tags=["Game Loop"],
        summary="Submit an action",
    )
    def submit_action(
        session_id: str,
        request: ActionRequest,
    ) -> Union[TurnResponse, JSONResponse]:
        """
        Submit move, wait or undo.

        ```json
        {"action": "move", "direction": "up"}
        ```

        If the action is not legal the state is unchanged and the response
        has `accepted=false` with a `reason`.
        """
        response = api_service.submit_action(session_id, request)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Restart the level",
    )
    def restart_session(session_id: str) -> Union[TurnResponse, JSONResponse]:
        """Rebuild the level from its definition. Clears the undo history."""
        response = api_service.restart(session_id)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="signalpath-engine",
            version=__version__,
            environment=SIGNALPATH_ENV,
            level_count=api_service.level_repository.count,
        )

    @app.get("/", tags=["System"])
    async def root():
        return {
            "name": "Signal Path API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn signalpath.api.app:app
app = create_app()
