"""
API Module - Client interface.

Exposes the engine via REST API for game clients.
A client:
1. Lists levels and picks an unlocked one
2. Creates a session for it
3. Submits move/wait/undo actions and renders the returned state
4. Restarts or moves on to the next level

Sessions are in-memory. The progress ledger is the only persistent state.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    # Responses
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    LevelListResponse,
    LevelSummary,
    ProgressResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    # Shared
    HazardInfo,
    InteractableInfo,
    KeyInfo,
    LevelProgressInfo,
    PositionInfo,
    # Enums
    ActionName,
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateSessionRequest",
    # Responses
    "EndSessionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "HealthResponse",
    "LevelListResponse",
    "LevelSummary",
    "ProgressResponse",
    "SessionListResponse",
    "SessionResponse",
    "TurnResponse",
    # Shared
    "HazardInfo",
    "InteractableInfo",
    "KeyInfo",
    "LevelProgressInfo",
    "PositionInfo",
    # Enums
    "ActionName",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
