"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a client (web or mobile UI) and
the engine. Clients read state and submit actions; they never change state
directly.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- LEVEL_NOT_FOUND: Level id is not in the level manifest
- LEVEL_LOCKED: The previous level has not been completed yet
- INVALID_LEVEL: The level file exists but failed validation
- INVALID_ACTION: The action body is malformed (e.g. move without direction)
- VALIDATION_ERROR: The request body is malformed
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..engine_core.state import Direction


API_VERSION = "v1"


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"


class ActionName(str, Enum):
    """Actions a client may submit. Restart has its own endpoint."""
    MOVE = "move"
    WAIT = "wait"
    UNDO = "undo"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    LEVEL_NOT_FOUND = "LEVEL_NOT_FOUND"
    LEVEL_LOCKED = "LEVEL_LOCKED"
    INVALID_LEVEL = "INVALID_LEVEL"
    INVALID_ACTION = "INVALID_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    x: int
    y: int

    model_config = {"from_attributes": True}


class KeyInfo(BaseModel):
    """A key held by the player."""
    id: str
    color: str


class HazardInfo(BaseModel):
    id: str
    type: str
    position: PositionInfo
    active: bool = True


class InteractableInfo(BaseModel):
    """A key or door on the grid."""
    id: str
    type: str = Field(description="key or door")
    color: str
    position: PositionInfo
    collected: Optional[bool] = Field(None, description="Keys only")
    locked: Optional[bool] = Field(None, description="Doors only")


class LevelProgressInfo(BaseModel):
    completed: bool = False
    best_turns: Optional[int] = None
    best_energy: Optional[int] = None

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start playing a level."""
    level_id: str = Field(..., description="Level id from GET /levels")
    history_limit: Optional[int] = Field(
        None, ge=1, description="Undo depth for this session (server default if omitted)"
    )
    ignore_locks: bool = Field(False, description="Allow playing a level that is not unlocked yet")


class ActionRequest(BaseModel):
    """A single player action."""
    action: ActionName
    direction: Optional[Direction] = Field(None, description="Required for move")

    @model_validator(mode="after")
    def _direction_for_move(self):
        if self.action == ActionName.MOVE and self.direction is None:
            raise ValueError("move requires a direction")
        return self


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field(API_VERSION, description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    level_id: str
    status: SessionStatus
    message: str
    turn_count: int
    energy: int
    max_energy: int
    width: int
    height: int
    player: PositionInfo
    goal: PositionInfo
    inventory: list[KeyInfo] = Field(default_factory=list)
    walls: list[PositionInfo] = Field(default_factory=list)
    hazards: list[HazardInfo] = Field(default_factory=list)
    interactables: list[InteractableInfo] = Field(default_factory=list)
    lose_reason: Optional[str] = None
    can_undo: bool = False
    valid_actions: list[str] = Field(default_factory=list, description="e.g. move:up, wait, undo")
    api_version: str = API_VERSION


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    level_id: str
    level_name: str
    level_index: Optional[int] = None
    created_at: float = 0.0
    history_depth: int = 0
    restarts: int = 0
    api_version: str = API_VERSION


class TurnResponse(BaseModel):
    """
    Response after submitting an action.

    A rejected action is not an HTTP error: accepted is false and reason
    says why. The state is returned either way.
    """
    session_id: str
    accepted: bool
    reason: Optional[str] = None
    level_completed: bool = False
    progress: Optional[LevelProgressInfo] = None
    next_level_id: Optional[str] = None
    game_state: GameStateResponse
    api_version: str = API_VERSION


class LevelSummary(BaseModel):
    """A level as shown on a level-select screen."""
    level_id: str
    name: str
    description: Optional[str] = None
    index: int
    unlocked: bool
    progress: LevelProgressInfo = Field(default_factory=LevelProgressInfo)


class LevelListResponse(BaseModel):
    levels: list[LevelSummary]
    count: int
    completed_count: int = 0
    api_version: str = API_VERSION


class ProgressResponse(BaseModel):
    """The progress ledger."""
    version: int
    timestamp: str
    completed_count: int
    levels: dict[str, LevelProgressInfo] = Field(default_factory=dict)
    sound_enabled: bool = True
    api_version: str = API_VERSION


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str = "development"
    level_count: int = 0
