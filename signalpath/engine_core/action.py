"""
Action System - Actions and validation results.

Actions are plain data. All state changes flow through them:
- Validated before application
- Applied atomically by the reducer
- Logged in the history for undo and replay
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .state import Direction


class ActionType(Enum):
    """Types of actions a player can submit."""
    MOVE = "move"
    WAIT = "wait"
    UNDO = "undo"

    # Rejected by the engine: a restart rebuilds the level from its LevelData
    RESTART = "restart"


class RejectReason(str, Enum):
    """Why an action was rejected."""
    NOT_PLAYING = "game is not playing"
    NO_ENERGY = "no energy"
    OUT_OF_BOUNDS = "out of bounds"
    NOT_WALKABLE = "not walkable"
    DOOR_LOCKED = "door is locked"
    NOTHING_TO_UNDO = "nothing to undo"
    RESTART_EXTERNAL = "restart is handled outside the engine"
    MISSING_DIRECTION = "move requires a direction"


@dataclass(frozen=True)
class Action:
    """
    A complete action to be validated and applied.

    Only MOVE carries a direction.
    """
    action_type: ActionType
    direction: Direction | None = None

    @classmethod
    def move(cls, direction: Direction | str) -> Action:
        """Factory for move action."""
        return cls(action_type=ActionType.MOVE, direction=Direction(direction))

    @classmethod
    def wait(cls) -> Action:
        return cls(action_type=ActionType.WAIT)

    @classmethod
    def undo(cls) -> Action:
        return cls(action_type=ActionType.UNDO)

    @classmethod
    def restart(cls) -> Action:
        return cls(action_type=ActionType.RESTART)

    @classmethod
    def parse(cls, text: str) -> Action:
        """
        Parse the short text form used by the CLI and replays.

        Accepts "up", "down", "left", "right", "move:<dir>", "wait" and "undo".
        Raises ValueError for anything else.
        """
        token = text.strip().lower()
        if token.startswith("move:"):
            return cls.move(token.split(":", 1)[1])
        if token in {d.value for d in Direction}:
            return cls.move(token)
        if token == "wait":
            return cls.wait()
        if token == "undo":
            return cls.undo()
        raise ValueError(f"Unknown action: {text!r}")

    def __str__(self) -> str:
        if self.action_type == ActionType.MOVE and self.direction is not None:
            return f"move:{self.direction.value}"
        return self.action_type.value


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validating an action.

    If valid is False, reason says why.
    """
    valid: bool
    reason: RejectReason | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: RejectReason) -> ValidationResult:
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid
