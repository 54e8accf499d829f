"""
Validator - Decides whether an action is legal in a given state.

Validation is purely advisory and has no side effects. The reducer
re-validates before applying, so callers may skip this step; the UI and
the action generator use it to show what is currently possible.

Move checks always run in this order and the first failure is reported:
energy, bounds, walkability, locked door.
"""

from __future__ import annotations

from .action import Action, ActionType, RejectReason, ValidationResult
from .history import History
from .state import Direction, GameState


def validate_action(
    state: GameState,
    action: Action,
    history: History | None = None,
) -> ValidationResult:
    """
    Validate an action against the current state.

    `history` is the undo stack kept beside the state; it is only consulted
    for UNDO.
    """
    # No action type is exempt, undo and restart included
    if not state.is_playing:
        return ValidationResult.reject(RejectReason.NOT_PLAYING)

    validators = {
        ActionType.MOVE: lambda: _validate_move(state, action.direction),
        ActionType.WAIT: lambda: _validate_wait(state),
        ActionType.UNDO: lambda: _validate_undo(history),
        ActionType.RESTART: lambda: ValidationResult.reject(RejectReason.RESTART_EXTERNAL),
    }
    return validators[action.action_type]()


def _validate_move(state: GameState, direction: Direction | None) -> ValidationResult:
    if direction is None:
        return ValidationResult.reject(RejectReason.MISSING_DIRECTION)

    if state.energy <= 0:
        return ValidationResult.reject(RejectReason.NO_ENERGY)

    target = state.player.position.offset(direction)

    if not state.grid.in_bounds(target):
        return ValidationResult.reject(RejectReason.OUT_OF_BOUNDS)

    if not state.grid.is_walkable(target):
        return ValidationResult.reject(RejectReason.NOT_WALKABLE)

    # A locked door can be entered with a matching key; the reducer unlocks it
    door = state.locked_door_at(target)
    if door is not None and not state.player.inventory.has_key(door.color):
        return ValidationResult.reject(RejectReason.DOOR_LOCKED)

    return ValidationResult.ok()


def _validate_wait(state: GameState) -> ValidationResult:
    if state.energy <= 0:
        return ValidationResult.reject(RejectReason.NO_ENERGY)
    return ValidationResult.ok()


def _validate_undo(history: History | None) -> ValidationResult:
    if history is None or history.is_empty:
        return ValidationResult.reject(RejectReason.NOTHING_TO_UNDO)
    return ValidationResult.ok()
