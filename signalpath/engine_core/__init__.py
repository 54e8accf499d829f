"""
Engine Core - Deterministic game state and turn resolution.

The engine is the runtime that:
1. Holds an immutable GameState
2. Validates actions
3. Applies actions via the reducer
4. Resolves hazards, win and loss
5. Keeps a bounded undo history beside the state
"""

from .state import (
    Direction,
    DoorState,
    GameState,
    GameStatus,
    Grid,
    Hazard,
    HazardType,
    Interactable,
    InteractableType,
    Inventory,
    KeyColor,
    KeyItem,
    KeyState,
    LoseReason,
    Player,
    Position,
    Tile,
    TileType,
)
from .action import Action, ActionType, RejectReason, ValidationResult
from .history import History, HistoryEntry, DEFAULT_HISTORY_LIMIT
from .validator import validate_action
from .reducer import Reducer, apply_action
from .rules import (
    LoseCheck,
    check_lose_condition,
    check_win_condition,
    is_game_over,
    is_game_playing,
    resolve_hazards,
    resolve_turn,
    status_message,
    update_game_status,
)
from .turn import ReplayResult, TurnResult, process_turn, replay
from .action_generator import ActionGenerator, get_valid_actions, get_valid_move_count

__all__ = [
    "Direction",
    "DoorState",
    "GameState",
    "GameStatus",
    "Grid",
    "Hazard",
    "HazardType",
    "Interactable",
    "InteractableType",
    "Inventory",
    "KeyColor",
    "KeyItem",
    "KeyState",
    "LoseReason",
    "Player",
    "Position",
    "Tile",
    "TileType",
    "Action",
    "ActionType",
    "RejectReason",
    "ValidationResult",
    "History",
    "HistoryEntry",
    "DEFAULT_HISTORY_LIMIT",
    "validate_action",
    "Reducer",
    "apply_action",
    "LoseCheck",
    "check_lose_condition",
    "check_win_condition",
    "is_game_over",
    "is_game_playing",
    "resolve_hazards",
    "resolve_turn",
    "status_message",
    "update_game_status",
    "ReplayResult",
    "TurnResult",
    "process_turn",
    "replay",
    "ActionGenerator",
    "get_valid_actions",
    "get_valid_move_count",
]
