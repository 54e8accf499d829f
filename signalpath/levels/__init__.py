"""
Levels - Level definitions, loading and conversion to game state.

Level files are JSON documents validated with pydantic at load time.
The converter turns a LevelData into the initial GameState; the solver is
authoring tooling that checks a level can be won.
"""

from .schema import LevelData, LevelInfo, LevelManifest, PositionData, TileData, HazardData, InteractableData
from .converter import create_game_state, create_grid
from .loader import (
    BUNDLED_LEVELS_DIR,
    LevelLoadResult,
    LevelNotFoundError,
    LevelRepository,
    LevelValidationError,
    LevelValidationResult,
    load_level_file,
    parse_level_data,
    validate_level_data,
)
from .solver import LevelVerification, SolveResult, solve_level, verify_level

__all__ = [
    "LevelData",
    "LevelInfo",
    "LevelManifest",
    "PositionData",
    "TileData",
    "HazardData",
    "InteractableData",
    "create_game_state",
    "create_grid",
    "BUNDLED_LEVELS_DIR",
    "LevelLoadResult",
    "LevelNotFoundError",
    "LevelRepository",
    "LevelValidationError",
    "LevelValidationResult",
    "load_level_file",
    "parse_level_data",
    "validate_level_data",
    "LevelVerification",
    "SolveResult",
    "solve_level",
    "verify_level",
]
