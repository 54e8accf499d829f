"""
Pytest fixtures for Signal Path tests.
"""

import pytest

from ..engine_core.history import History
from ..engine_core.state import (
    GameState,
    Grid,
    Hazard,
    HazardType,
    Interactable,
    KeyColor,
    Player,
    Position,
    Tile,
    TileType,
)
from ..levels.loader import LevelRepository
from ..levels.schema import LevelData
from ..progress.storage import SaveStore


def make_state(
    width=3,
    height=3,
    start=(0, 0),
    goal=(2, 2),
    energy=10,
    walls=(),
    hazards=(),
    keys=(),
    doors=(),
    level_id="test_level",
):
    """
    Build a GameState directly, bypassing level validation.

    Level files must be at least 5x5; engine tests use smaller boards.
    hazards, keys and doors are ((x, y), ...) and ((x, y, color), ...).
    """
    grid = Grid.empty(width, height)
    for x, y in walls:
        grid = grid.with_tile(Tile(TileType.WALL, Position(x, y)))

    interactables = tuple(
        Interactable.key(f"key_{i}", Position(x, y), KeyColor(color))
        for i, (x, y, color) in enumerate(keys)
    ) + tuple(
        Interactable.door(f"door_{i}", Position(x, y), KeyColor(color))
        for i, (x, y, color) in enumerate(doors)
    )

    return GameState(
        level_id=level_id,
        grid=grid,
        player=Player(position=Position(*start)),
        goal=Position(*goal),
        energy=energy,
        max_energy=energy,
        hazards=tuple(
            Hazard(id=f"hazard_{i}", position=Position(x, y), type=HazardType.SPIKE)
            for i, (x, y) in enumerate(hazards)
        ),
        interactables=interactables,
    )


@pytest.fixture
def state_factory():
    """Factory for small hand-built game states."""
    return make_state


@pytest.fixture
def walled_state() -> GameState:
    """3x3 grid, wall at (1,1), player at (0,0), energy 10."""
    return make_state(walls=[(1, 1)])


@pytest.fixture
def key_door_state() -> GameState:
    """Red key at (1,0), red door at (2,0)."""
    return make_state(keys=[(1, 0, "red")], doors=[(2, 0, "red")])


@pytest.fixture
def empty_history() -> History:
    return History()


@pytest.fixture
def level_dict() -> dict:
    """Raw level JSON as it appears on disk."""
    return {
        "id": "test_level",
        "name": "Test Level",
        "version": "1.0",
        "width": 5,
        "height": 5,
        "playerStart": {"x": 0, "y": 0},
        "goal": {"x": 4, "y": 0},
        "energy": 10,
        "tiles": [
            {"x": 2, "y": 1, "type": "wall"},
            {"x": 4, "y": 0, "type": "goal"},
        ],
        "hazards": [
            {"id": "spike_1", "x": 2, "y": 2, "type": "spike"},
        ],
        "interactables": [
            {"id": "key_green", "x": 0, "y": 4, "type": "key", "color": "green"},
            {"id": "door_green", "x": 3, "y": 3, "type": "door", "color": "green"},
        ],
    }


@pytest.fixture
def level_data(level_dict) -> LevelData:
    return LevelData.model_validate(level_dict)


@pytest.fixture
def bundled_repository() -> LevelRepository:
    """The levels shipped with the package."""
    return LevelRepository()


@pytest.fixture
def save_store(tmp_path) -> SaveStore:
    """Save store writing into a temporary directory."""
    return SaveStore(tmp_path / "save.json")
