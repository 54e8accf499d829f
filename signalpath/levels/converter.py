"""
Level Converter - Builds the initial GameState for a level.

The LevelData is assumed to be structurally valid already (see loader.py).
The converter only drops individual tile overrides that fall outside the
grid. It does not check that the level can be solved; see solver.py.
"""

from __future__ import annotations

from ..engine_core.state import (
    GameState,
    GameStatus,
    Grid,
    Hazard,
    Interactable,
    InteractableType,
    Inventory,
    Player,
    Position,
    Tile,
)
from .schema import LevelData


def create_grid(level: LevelData) -> Grid:
    """
    Create the grid for a level.

    Every cell starts empty; `tiles` entries override single cells.
    """
    rows = [list(row) for row in Grid.empty(level.width, level.height).tiles]

    for data in level.tiles:
        if 0 <= data.x < level.width and 0 <= data.y < level.height:
            rows[data.y][data.x] = Tile(type=data.type, position=Position(data.x, data.y))

    return Grid(
        width=level.width,
        height=level.height,
        tiles=tuple(tuple(row) for row in rows),
    )


def create_game_state(level: LevelData) -> GameState:
    """
    Create the initial game state for a level.

    This is the only way a GameState is created; every later state comes
    from applying actions to it. Restarting a level calls this again.
    """
    hazards = tuple(
        Hazard(id=h.id, position=Position(h.x, h.y), type=h.type, active=True)
        for h in level.hazards
    )

    interactables = tuple(
        Interactable.key(i.id, Position(i.x, i.y), i.color)
        if i.type == InteractableType.KEY
        else Interactable.door(i.id, Position(i.x, i.y), i.color)
        for i in level.interactables
    )

    return GameState(
        level_id=level.id,
        status=GameStatus.PLAYING,
        turn_count=0,
        grid=create_grid(level),
        player=Player(
            position=Position(level.player_start.x, level.player_start.y),
            inventory=Inventory(),
        ),
        hazards=hazards,
        interactables=interactables,
        goal=Position(level.goal.x, level.goal.y),
        energy=level.energy,
        max_energy=level.energy,
    )
