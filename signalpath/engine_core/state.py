"""
Game State - Immutable state containers for a Signal Path level attempt.

Design principles:
- Immutable: every container is a frozen dataclass, all mutations return new state
- Serializable: plain values and tuples only, no back-references
- Cheap identity: unchanged branches are shared between successive states
- Behavior-free: rules live in validator.py, reducer.py and rules.py
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator


class Direction(str, Enum):
    """Cardinal movement directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        return DIRECTION_DELTAS[self]


DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class TileType(str, Enum):
    EMPTY = "empty"
    WALL = "wall"
    GOAL = "goal"


class KeyColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


class HazardType(str, Enum):
    SPIKE = "spike"
    LASER = "laser"
    FIRE = "fire"


class InteractableType(str, Enum):
    KEY = "key"
    DOOR = "door"


class GameStatus(str, Enum):
    """Status of a level attempt. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class LoseReason(str, Enum):
    HAZARD = "hazard"
    ENERGY_DEPLETED = "energy_depleted"


@dataclass(frozen=True)
class Position:
    """
    A grid cell.

    Origin (0, 0) is top-left, x grows to the right, y grows downwards.
    """
    x: int
    y: int

    def offset(self, direction: Direction) -> Position:
        """Return the neighbouring position in the given direction."""
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class Tile:
    """A single grid cell. Only walls are not walkable."""
    type: TileType
    position: Position

    @property
    def walkable(self) -> bool:
        return self.type != TileType.WALL


@dataclass(frozen=True)
class Grid:
    """
    The level grid.

    Tiles are stored row-major: tiles[y][x] is the tile at (x, y).
    Built once when a level is loaded and shared by every state of the attempt.
    """
    width: int
    height: int
    tiles: tuple[tuple[Tile, ...], ...]

    @classmethod
    def empty(cls, width: int, height: int) -> Grid:
        """Create a grid where every tile is empty."""
        tiles = tuple(
            tuple(Tile(TileType.EMPTY, Position(x, y)) for x in range(width))
            for y in range(height)
        )
        return cls(width=width, height=height, tiles=tiles)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def tile_at(self, pos: Position) -> Tile | None:
        """Get the tile at a position, or None when out of bounds."""
        if not self.in_bounds(pos):
            return None
        return self.tiles[pos.y][pos.x]

    def is_walkable(self, pos: Position) -> bool:
        tile = self.tile_at(pos)
        return tile is not None and tile.walkable

    def neighbors(self, pos: Position) -> list[Position]:
        """In-bounds 4-directional neighbours, ordered up, down, left, right."""
        return [
            neighbor
            for neighbor in (pos.offset(d) for d in Direction)
            if self.in_bounds(neighbor)
        ]

    def walkable_neighbors(self, pos: Position) -> list[Position]:
        return [n for n in self.neighbors(pos) if self.is_walkable(n)]

    def with_tile(self, tile: Tile) -> Grid:
        """Return new grid with one tile replaced."""
        pos = tile.position
        row = self.tiles[pos.y]
        new_row = row[:pos.x] + (tile,) + row[pos.x + 1:]
        new_tiles = self.tiles[:pos.y] + (new_row,) + self.tiles[pos.y + 1:]
        return replace(self, tiles=new_tiles)

    def __iter__(self) -> Iterator[Tile]:
        for row in self.tiles:
            yield from row


@dataclass(frozen=True)
class KeyItem:
    """A collected key, as held in the player's inventory."""
    id: str
    color: KeyColor


@dataclass(frozen=True)
class Inventory:
    keys: tuple[KeyItem, ...] = ()

    def has_key(self, color: KeyColor) -> bool:
        return any(key.color == color for key in self.keys)

    def add_key(self, key: KeyItem) -> Inventory:
        return Inventory(keys=self.keys + (key,))


@dataclass(frozen=True)
class Player:
    position: Position
    inventory: Inventory = field(default_factory=Inventory)

    def moved_to(self, position: Position) -> Player:
        return replace(self, position=position)


@dataclass(frozen=True)
class Hazard:
    """
    A hazard on the grid.

    Stepping onto an active hazard loses the level. Every hazard is
    active in the current ruleset.
    """
    id: str
    position: Position
    type: HazardType
    active: bool = True


@dataclass(frozen=True)
class KeyState:
    color: KeyColor
    collected: bool = False


@dataclass(frozen=True)
class DoorState:
    color: KeyColor
    locked: bool = True


@dataclass(frozen=True)
class Interactable:
    """
    A key or door on the grid.

    The state variant always agrees with `type`: keys carry a KeyState,
    doors carry a DoorState.
    """
    id: str
    position: Position
    type: InteractableType
    state: KeyState | DoorState

    @classmethod
    def key(cls, id: str, position: Position, color: KeyColor) -> Interactable:
        return cls(id=id, position=position, type=InteractableType.KEY, state=KeyState(color))

    @classmethod
    def door(cls, id: str, position: Position, color: KeyColor) -> Interactable:
        return cls(id=id, position=position, type=InteractableType.DOOR, state=DoorState(color))

    @property
    def color(self) -> KeyColor:
        return self.state.color

    @property
    def is_uncollected_key(self) -> bool:
        return isinstance(self.state, KeyState) and not self.state.collected

    @property
    def is_locked_door(self) -> bool:
        return isinstance(self.state, DoorState) and self.state.locked

    def collect(self) -> Interactable:
        """Return this key marked as collected."""
        if not isinstance(self.state, KeyState):
            raise TypeError(f"{self.id} is not a key")
        return replace(self, state=replace(self.state, collected=True))

    def unlock(self) -> Interactable:
        """Return this door unlocked. Doors never lock again."""
        if not isinstance(self.state, DoorState):
            raise TypeError(f"{self.id} is not a door")
        return replace(self, state=replace(self.state, locked=False))


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one level attempt at a point in time.

    This is the canonical value the engine operates on. Every transition
    produces a new GameState; undo history is kept beside it by the caller
    (see history.py), not inside it.
    """
    level_id: str
    grid: Grid
    player: Player
    goal: Position
    energy: int
    max_energy: int

    status: GameStatus = GameStatus.PLAYING
    turn_count: int = 0
    hazards: tuple[Hazard, ...] = ()
    interactables: tuple[Interactable, ...] = ()

    # Set together with status=LOST
    lose_reason: LoseReason | None = None

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    @property
    def keys(self) -> tuple[Interactable, ...]:
        return tuple(i for i in self.interactables if i.type == InteractableType.KEY)

    @property
    def doors(self) -> tuple[Interactable, ...]:
        return tuple(i for i in self.interactables if i.type == InteractableType.DOOR)

    def interactables_at(self, pos: Position) -> list[Interactable]:
        return [i for i in self.interactables if i.position == pos]

    def locked_door_at(self, pos: Position) -> Interactable | None:
        for item in self.interactables:
            if item.position == pos and item.is_locked_door:
                return item
        return None

    def uncollected_key_at(self, pos: Position) -> Interactable | None:
        for item in self.interactables:
            if item.position == pos and item.is_uncollected_key:
                return item
        return None

    def hazards_at(self, pos: Position) -> list[Hazard]:
        return [h for h in self.hazards if h.position == pos]

    def get_interactable(self, interactable_id: str) -> Interactable | None:
        for item in self.interactables:
            if item.id == interactable_id:
                return item
        return None

    def with_interactable(self, old: Interactable, new: Interactable) -> GameState:
        """Return new state with `old` swapped for `new`. Ids need not be unique."""
        new_interactables = tuple(
            new if i is old else i
            for i in self.interactables
        )
        return self._copy_with(interactables=new_interactables)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
