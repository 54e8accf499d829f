"""
Level Schema - Pydantic models for level definition files.

These models describe the external JSON format of a level. Keys are
camelCase on disk (playerStart) and snake_case in Python (player_start);
both are accepted when parsing.

A LevelData is only used at load time: the converter turns it into a
GameState once and never touches it again.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..engine_core.state import HazardType, InteractableType, KeyColor, TileType


MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 20


class LevelModel(BaseModel):
    """Base for level models: camelCase aliases, immutable once parsed."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PositionData(LevelModel):
    x: int
    y: int


class TileData(LevelModel):
    """A tile override. Entries outside the grid are ignored by the converter."""
    x: int
    y: int
    type: TileType


class HazardData(LevelModel):
    id: str
    x: int
    y: int
    type: HazardType


class InteractableData(LevelModel):
    id: str
    x: int
    y: int
    type: InteractableType
    color: Optional[KeyColor] = None

    @model_validator(mode="after")
    def _require_color(self):
        if self.color is None:
            raise ValueError(f"{self.type.value} '{self.id}' requires a color")
        return self


class LevelData(LevelModel):
    """A complete level definition."""
    id: str
    name: str
    version: str
    width: int = Field(ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    height: int = Field(ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    player_start: PositionData
    goal: PositionData
    energy: int = Field(gt=0)
    description: Optional[str] = None
    tiles: tuple[TileData, ...] = ()
    hazards: tuple[HazardData, ...] = ()
    interactables: tuple[InteractableData, ...] = ()

    @model_validator(mode="after")
    def _positions_in_bounds(self):
        for name, pos in (("playerStart", self.player_start), ("goal", self.goal)):
            if not (0 <= pos.x < self.width and 0 <= pos.y < self.height):
                raise ValueError(f"Invalid or missing {name} position")
        return self

    def to_json_dict(self) -> dict:
        """Dump in the on-disk camelCase form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LevelInfo(LevelModel):
    """
    Manifest entry for a level.

    Used for level selection without loading the full level.
    """
    id: str
    name: str
    filename: str
    description: Optional[str] = None


class LevelManifest(LevelModel):
    """Ordered list of available levels."""
    levels: tuple[LevelInfo, ...] = ()
