"""
Save Data - Pydantic models for the persisted progress document.

On disk the document is camelCase JSON:

    {"version": 1, "timestamp": "...",
     "levelProgress": {"01_first_steps": {"completed": true, "bestTurns": 8, "bestEnergy": 2}},
     "settings": {"soundEnabled": true}}

Models are frozen; ledger functions return updated copies.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


CURRENT_SAVE_VERSION = 1


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class SaveModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LevelProgress(SaveModel):
    """Completion and personal bests for one level."""
    completed: StrictBool = False
    best_turns: Optional[StrictInt] = None
    best_energy: Optional[StrictInt] = None


class SaveSettings(SaveModel):
    sound_enabled: StrictBool = True


class SaveData(SaveModel):
    """Cross-level progress record."""
    version: StrictInt = CURRENT_SAVE_VERSION
    timestamp: StrictStr = Field(default_factory=utc_timestamp)
    level_progress: dict[str, LevelProgress] = Field(default_factory=dict)
    settings: SaveSettings = Field(default_factory=SaveSettings)

    def to_json_dict(self) -> dict:
        """Dump in the on-disk camelCase form."""
        return self.model_dump(mode="json", by_alias=True)
