"""
Progress Ledger - Pure functions over SaveData.

None of these functions mutate their input. They do not depend on GameState:
the session decides when a level was won and passes the numbers in.
"""

from __future__ import annotations
from typing import Sequence

from .save_data import CURRENT_SAVE_VERSION, LevelProgress, SaveData, utc_timestamp


def create_default_save_data() -> SaveData:
    """A fresh ledger: nothing completed, sound on."""
    return SaveData(version=CURRENT_SAVE_VERSION, timestamp=utc_timestamp())


def migrate_save_data(save: SaveData) -> SaveData:
    """
    Bring an older document up to CURRENT_SAVE_VERSION.

    Version 1 is the only version so far, so this is the identity.
    """
    return save


def is_unlocked(save: SaveData, index: int, ordered_level_ids: Sequence[str]) -> bool:
    """
    Whether the level at `index` in play order can be played.

    The first level is always open; any other level opens once the one
    before it is completed.
    """
    if index == 0:
        return True
    if index < 0 or index >= len(ordered_level_ids):
        return False

    previous = save.level_progress.get(ordered_level_ids[index - 1])
    return previous is not None and previous.completed


def get_progress(save: SaveData, level_id: str) -> LevelProgress:
    """Stored progress for a level, or an empty record."""
    return save.level_progress.get(level_id) or LevelProgress()


def record_completion(
    save: SaveData,
    level_id: str,
    turns: int,
    energy_remaining: int,
) -> SaveData:
    """
    Record a win.

    Keeps the fewest turns and the most energy left across all wins and
    refreshes the timestamp.
    """
    existing = get_progress(save, level_id)

    updated = LevelProgress(
        completed=True,
        best_turns=turns if existing.best_turns is None else min(existing.best_turns, turns),
        best_energy=(
            energy_remaining if existing.best_energy is None
            else max(existing.best_energy, energy_remaining)
        ),
    )

    return save.model_copy(update={
        "timestamp": utc_timestamp(),
        "level_progress": {**save.level_progress, level_id: updated},
    })


def get_completed_count(save: SaveData) -> int:
    return sum(1 for progress in save.level_progress.values() if progress.completed)


def with_sound_enabled(save: SaveData, enabled: bool) -> SaveData:
    """Return save data with the sound setting changed."""
    return save.model_copy(update={
        "timestamp": utc_timestamp(),
        "settings": save.settings.model_copy(update={"sound_enabled": enabled}),
    })
