"""
Progress - The cross-level save ledger.

SaveData records which levels are completed and the best turns/energy for
each. Ledger functions are pure; SaveStore persists the document and falls
back to defaults when the file is missing or corrupt.
"""

from .save_data import CURRENT_SAVE_VERSION, LevelProgress, SaveData, SaveSettings
from .ledger import (
    create_default_save_data,
    get_completed_count,
    get_progress,
    is_unlocked,
    migrate_save_data,
    record_completion,
    with_sound_enabled,
)
from .storage import DEFAULT_SAVE_PATH, SaveStore, deserialize_save_data, serialize_save_data

__all__ = [
    "CURRENT_SAVE_VERSION",
    "LevelProgress",
    "SaveData",
    "SaveSettings",
    "create_default_save_data",
    "get_completed_count",
    "get_progress",
    "is_unlocked",
    "migrate_save_data",
    "record_completion",
    "with_sound_enabled",
    "DEFAULT_SAVE_PATH",
    "SaveStore",
    "deserialize_save_data",
    "serialize_save_data",
]
