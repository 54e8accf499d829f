"""
Save Storage - Serialization and file persistence for SaveData.

The store is the only code that touches the save file. Reading never
fails: a missing, unreadable or corrupt file yields a fresh default
document, and the problem is logged.

Design decisions:
- One JSON file, written via a temp file and rename
- Schema validation with pydantic on every read
- Migration runs after validation
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .ledger import create_default_save_data, migrate_save_data
from .save_data import SaveData


logger = logging.getLogger(__name__)

DEFAULT_SAVE_PATH = Path.home() / ".signalpath" / "save.json"


def serialize_save_data(save: SaveData) -> str:
    return json.dumps(save.to_json_dict())


def deserialize_save_data(text: str) -> SaveData | None:
    """Parse and validate a save document. Returns None if it is not valid."""
    try:
        save = SaveData.model_validate_json(text)
    except ValidationError as e:
        logger.debug("Save data failed validation: %s", e)
        return None
    return migrate_save_data(save)


class SaveStore:
    """
    File-based store for the progress ledger.

    Usage:
        store = SaveStore()               # ~/.signalpath/save.json
        save = store.load()
        save = record_completion(save, "01_first_steps", 8, 2)
        store.persist(save)
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else DEFAULT_SAVE_PATH

    def load(self) -> SaveData:
        """Load save data, or a default document if none is usable."""
        if not self.path.exists():
            return create_default_save_data()

        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Save file %s is not valid UTF-8 (%s), starting fresh", self.path, e)
            return create_default_save_data()
        except OSError as e:
            logger.warning("Could not read save file %s (%s), starting fresh", self.path, e)
            return create_default_save_data()

        save = deserialize_save_data(text)
        if save is None:
            logger.warning("Corrupt save data found in %s, starting fresh", self.path)
            return create_default_save_data()

        return save

    def persist(self, save: SaveData) -> bool:
        """Write save data. Returns False if the file could not be written."""
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(serialize_save_data(save), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning("Could not write save file %s: %s", self.path, e)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.debug("Could not remove %s: %s", tmp_path, cleanup_error)
            return False
        return True

    def clear(self) -> bool:
        """Delete the save file. Returns False if it could not be removed."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not clear save file %s: %s", self.path, e)
            return False
        return True
