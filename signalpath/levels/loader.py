"""
Level Loader - Reads and validates level files.

This is the load-time boundary for level data:
- Structural validation of raw JSON (required fields, ranges, positions)
- Reading single level files and whole level directories
- The level manifest (ordering, names, next/previous level)

A malformed level produces a failed LevelLoadResult for that level only;
the other levels stay usable. Nothing here raises for bad content except
the explicit `parse_level_data`.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import LevelData, LevelInfo, LevelManifest, MAX_GRID_SIZE, MIN_GRID_SIZE


logger = logging.getLogger(__name__)

BUNDLED_LEVELS_DIR = Path(__file__).parent / "content"
MANIFEST_FILENAME = "manifest.json"


class LevelValidationError(Exception):
    """Raised when level data fails structural validation."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid level data: {reason}")


class LevelNotFoundError(LookupError):
    """Raised when a level id is not in the manifest."""

    def __init__(self, level_id: str):
        self.level_id = level_id
        super().__init__(f"Level not found: {level_id}")


@dataclass(frozen=True)
class LevelValidationResult:
    """Result of a structural check. If valid is False, reason says why."""
    valid: bool
    reason: str | None = None


@dataclass(frozen=True)
class LevelLoadResult:
    """Either the loaded level or an error message."""
    success: bool
    level: LevelData | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> LevelLoadResult:
        return cls(success=False, error=error)


def validate_level_data(data: Any) -> LevelValidationResult:
    """
    Validate the structure of raw level data.

    Reports the first problem found. Tile entries outside the grid are
    accepted here; the converter drops them.
    """
    if not isinstance(data, dict):
        return LevelValidationResult(False, "Level data must be an object")

    for name in ("id", "name", "version"):
        if not isinstance(data.get(name), str):
            return LevelValidationResult(False, f"Missing or invalid field: {name}")

    for name in ("width", "height", "energy"):
        value = data.get(name)
        if not _is_number(value) or value <= 0:
            return LevelValidationResult(False, f"Missing or invalid field: {name}")

    width, height = data["width"], data["height"]
    if not MIN_GRID_SIZE <= width <= MAX_GRID_SIZE:
        return LevelValidationResult(False, f"Width must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}")
    if not MIN_GRID_SIZE <= height <= MAX_GRID_SIZE:
        return LevelValidationResult(False, f"Height must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}")

    for name in ("playerStart", "goal"):
        if not _is_position_in_bounds(data.get(name), width, height):
            return LevelValidationResult(False, f"Invalid or missing {name} position")

    for name in ("tiles", "hazards", "interactables"):
        if name in data and not isinstance(data[name], list):
            return LevelValidationResult(False, f"{name} must be an array")

    try:
        LevelData.model_validate(data)
    except ValidationError as e:
        return LevelValidationResult(False, _first_error(e))

    return LevelValidationResult(True)


def parse_level_data(data: Any) -> LevelData:
    """Validate raw data and build a LevelData. Raises LevelValidationError."""
    result = validate_level_data(data)
    if not result.valid:
        raise LevelValidationError(result.reason)
    return LevelData.model_validate(data)


def load_level_file(path: str | Path) -> LevelLoadResult:
    """Load and validate a single level file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return LevelLoadResult.failure(f"Failed to load level file: {path.name} (not found)")
    except (OSError, json.JSONDecodeError) as e:
        return LevelLoadResult.failure(f"Error loading level {path.name}: {e}")

    validation = validate_level_data(data)
    if not validation.valid:
        logger.warning("Rejected level file %s: %s", path, validation.reason)
        return LevelLoadResult.failure(f"Invalid level data in {path.name}: {validation.reason}")

    return LevelLoadResult(success=True, level=LevelData.model_validate(data))


class LevelRepository:
    """
    Level files in a directory, ordered by a manifest.

    Usage:
        repo = LevelRepository()          # bundled levels
        for info in repo.list_levels():
            result = repo.load_level(info.id)

    The manifest is `manifest.json` in the directory. Without one, every
    `*.json` file is a level, ordered by filename, and named by its id.
    """

    def __init__(self, levels_dir: str | Path | None = None):
        self.levels_dir = Path(levels_dir) if levels_dir is not None else BUNDLED_LEVELS_DIR
        self.manifest = self._load_manifest()

    def _load_manifest(self) -> LevelManifest:
        manifest_path = self.levels_dir / MANIFEST_FILENAME
        if manifest_path.exists():
            with open(manifest_path, "r", encoding="utf-8") as f:
                return LevelManifest.model_validate(json.load(f))

        logger.debug("No manifest in %s, scanning for level files", self.levels_dir)
        levels = [
            LevelInfo(id=path.stem, name=path.stem, filename=path.name)
            for path in sorted(self.levels_dir.glob("*.json"))
        ]
        return LevelManifest(levels=tuple(levels))

    def list_levels(self) -> list[LevelInfo]:
        return list(self.manifest.levels)

    def level_ids(self) -> list[str]:
        """Level ids in play order."""
        return [info.id for info in self.manifest.levels]

    @property
    def count(self) -> int:
        return len(self.manifest.levels)

    def level_exists(self, level_id: str) -> bool:
        return self.get_level_info(level_id) is not None

    def get_level_info(self, level_id: str) -> LevelInfo | None:
        for info in self.manifest.levels:
            if info.id == level_id:
                return info
        return None

    def index_of(self, level_id: str) -> int:
        """Position of a level in play order. Raises LevelNotFoundError."""
        ids = self.level_ids()
        if level_id not in ids:
            raise LevelNotFoundError(level_id)
        return ids.index(level_id)

    def load_level(self, level_id: str) -> LevelLoadResult:
        info = self.get_level_info(level_id)
        if info is None:
            return LevelLoadResult.failure(f"Level not found: {level_id}")
        return load_level_file(self.levels_dir / info.filename)

    def get_level(self, level_id: str) -> LevelData:
        """Load a level or raise. Raises LevelNotFoundError or LevelValidationError."""
        if not self.level_exists(level_id):
            raise LevelNotFoundError(level_id)
        result = self.load_level(level_id)
        if not result.success:
            raise LevelValidationError(result.error)
        return result.level

    def load_all(self) -> tuple[list[LevelData], list[str]]:
        """Load every level in manifest order. Returns (levels, errors)."""
        levels: list[LevelData] = []
        errors: list[str] = []
        for info in self.manifest.levels:
            result = self.load_level(info.id)
            if result.success:
                levels.append(result.level)
            else:
                errors.append(result.error)
        return levels, errors

    def next_level_id(self, level_id: str) -> str | None:
        ids = self.level_ids()
        if level_id not in ids:
            return None
        index = ids.index(level_id)
        return ids[index + 1] if index + 1 < len(ids) else None

    def previous_level_id(self, level_id: str) -> str | None:
        ids = self.level_ids()
        if level_id not in ids:
            return None
        index = ids.index(level_id)
        return ids[index - 1] if index > 0 else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_position_in_bounds(pos: Any, width: int, height: int) -> bool:
    if not isinstance(pos, dict):
        return False
    x, y = pos.get("x"), pos.get("y")
    if not _is_number(x) or not _is_number(y):
        return False
    return 0 <= x < width and 0 <= y < height


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}" if location else message
