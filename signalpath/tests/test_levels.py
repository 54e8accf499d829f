"""
Tests for level schema, validation, conversion and the level repository.
"""

import json

import pytest

from ..engine_core.state import GameStatus, HazardType, KeyColor, Position, TileType
from ..levels.converter import create_game_state, create_grid
from ..levels.loader import (
    LevelNotFoundError,
    LevelRepository,
    LevelValidationError,
    load_level_file,
    parse_level_data,
    validate_level_data,
)
from ..levels.schema import LevelData


def write_level(directory, data, filename=None):
    path = directory / (filename or f"{data['id']}.json")
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLevelValidation:
    """Structural checks report the first problem in a fixed wording."""

    def test_valid_level(self, level_dict):
        result = validate_level_data(level_dict)
        assert result.valid
        assert result.reason is None

    def test_not_an_object(self):
        assert validate_level_data([1, 2]).reason == "Level data must be an object"

    @pytest.mark.parametrize("field", ["id", "name", "version", "width", "height", "energy"])
    def test_missing_field(self, level_dict, field):
        del level_dict[field]
        assert validate_level_data(level_dict).reason == f"Missing or invalid field: {field}"

    def test_energy_must_be_positive(self, level_dict):
        level_dict["energy"] = 0
        assert validate_level_data(level_dict).reason == "Missing or invalid field: energy"

    @pytest.mark.parametrize("size", [4, 21])
    def test_width_range(self, level_dict, size):
        level_dict["width"] = size
        assert validate_level_data(level_dict).reason == "Width must be between 5 and 20"

    def test_height_range(self, level_dict):
        level_dict["height"] = 3
        assert validate_level_data(level_dict).reason == "Height must be between 5 and 20"

    def test_player_start_out_of_bounds(self, level_dict):
        level_dict["playerStart"] = {"x": 5, "y": 0}
        assert validate_level_data(level_dict).reason == "Invalid or missing playerStart position"

    def test_missing_goal(self, level_dict):
        del level_dict["goal"]
        assert validate_level_data(level_dict).reason == "Invalid or missing goal position"

    def test_tiles_must_be_a_list(self, level_dict):
        level_dict["tiles"] = {"x": 0}
        assert validate_level_data(level_dict).reason == "tiles must be an array"

    def test_unknown_tile_type(self, level_dict):
        level_dict["tiles"].append({"x": 1, "y": 1, "type": "lava"})
        result = validate_level_data(level_dict)
        assert not result.valid
        assert result.reason.startswith("tiles.2.type")

    def test_interactable_requires_color(self, level_dict):
        del level_dict["interactables"][0]["color"]
        result = validate_level_data(level_dict)
        assert not result.valid
        assert "requires a color" in result.reason

    def test_parse_raises(self, level_dict):
        level_dict["width"] = 2
        with pytest.raises(LevelValidationError) as exc_info:
            parse_level_data(level_dict)
        assert exc_info.value.reason == "Width must be between 5 and 20"


class TestLevelSchema:

    def test_camel_case_fields(self, level_data):
        assert level_data.player_start.x == 0
        assert level_data.interactables[0].color == KeyColor.GREEN
        assert level_data.hazards[0].type == HazardType.SPIKE

    def test_snake_case_accepted(self, level_dict):
        level_dict["player_start"] = level_dict.pop("playerStart")
        assert LevelData.model_validate(level_dict).player_start.y == 0

    def test_json_dict_uses_on_disk_names(self, level_data):
        dumped = level_data.to_json_dict()
        assert "playerStart" in dumped
        assert dumped["interactables"][1]["color"] == "green"
        assert LevelData.model_validate(dumped) == level_data


class TestConverter:

    def test_initial_state(self, level_data):
        state = create_game_state(level_data)

        assert state.level_id == "test_level"
        assert state.status == GameStatus.PLAYING
        assert state.turn_count == 0
        assert state.energy == state.max_energy == 10
        assert state.player.position == Position(0, 0)
        assert state.player.inventory.keys == ()
        assert state.goal == Position(4, 0)
        assert all(h.active for h in state.hazards)
        assert state.get_interactable("key_green").is_uncollected_key
        assert state.get_interactable("door_green").is_locked_door

    def test_tiles_override_cells(self, level_data):
        grid = create_grid(level_data)
        assert grid.tile_at(Position(2, 1)).type == TileType.WALL
        assert grid.tile_at(Position(4, 0)).type == TileType.GOAL
        assert grid.tile_at(Position(1, 1)).type == TileType.EMPTY

    def test_out_of_range_tiles_dropped(self, level_dict):
        level_dict["tiles"].append({"x": 9, "y": 9, "type": "wall"})
        level_dict["tiles"].append({"x": -1, "y": 0, "type": "wall"})
        grid = create_grid(LevelData.model_validate(level_dict))

        assert grid.width == 5 and grid.height == 5
        assert sum(1 for tile in grid if tile.type == TileType.WALL) == 1

    def test_restart_builds_equal_state(self, level_data):
        assert create_game_state(level_data) == create_game_state(level_data)


class TestLoadLevelFile:

    def test_load_valid_file(self, tmp_path, level_dict):
        result = load_level_file(write_level(tmp_path, level_dict))
        assert result.success
        assert result.level.id == "test_level"

    def test_missing_file(self, tmp_path):
        result = load_level_file(tmp_path / "nope.json")
        assert not result.success
        assert "not found" in result.error

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = load_level_file(path)
        assert not result.success
        assert "broken.json" in result.error

    def test_invalid_level(self, tmp_path, level_dict):
        level_dict["width"] = 30
        result = load_level_file(write_level(tmp_path, level_dict))
        assert not result.success
        assert "Width must be between 5 and 20" in result.error


class TestLevelRepository:

    def test_directory_without_manifest(self, tmp_path, level_dict):
        second = dict(level_dict, id="b_level")
        write_level(tmp_path, second)
        write_level(tmp_path, dict(level_dict, id="a_level"))

        repo = LevelRepository(tmp_path)

        assert repo.level_ids() == ["a_level", "b_level"]
        assert repo.next_level_id("a_level") == "b_level"
        assert repo.next_level_id("b_level") is None
        assert repo.previous_level_id("a_level") is None

    def test_manifest_order(self, tmp_path, level_dict):
        write_level(tmp_path, dict(level_dict, id="one"), "1.json")
        write_level(tmp_path, dict(level_dict, id="two"), "2.json")
        (tmp_path / "manifest.json").write_text(json.dumps({"levels": [
            {"id": "two", "name": "Two", "filename": "2.json"},
            {"id": "one", "name": "One", "filename": "1.json", "description": "First"},
        ]}), encoding="utf-8")

        repo = LevelRepository(tmp_path)

        assert repo.level_ids() == ["two", "one"]
        assert repo.get_level_info("one").description == "First"
        assert repo.index_of("one") == 1
        assert repo.get_level("two").id == "two"

    def test_bad_level_does_not_break_others(self, tmp_path, level_dict):
        write_level(tmp_path, dict(level_dict, id="good"))
        write_level(tmp_path, dict(level_dict, id="bad", energy=-1))

        levels, errors = LevelRepository(tmp_path).load_all()

        assert [level.id for level in levels] == ["good"]
        assert len(errors) == 1
        assert "bad.json" in errors[0]

    def test_unknown_level(self, tmp_path):
        repo = LevelRepository(tmp_path)
        assert not repo.load_level("missing").success
        assert not repo.level_exists("missing")
        with pytest.raises(LevelNotFoundError):
            repo.get_level("missing")
        with pytest.raises(LevelNotFoundError):
            repo.index_of("missing")


class TestBundledLevels:
    """Every shipped level must load."""

    def test_all_bundled_levels_load(self, bundled_repository):
        levels, errors = bundled_repository.load_all()
        assert errors == []
        assert len(levels) == bundled_repository.count == 5

    def test_manifest_matches_level_ids(self, bundled_repository):
        for info in bundled_repository.list_levels():
            assert bundled_repository.get_level(info.id).id == info.id

    def test_first_level_order(self, bundled_repository):
        assert bundled_repository.level_ids()[0] == "01_first_steps"
        assert bundled_repository.next_level_id("01_first_steps") == "02_hazards"
