"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main, render_state
from ..engine_core.state import Position
from ..levels.converter import create_game_state


@pytest.fixture
def save_path(tmp_path):
    return str(tmp_path / "save.json")


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out


class TestCommands:

    def test_levels(self, capsys, save_path):
        out = run(capsys, "--save-path", save_path, "levels")
        assert "01_first_steps" in out
        assert "0/5 completed" in out

    def test_validate_ok(self, capsys, tmp_path, level_dict):
        path = tmp_path / "level.json"
        path.write_text(json.dumps(level_dict), encoding="utf-8")
        out = run(capsys, "validate", str(path))
        assert "OK: test_level" in out

    def test_validate_failure_exits(self, capsys, tmp_path, level_dict):
        level_dict["height"] = 1
        path = tmp_path / "level.json"
        path.write_text(json.dumps(level_dict), encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", str(path)])
        assert exc_info.value.code == 1
        assert "Height must be between 5 and 20" in capsys.readouterr().out

    def test_solve_level_id(self, capsys):
        out = run(capsys, "solve", "04_the_corridor")
        assert "OK   04_the_corridor: 6 moves" in out
        assert "move:right" in out

    def test_solve_all(self, capsys):
        out = run(capsys, "solve")
        assert out.count("OK ") == 5

    def test_replay(self, capsys):
        out = run(capsys, "replay", "01_first_steps", "up", "right", "wait")
        assert "#1 move:up: rejected (out of bounds)" in out
        assert "2 applied, 1 rejected" in out
        assert "Game in progress" in out

    def test_replay_bad_action(self, capsys):
        with pytest.raises(SystemExit):
            main(["replay", "01_first_steps", "fly"])
        assert "Unknown action" in capsys.readouterr().out

    def test_progress_and_reset(self, capsys, save_path):
        assert "No levels completed yet" in run(capsys, "--save-path", save_path, "progress")
        assert "Progress reset" in run(capsys, "--save-path", save_path, "progress", "--reset")

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit):
            main([])


class TestRenderState:

    def test_render_keys_doors_and_player(self, bundled_repository):
        state = create_game_state(bundled_repository.get_level("03_keys"))
        lines = render_state(state).splitlines()

        assert lines[0] == "P . . . r"
        assert lines[2] == "# # R # #"
        assert lines[4] == ". . . . G"

    def test_player_drawn_over_goal(self, bundled_repository):
        state = create_game_state(bundled_repository.get_level("01_first_steps"))
        state = state._copy_with(player=state.player.moved_to(Position(4, 4)))
        assert render_state(state).splitlines()[4].endswith("P")

    def test_off_board_items_are_skipped(self, state_factory):
        state = state_factory(
            width=3, height=3,
            hazards=[(9, 9), (-1, 0)],
            keys=[(0, -1, "red")],
            doors=[(3, 1, "blue")],
        )

        assert render_state(state).splitlines() == [
            "P . .",
            ". . .",
            ". . G",
        ]

    def test_replay_level_with_off_board_hazard(self, capsys, tmp_path, level_dict):
        level_dict["hazards"].append({"id": "stray", "x": 9, "y": 9, "type": "spike"})
        path = tmp_path / "level.json"
        path.write_text(json.dumps(level_dict), encoding="utf-8")

        out = run(capsys, "replay", str(path), "right")

        assert "1 applied, 0 rejected" in out
        assert ". P . . G" in out
