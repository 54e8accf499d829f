"""
Tests for the level solver and pack verification.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.state import GameStatus
from ..engine_core.turn import replay
from ..levels.converter import create_game_state
from ..levels.schema import LevelData
from ..levels.solver import solve_level, verify_level


def open_level(**overrides) -> LevelData:
    data = {
        "id": "solver_level",
        "name": "Solver Level",
        "version": "1.0",
        "width": 5,
        "height": 5,
        "playerStart": {"x": 0, "y": 0},
        "goal": {"x": 4, "y": 0},
        "energy": 10,
    }
    data.update(overrides)
    return LevelData.model_validate(data)


class TestSolveLevel:

    def test_straight_line(self):
        result = solve_level(open_level())
        assert result.solvable
        assert result.optimal_moves == 4
        assert result.path == (Action.move("right"),) * 4

    def test_routes_around_hazards(self):
        level = open_level(hazards=[
            {"id": "h1", "x": 2, "y": 0, "type": "fire"},
        ])
        result = solve_level(level)
        assert result.optimal_moves == 6

    def test_needs_key_for_door(self):
        """Door on the only path, key behind the start."""
        level = open_level(
            tiles=[{"x": 2, "y": y, "type": "wall"} for y in range(1, 5)],
            playerStart={"x": 1, "y": 0},
            interactables=[
                {"id": "k", "x": 0, "y": 4, "type": "key", "color": "yellow"},
                {"id": "d", "x": 2, "y": 0, "type": "door", "color": "yellow"},
            ],
        )
        result = solve_level(level)

        assert result.solvable
        # 1 left + 4 down to the key, back 4 up + 1 right, then 3 right to the goal
        assert result.optimal_moves == 13

    def test_unsolvable(self):
        level = open_level(tiles=[{"x": 3, "y": y, "type": "wall"} for y in range(5)])
        result = solve_level(level)
        assert not result.solvable
        assert result.path == ()

    def test_hazard_on_goal_is_unsolvable(self):
        level = open_level(hazards=[{"id": "h", "x": 4, "y": 0, "type": "spike"}])
        assert not solve_level(level).solvable

    def test_start_on_goal(self):
        result = solve_level(open_level(goal={"x": 0, "y": 0}))
        assert result.path == (Action.wait(),)
        assert replay(create_game_state(open_level(goal={"x": 0, "y": 0})), result.path).state.status == GameStatus.WON

    def test_solution_wins_when_replayed(self):
        level = open_level(hazards=[{"id": "h", "x": 1, "y": 0, "type": "laser"}])
        result = solve_level(level)
        final = replay(create_game_state(level), result.path).state
        assert final.status == GameStatus.WON
        assert final.turn_count == result.optimal_moves


class TestVerifyLevel:

    def test_over_budget(self):
        verification = verify_level(open_level(energy=3))
        assert verification.solvable
        assert not verification.within_budget
        assert verification.slack == -1
        assert not verification.ok

    def test_exact_budget(self):
        verification = verify_level(open_level(energy=4))
        assert verification.ok
        assert verification.slack == 0

    def test_unsolvable(self):
        level = open_level(tiles=[{"x": 3, "y": y, "type": "wall"} for y in range(5)])
        verification = verify_level(level)
        assert not verification.ok
        assert verification.slack is None


class TestBundledPack:
    """Every shipped level can be won within its energy."""

    @pytest.mark.parametrize("level_id,optimal", [
        ("01_first_steps", 8),
        ("02_hazards", 8),
        ("03_keys", 12),
        ("04_the_corridor", 6),
        ("05_locked_in", 12),
    ])
    def test_bundled_level_verifies(self, bundled_repository, level_id, optimal):
        verification = verify_level(bundled_repository.get_level(level_id))
        assert verification.ok
        assert verification.optimal_moves == optimal
