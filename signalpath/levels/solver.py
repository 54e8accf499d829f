"""
Level Solver - Checks that a level can be won within its energy budget.

Breadth-first search over (position, colours of keys held). Walls and
active hazards are never entered; a locked door is entered only with a key
of its colour; stepping on a key picks it up. The first path that reaches
the goal is a shortest one.

This is developer tooling for level authors. The converter never calls it.
The path found is replayed through the real engine by `verify_level`, so a
level that passes is known to be winnable by actual play.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass

from ..engine_core.action import Action
from ..engine_core.history import History
from ..engine_core.state import Direction, GameStatus, KeyColor, Position
from ..engine_core.turn import replay
from .converter import create_game_state
from .schema import LevelData


@dataclass(frozen=True)
class SolveResult:
    """Shortest solution for a level, if one exists."""
    solvable: bool
    optimal_moves: int | None = None
    path: tuple[Action, ...] = ()
    states_explored: int = 0


@dataclass(frozen=True)
class LevelVerification:
    """Solver outcome checked against the energy budget and the engine."""
    level_id: str
    solvable: bool
    energy: int
    optimal_moves: int | None = None
    path: tuple[Action, ...] = ()
    replay_status: GameStatus | None = None

    @property
    def within_budget(self) -> bool:
        return self.optimal_moves is not None and self.optimal_moves <= self.energy

    @property
    def slack(self) -> int | None:
        """Spare energy on the optimal path."""
        if self.optimal_moves is None:
            return None
        return self.energy - self.optimal_moves

    @property
    def ok(self) -> bool:
        return self.solvable and self.within_budget and self.replay_status == GameStatus.WON


_SearchState = tuple[Position, frozenset[KeyColor]]


def solve_level(level: LevelData) -> SolveResult:
    """Find the shortest action sequence that wins the level, ignoring energy."""
    state = create_game_state(level)
    grid = state.grid
    start = state.player.position

    if start == state.goal:
        # The level only resolves after an action; waiting on the goal wins
        return SolveResult(solvable=True, optimal_moves=1, path=(Action.wait(),), states_explored=1)

    hazards = {h.position for h in state.hazards if h.active}
    keys = {k.position: k.color for k in state.keys}
    doors = {d.position: d.color for d in state.doors}

    initial: _SearchState = (start, frozenset())
    parents: dict[_SearchState, tuple[_SearchState, Direction] | None] = {initial: None}
    queue: deque[_SearchState] = deque([initial])

    while queue:
        current = queue.popleft()
        position, held = current

        for direction in Direction:
            target = position.offset(direction)
            if not grid.is_walkable(target) or target in hazards:
                continue
            if target in doors and doors[target] not in held:
                continue

            new_held = held | {keys[target]} if target in keys else held
            successor: _SearchState = (target, new_held)
            if successor in parents:
                continue
            parents[successor] = (current, direction)

            if target == state.goal:
                path = _rebuild_path(parents, successor)
                return SolveResult(
                    solvable=True,
                    optimal_moves=len(path),
                    path=path,
                    states_explored=len(parents),
                )
            queue.append(successor)

    return SolveResult(solvable=False, states_explored=len(parents))


def verify_level(level: LevelData) -> LevelVerification:
    """Solve a level and replay the solution through the engine."""
    solution = solve_level(level)
    if not solution.solvable:
        return LevelVerification(level_id=level.id, solvable=False, energy=level.energy)

    result = replay(create_game_state(level), solution.path, History(max_depth=None))
    return LevelVerification(
        level_id=level.id,
        solvable=True,
        energy=level.energy,
        optimal_moves=solution.optimal_moves,
        path=solution.path,
        replay_status=result.state.status,
    )


def _rebuild_path(
    parents: dict[_SearchState, tuple[_SearchState, Direction] | None],
    end: _SearchState,
) -> tuple[Action, ...]:
    moves: list[Action] = []
    node = end
    while parents[node] is not None:
        previous, direction = parents[node]
        moves.append(Action.move(direction))
        node = previous
    return tuple(reversed(moves))
