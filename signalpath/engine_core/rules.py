"""
Rules - Win/lose evaluation and turn resolution.

resolve_turn() runs after every applied move or wait, in two fixed phases:

1. Hazards: standing on an active hazard loses the level.
2. Status: standing on the goal wins; otherwise running out of energy loses.

Hazards are resolved strictly before the win check, so a hazard placed on
the goal tile is a loss. Reaching the goal with the last point of energy is
a win.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import GameState, GameStatus, LoseReason


@dataclass(frozen=True)
class LoseCheck:
    """Result of evaluating the lose conditions."""
    lost: bool
    reason: LoseReason | None = None


def is_player_on_hazard(state: GameState) -> bool:
    """Multiple hazards on one tile count as one."""
    return any(
        hazard.active and hazard.position == state.player.position
        for hazard in state.hazards
    )


def is_player_on_goal(state: GameState) -> bool:
    return state.player.position == state.goal


def is_energy_depleted(state: GameState) -> bool:
    return state.energy <= 0


def check_win_condition(state: GameState) -> bool:
    """A state that is no longer playing cannot win."""
    if state.status != GameStatus.PLAYING:
        return False
    return is_player_on_goal(state)


def check_lose_condition(state: GameState) -> LoseCheck:
    if state.status != GameStatus.PLAYING:
        return LoseCheck(lost=False)

    if is_player_on_hazard(state):
        return LoseCheck(lost=True, reason=LoseReason.HAZARD)

    if is_energy_depleted(state) and not is_player_on_goal(state):
        return LoseCheck(lost=True, reason=LoseReason.ENERGY_DEPLETED)

    return LoseCheck(lost=False)


def resolve_hazards(state: GameState) -> GameState:
    """Phase 1: hazard contact ends the level."""
    if state.status != GameStatus.PLAYING:
        return state

    if is_player_on_hazard(state):
        return state._copy_with(status=GameStatus.LOST, lose_reason=LoseReason.HAZARD)

    return state


def update_game_status(state: GameState) -> GameState:
    """Phase 2: win on goal, else lose on depleted energy."""
    if state.status != GameStatus.PLAYING:
        return state

    if check_win_condition(state):
        return state._copy_with(status=GameStatus.WON)

    lose = check_lose_condition(state)
    if lose.lost:
        return state._copy_with(status=GameStatus.LOST, lose_reason=lose.reason)

    return state


def resolve_turn(state: GameState) -> GameState:
    """Resolve hazards, then update win/lose status."""
    return update_game_status(resolve_hazards(state))


def is_game_over(state: GameState) -> bool:
    return state.status in (GameStatus.WON, GameStatus.LOST)


def is_game_playing(state: GameState) -> bool:
    return state.status == GameStatus.PLAYING


_LOSE_MESSAGES = {
    LoseReason.HAZARD: "Mission failed: you hit a hazard",
    LoseReason.ENERGY_DEPLETED: "Mission failed: out of energy",
}


def status_message(state: GameState) -> str:
    """Human-readable status line."""
    if state.status == GameStatus.PLAYING:
        return "Game in progress"
    if state.status == GameStatus.WON:
        return "Level complete!"
    return _LOSE_MESSAGES.get(state.lose_reason, "Mission failed")
