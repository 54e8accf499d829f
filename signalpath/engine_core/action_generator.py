"""
Action Generator - Enumerates the legal actions for a game state.

Used by:
1. The UI / API to show which controls are live
2. The CLI and solver to explore moves
3. Tests, to cross-check the validator

Actions are generated in a fixed order: move up, down, left, right, then
wait, then undo.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action, ActionType
from .history import History
from .state import Direction, GameState
from .validator import validate_action


@dataclass
class ActionGenerator:
    """Generates legal actions for the current game state."""

    def generate(self, state: GameState, history: History | None = None) -> list[Action]:
        """
        Generate all legal actions.

        Restart is never included; it is not an engine action.
        """
        candidates = [Action.move(direction) for direction in Direction]
        candidates.append(Action.wait())
        candidates.append(Action.undo())
        return [
            action for action in candidates
            if validate_action(state, action, history).valid
        ]


def get_valid_actions(state: GameState, history: History | None = None) -> list[Action]:
    """Convenience function to list legal actions."""
    return ActionGenerator().generate(state, history)


def get_valid_move_count(state: GameState, history: History | None = None) -> int:
    return sum(
        1 for action in get_valid_actions(state, history)
        if action.action_type == ActionType.MOVE
    )
