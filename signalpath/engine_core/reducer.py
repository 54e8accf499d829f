"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition for gameplay.

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- An invalid action returns the input state object itself, so callers can
  detect a no-op with `new_state is state`
- Win/lose resolution is a separate step (see rules.resolve_turn)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from .action import Action, ActionType
from .history import History
from .state import Direction, GameState, KeyItem, Player
from .validator import validate_action


Handler = Callable[[GameState, Action, History | None], GameState]


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState and the History beside it.
    """

    def apply(
        self,
        state: GameState,
        action: Action,
        history: History | None = None,
    ) -> GameState:
        """
        Apply an action to the game state.

        Returns the new state, or `state` unchanged if the action is invalid.
        """
        if not validate_action(state, action, history):
            return state

        handler = self._get_handler(action.action_type)
        return handler(state, action, history)

    def _get_handler(self, action_type: ActionType) -> Handler:
        """Get the handler function for an action type."""
        handlers: dict[ActionType, Handler] = {
            ActionType.MOVE: self._handle_move,
            ActionType.WAIT: self._handle_wait,
            ActionType.UNDO: self._handle_undo,
            ActionType.RESTART: self._handle_restart,
        }
        return handlers[action_type]

    def _handle_move(self, state: GameState, action: Action, history: History | None) -> GameState:
        """
        Handle move action.

        Picks up an uncollected key on the target tile, then unlocks a locked
        door there if a key of its colour is held. Keys are never consumed.
        """
        direction: Direction = action.direction
        target = state.player.position.offset(direction)

        new_state = state
        inventory = state.player.inventory

        key = state.uncollected_key_at(target)
        if key is not None:
            new_state = new_state.with_interactable(key, key.collect())
            inventory = inventory.add_key(KeyItem(id=key.id, color=key.color))

        door = new_state.locked_door_at(target)
        if door is not None and inventory.has_key(door.color):
            new_state = new_state.with_interactable(door, door.unlock())

        new_player = Player(position=target, inventory=inventory)

        return new_state._copy_with(
            player=new_player,
            energy=state.energy - 1,
            turn_count=state.turn_count + 1,
        )

    def _handle_wait(self, state: GameState, action: Action, history: History | None) -> GameState:
        """Handle wait action (spend a turn in place)."""
        return state._copy_with(
            energy=state.energy - 1,
            turn_count=state.turn_count + 1,
        )

    def _handle_undo(self, state: GameState, action: Action, history: History | None) -> GameState:
        """Return the most recent snapshot verbatim."""
        entry = history.peek() if history is not None else None
        if entry is None:
            return state
        return entry.state

    def _handle_restart(self, state: GameState, action: Action, history: History | None) -> GameState:
        # Unreachable: the validator rejects restart
        return state


def apply_action(
    state: GameState,
    action: Action,
    history: History | None = None,
) -> GameState:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    return Reducer().apply(state, action, history)
