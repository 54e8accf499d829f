"""
Turn - One validate -> apply -> resolve cycle, plus replay.

process_turn() is the entry point sessions use. It keeps the state and the
undo history in step:

- rejected action: the same state and history objects come back
- undo: the newest snapshot is restored and popped; nothing is resolved,
  the snapshot was already a resolved playing state
- move / wait: the pre-action state is pushed, the action applied, the
  result resolved
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .action import Action, ActionType, RejectReason
from .history import History
from .reducer import apply_action
from .rules import resolve_turn
from .state import GameState
from .validator import validate_action


@dataclass(frozen=True)
class TurnResult:
    """Outcome of submitting one action."""
    state: GameState
    history: History
    accepted: bool
    reason: RejectReason | None = None

    @property
    def status(self):
        return self.state.status


def process_turn(
    state: GameState,
    action: Action,
    history: History | None = None,
) -> TurnResult:
    """Validate, apply and resolve a single action."""
    if history is None:
        history = History()

    validation = validate_action(state, action, history)
    if not validation.valid:
        return TurnResult(state=state, history=history, accepted=False, reason=validation.reason)

    if action.action_type == ActionType.UNDO:
        restored = apply_action(state, action, history)
        _, new_history = history.pop()
        return TurnResult(state=restored, history=new_history, accepted=True)

    applied = apply_action(state, action, history)
    return TurnResult(
        state=resolve_turn(applied),
        history=history.push(state, action),
        accepted=True,
    )


@dataclass(frozen=True)
class ReplayResult:
    """Final state of a replay and which actions were rejected on the way."""
    state: GameState
    history: History
    applied: int
    rejected: tuple[tuple[int, Action, RejectReason], ...] = ()


def replay(
    state: GameState,
    actions: Iterable[Action],
    history: History | None = None,
) -> ReplayResult:
    """
    Apply a sequence of actions in order.

    Rejected actions are skipped exactly as they would be in play, so the
    same start state and actions always produce the same result.
    """
    if history is None:
        history = History()

    applied = 0
    rejected: list[tuple[int, Action, RejectReason]] = []
    for index, action in enumerate(actions):
        result = process_turn(state, action, history)
        if not result.accepted:
            rejected.append((index, action, result.reason))
            continue
        state, history = result.state, result.history
        applied += 1

    return ReplayResult(state=state, history=history, applied=applied, rejected=tuple(rejected))
