"""
Game Loop - Drives one session turn by turn.

The loop:
1. Player submits an action
2. Engine validates, applies and resolves it
3. Session state and undo history are replaced
4. If the level was just won, the progress ledger is updated and saved
5. Repeat until the level is won or lost (or restarted)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import Action, RejectReason
from ..engine_core.rules import status_message
from ..engine_core.state import GameState, GameStatus
from ..engine_core.turn import process_turn
from ..progress.ledger import get_progress, record_completion
from ..progress.save_data import LevelProgress

if TYPE_CHECKING:
    from .manager import Session
    from ..progress.storage import SaveStore


logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_ACTION = "waiting_action"
    LEVEL_WON = "level_won"
    LEVEL_LOST = "level_lost"


@dataclass
class TurnOutcome:
    """
    Result of submitting one action to a session.

    Contains the resulting state and, on the winning turn, the updated
    progress for the level.
    """
    accepted: bool
    loop_state: LoopState
    game_state: GameState
    message: str
    reason: RejectReason | None = None

    # Set only on the turn that wins the level
    level_completed: bool = False
    progress: LevelProgress | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session, save_store)

        outcome = loop.submit(Action.move("right"))
        if not outcome.accepted:
            show_hint(outcome.reason)
        elif outcome.level_completed:
            show_results(outcome.progress)
    """

    def __init__(self, session: Session, save_store: SaveStore | None = None):
        self.session = session
        self.save_store = save_store

    @property
    def state(self) -> LoopState:
        return _loop_state(self.session.game_state)

    def submit(self, action: Action) -> TurnOutcome:
        """Process one action against the session's current state."""
        before = self.session.game_state
        result = process_turn(before, action, self.session.history)

        if not result.accepted:
            logger.debug(
                "Session %s rejected %s: %s",
                self.session.session_id, action, result.reason.value,
            )
            return self._outcome(accepted=False, reason=result.reason)

        self.session.game_state = result.state
        self.session.history = result.history

        if before.status == GameStatus.PLAYING and result.state.status == GameStatus.WON:
            progress = self._record_win(result.state)
            return self._outcome(accepted=True, level_completed=True, progress=progress)

        if result.state.status == GameStatus.LOST:
            logger.info(
                "Session %s lost level %s (%s)",
                self.session.session_id, self.session.level_id, result.state.lose_reason.value,
            )

        return self._outcome(accepted=True)

    def restart(self) -> TurnOutcome:
        """Start the level over. Costs nothing and clears the undo history."""
        self.session.restart()
        logger.debug("Session %s restarted level %s", self.session.session_id, self.session.level_id)
        return self._outcome(accepted=True)

    def _record_win(self, state: GameState) -> LevelProgress:
        logger.info(
            "Session %s completed level %s in %d turns with %d energy left",
            self.session.session_id, state.level_id, state.turn_count, state.energy,
        )
        if self.save_store is None:
            return LevelProgress(completed=True, best_turns=state.turn_count, best_energy=state.energy)

        save = record_completion(
            self.save_store.load(), state.level_id, state.turn_count, state.energy,
        )
        self.save_store.persist(save)
        return get_progress(save, state.level_id)

    def _outcome(self, accepted: bool, **kwargs) -> TurnOutcome:
        game_state = self.session.game_state
        return TurnOutcome(
            accepted=accepted,
            loop_state=_loop_state(game_state),
            game_state=game_state,
            message=status_message(game_state),
            **kwargs,
        )


def _loop_state(state: GameState) -> LoopState:
    if state.status == GameStatus.WON:
        return LoopState.LEVEL_WON
    if state.status == GameStatus.LOST:
        return LoopState.LEVEL_LOST
    return LoopState.WAITING_ACTION
