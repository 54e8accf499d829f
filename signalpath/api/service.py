"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Checks level unlocks against the progress ledger
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    # Responses
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    LevelListResponse,
    LevelSummary,
    ProgressResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    # Shared
    HazardInfo,
    InteractableInfo,
    KeyInfo,
    LevelProgressInfo,
    PositionInfo,
    # Enums
    ActionName,
    ErrorCode,
    SessionStatus,
)
from ..engine_core.action import Action
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.history import History
from ..engine_core.rules import status_message
from ..engine_core.state import DoorState, GameState, GameStatus, KeyState, Position, TileType
from ..levels.loader import LevelRepository
from ..progress.ledger import get_completed_count, get_progress, is_unlocked
from ..progress.storage import SaveStore
from ..session import GameLoop, Session, SessionManager
from ..session.manager import USE_MANAGER_LIMIT


logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService(save_store=SaveStore(path))

        levels = service.list_levels()
        session = service.create_session(CreateSessionRequest(level_id="01_first_steps"))
        turn = service.submit_action(session.session_id, ActionRequest(action="move", direction="right"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    level_repository: LevelRepository = field(default_factory=LevelRepository)
    save_store: SaveStore = field(default_factory=SaveStore)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    # =========================================================================
    # Levels and progress
    # =========================================================================

    def list_levels(self) -> LevelListResponse:
        """Levels in play order with unlock state and personal bests."""
        save = self.save_store.load()
        level_ids = self.level_repository.level_ids()
        summaries = [
            LevelSummary(
                level_id=info.id,
                name=info.name,
                description=info.description,
                index=index,
                unlocked=is_unlocked(save, index, level_ids),
                progress=LevelProgressInfo.model_validate(get_progress(save, info.id)),
            )
            for index, info in enumerate(self.level_repository.list_levels())
        ]
        return LevelListResponse(
            levels=summaries,
            count=len(summaries),
            completed_count=get_completed_count(save),
        )

    def get_progress(self) -> ProgressResponse:
        save = self.save_store.load()
        return ProgressResponse(
            version=save.version,
            timestamp=save.timestamp,
            completed_count=get_completed_count(save),
            levels={
                level_id: LevelProgressInfo.model_validate(progress)
                for level_id, progress in save.level_progress.items()
            },
            sound_enabled=save.settings.sound_enabled,
        )

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Start a session on a level, if it exists and is unlocked."""
        level_ids = self.level_repository.level_ids()
        if request.level_id not in level_ids:
            return ErrorResponse(
                error=f"Level not found: {request.level_id}",
                error_code=ErrorCode.LEVEL_NOT_FOUND,
            )

        index = level_ids.index(request.level_id)
        if not request.ignore_locks and not is_unlocked(self.save_store.load(), index, level_ids):
            return ErrorResponse(
                error=f"Level {request.level_id} is locked",
                error_code=ErrorCode.LEVEL_LOCKED,
                details={"requires": level_ids[index - 1]},
            )

        result = self.level_repository.load_level(request.level_id)
        if not result.success:
            logger.warning("Cannot start level %s: %s", request.level_id, result.error)
            return ErrorResponse(error=result.error, error_code=ErrorCode.INVALID_LEVEL)

        limit = USE_MANAGER_LIMIT if request.history_limit is None else request.history_limit
        session = self.session_manager.create_session(
            result.level,
            level_index=index,
            history_limit=limit,
        )
        self._game_loops[session.session_id] = GameLoop(session, self.save_store)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id)

    def end_session_response(self, session_id: str) -> EndSessionResponse:
        return EndSessionResponse(success=self.end_session(session_id), session_id=session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def list_sessions_response(self) -> SessionListResponse:
        sessions = self.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._state_to_response(session.game_state, session.history)

    # =========================================================================
    # Turns
    # =========================================================================

    def submit_action(self, session_id: str, request: ActionRequest) -> TurnResponse | ErrorResponse:
        """Apply one action. Rejected actions come back with accepted=False."""
        loop = self._game_loops.get(session_id)
        if loop is None:
            return self._session_not_found(session_id)

        outcome = loop.submit(self._to_action(request))
        next_level_id = None
        if outcome.level_completed:
            next_level_id = self.level_repository.next_level_id(loop.session.level_id)

        return TurnResponse(
            session_id=session_id,
            accepted=outcome.accepted,
            reason=outcome.reason.value if outcome.reason else None,
            level_completed=outcome.level_completed,
            progress=(
                LevelProgressInfo.model_validate(outcome.progress)
                if outcome.progress is not None else None
            ),
            next_level_id=next_level_id,
            game_state=self._state_to_response(loop.session.game_state, loop.session.history),
        )

    def restart(self, session_id: str) -> TurnResponse | ErrorResponse:
        """Rebuild the session's level from its definition."""
        loop = self._game_loops.get(session_id)
        if loop is None:
            return self._session_not_found(session_id)

        loop.restart()
        return TurnResponse(
            session_id=session_id,
            accepted=True,
            game_state=self._state_to_response(loop.session.game_state, loop.session.history),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    @staticmethod
    def _to_action(request: ActionRequest) -> Action:
        if request.action == ActionName.MOVE:
            return Action.move(request.direction)
        if request.action == ActionName.WAIT:
            return Action.wait()
        return Action.undo()

    @staticmethod
    def _session_not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=_session_status(session.game_state),
            level_id=session.level.id,
            level_name=session.level.name,
            level_index=session.level_index,
            created_at=session.created_at,
            history_depth=session.history.depth,
            restarts=session.restarts,
        )

    def _state_to_response(self, state: GameState, history: History) -> GameStateResponse:
        return GameStateResponse(
            level_id=state.level_id,
            status=_session_status(state),
            message=status_message(state),
            turn_count=state.turn_count,
            energy=state.energy,
            max_energy=state.max_energy,
            width=state.grid.width,
            height=state.grid.height,
            player=_position(state.player.position),
            goal=_position(state.goal),
            inventory=[
                KeyInfo(id=key.id, color=key.color.value)
                for key in state.player.inventory.keys
            ],
            walls=[
                _position(tile.position)
                for tile in state.grid if tile.type == TileType.WALL
            ],
            hazards=[
                HazardInfo(
                    id=h.id,
                    type=h.type.value,
                    position=_position(h.position),
                    active=h.active,
                )
                for h in state.hazards
            ],
            interactables=[
                InteractableInfo(
                    id=i.id,
                    type=i.type.value,
                    color=i.color.value,
                    position=_position(i.position),
                    collected=i.state.collected if isinstance(i.state, KeyState) else None,
                    locked=i.state.locked if isinstance(i.state, DoorState) else None,
                )
                for i in state.interactables
            ],
            lose_reason=state.lose_reason.value if state.lose_reason else None,
            can_undo=state.is_playing and not history.is_empty,
            valid_actions=[str(a) for a in get_valid_actions(state, history)],
        )


def _position(pos: Position) -> PositionInfo:
    return PositionInfo(x=pos.x, y=pos.y)


_SESSION_STATUS = {
    GameStatus.PLAYING: SessionStatus.ACTIVE,
    GameStatus.WON: SessionStatus.WON,
    GameStatus.LOST: SessionStatus.LOST,
}


def _session_status(state: GameState) -> SessionStatus:
    return _SESSION_STATUS[state.status]
