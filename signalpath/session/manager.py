"""
Session Manager - Creates and manages play sessions.

A session is one attempt at one level:
- Created when the player picks a level
- Holds the current GameState and the undo history beside it
- Restarting rebuilds the state from the level definition
- Removed when the player leaves the level

Sessions are in-memory only. The only persistence is the progress ledger,
written by the game loop when a level is won.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..engine_core.history import DEFAULT_HISTORY_LIMIT, History
from ..engine_core.state import GameState, GameStatus
from ..levels.converter import create_game_state
from ..levels.schema import LevelData


logger = logging.getLogger(__name__)

# Passed as history_limit to use the manager's limit
USE_MANAGER_LIMIT = object()


class SessionState(Enum):
    """State of a play session."""
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"
    ENDED = "ended"


@dataclass
class Session:
    """
    One attempt at a level.

    `game_state` and `history` are always replaced together; both are
    immutable values.
    """
    session_id: str
    level: LevelData
    created_at: float
    game_state: GameState
    history: History

    # Position of the level in play order, when known
    level_index: int | None = None

    ended: bool = False
    restarts: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def level_id(self) -> str:
        return self.level.id

    @property
    def state(self) -> SessionState:
        if self.ended:
            return SessionState.ENDED
        if self.game_state.status == GameStatus.WON:
            return SessionState.WON
        if self.game_state.status == GameStatus.LOST:
            return SessionState.LOST
        return SessionState.ACTIVE

    def is_active(self) -> bool:
        """Active sessions can still be played, restarted or undone."""
        return not self.ended

    def restart(self) -> GameState:
        """Rebuild the level from scratch and forget the undo history."""
        self.game_state = create_game_state(self.level)
        self.history = self.history.cleared()
        self.restarts += 1
        return self.game_state


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Create sessions from level definitions
    - Track active sessions
    - Clean up ended and stale sessions
    """

    def __init__(self, history_limit: int | None = DEFAULT_HISTORY_LIMIT):
        self.history_limit = history_limit
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        level: LevelData,
        level_index: int | None = None,
        history_limit: int | None | object = USE_MANAGER_LIMIT,
    ) -> Session:
        """
        Create a new session for a level.

        Args:
            level: Validated level definition
            level_index: Position of the level in play order
            history_limit: Undo depth for this session, None for unbounded
                (defaults to the manager's)

        Returns:
            New Session at the level's starting state
        """
        limit = self.history_limit if history_limit is USE_MANAGER_LIMIT else history_limit
        session = Session(
            session_id=str(uuid.uuid4()),
            level=level,
            created_at=time.time(),
            game_state=create_game_state(level),
            history=History(max_depth=limit),
            level_index=level_index,
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s for level %s", session.session_id, level.id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.ended = True
        session.history = session.history.cleared()
        logger.info("Ended session %s (%s)", session_id, session.game_state.status.value)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions older than max_age whose level is over.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
            and session.state in (SessionState.WON, SessionState.LOST)
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
