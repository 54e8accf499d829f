"""
Session Module - Manages in-memory play sessions.

A session represents one attempt at a level:
- Created when the player picks a level
- Holds the current game state and its undo history
- Restarted by rebuilding the state from the level definition
- Destroyed when the player leaves

Winning a level updates the progress ledger through the game loop.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnOutcome

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnOutcome",
]
