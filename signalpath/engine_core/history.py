"""
History - Bounded undo stack kept beside the GameState.

Each accepted move or wait records the state it started from together with
the action that left it. Undo restores the most recent snapshot verbatim.

The stack is an immutable value: push and pop return a new History, so a
session can hold the current (state, history) pair and replace both at once.
Snapshots are frozen GameStates and are stored by reference.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .action import Action
from .state import GameState


DEFAULT_HISTORY_LIMIT = 256


@dataclass(frozen=True)
class HistoryEntry:
    """The state before an action, and the action that was applied to it."""
    action: Action
    state: GameState


@dataclass(frozen=True)
class History:
    """
    Undo stack, newest entry last.

    max_depth caps the number of entries; the oldest entries are dropped
    first. None means unbounded.
    """
    entries: tuple[HistoryEntry, ...] = ()
    max_depth: int | None = DEFAULT_HISTORY_LIMIT
    dropped: int = field(default=0, compare=False)

    def __post_init__(self):
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def depth(self) -> int:
        return len(self.entries)

    def peek(self) -> HistoryEntry | None:
        """Most recent entry, or None."""
        return self.entries[-1] if self.entries else None

    def push(self, state: GameState, action: Action) -> History:
        """Return new history with the pre-action state recorded."""
        entries = self.entries + (HistoryEntry(action=action, state=state),)
        dropped = self.dropped
        if self.max_depth is not None and len(entries) > self.max_depth:
            overflow = len(entries) - self.max_depth
            entries = entries[overflow:]
            dropped += overflow
        return History(entries=entries, max_depth=self.max_depth, dropped=dropped)

    def pop(self) -> tuple[HistoryEntry | None, History]:
        """Return (removed entry, new history)."""
        if not self.entries:
            return None, self
        return self.entries[-1], History(
            entries=self.entries[:-1],
            max_depth=self.max_depth,
            dropped=self.dropped,
        )

    def actions(self) -> list[Action]:
        """Actions still on the stack, oldest first."""
        return [entry.action for entry in self.entries]

    def cleared(self) -> History:
        return History(max_depth=self.max_depth)
