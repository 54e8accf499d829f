"""
Signal Path - Turn-based grid puzzle engine.

Guide a signal across a grid to the goal before its energy runs out.
The engine is deterministic and pure, and provides:
- Immutable game state
- Action validation and application
- Win/lose resolution
- Bounded undo history kept beside the state
- Level loading, solving and a persistent progress ledger
"""

__version__ = "0.1.0"
