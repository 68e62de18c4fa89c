"""
Session Module - Manages ephemeral game sessions.

A session represents one patient playing one game:
- Created when the front-end opens a game
- Owns the engine and receives its completion callback
- Adapts the difficulty between boards
- Destroyed when the front-end closes the game

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session, SessionState, GameOutcome

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameOutcome",
]
