"""
Memcare - Memory Match engine for a memory-care assistant

A small, deterministic game engine behind the assistant's puzzle-games
panel. It provides:
- Board construction and the flip/match/reset state machine
- Scoring and one-shot win reporting
- Difficulty adaptation between games
- Ephemeral sessions and a REST API for the front-end
"""

__version__ = "0.1.0"
