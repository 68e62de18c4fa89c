"""
Games module - The puzzle games offered to patients.

Memory Match runs on the engine in engine_core; the catalog decides
which games each patient stage sees and the starting difficulty.
"""

from .catalog import (
    GameDefinition,
    PatientStage,
    GAMES,
    MEMORY_MATCH,
    SIMPLE_MEMORY_MATCH,
    games_for_stage,
    get_game,
    initial_difficulty,
)

__all__ = [
    "GameDefinition",
    "PatientStage",
    "GAMES",
    "MEMORY_MATCH",
    "SIMPLE_MEMORY_MATCH",
    "games_for_stage",
    "get_game",
    "initial_difficulty",
]
