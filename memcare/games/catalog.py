"""
Game catalog - Which games a patient is offered, and at what level.

Games depend on the patient's stage. Memory Match is the only playable
game; the rest are listed so the front-end can show placeholders.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..adaptation import MIN_DIFFICULTY


class PatientStage:
    EARLY = "early"
    MODERATE = "moderate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class GameDefinition:
    """A game offered to a patient."""
    game_id: str
    title: str
    description: str
    playable: bool = False


MEMORY_MATCH = GameDefinition(
    game_id="memory",
    title="Memory Match",
    description="Improve memory by matching pairs.",
    playable=True,
)
SIMPLE_MEMORY_MATCH = GameDefinition(
    game_id="memory_simple",
    title="Simple Memory Match",
    description="Match pairs of simple items.",
    playable=True,
)
SUDOKU = GameDefinition(
    game_id="sudoku",
    title="Sudoku",
    description="Challenge logic with number puzzles.",
)
JIGSAW = GameDefinition(
    game_id="jigsaw",
    title="Simple Jigsaw",
    description="Piece together simple pictures.",
)

GAMES = {g.game_id: g for g in (MEMORY_MATCH, SIMPLE_MEMORY_MATCH, SUDOKU, JIGSAW)}

_INITIAL_DIFFICULTY = {
    PatientStage.EARLY: 1,
    PatientStage.MODERATE: 2,
    PatientStage.ADVANCED: 3,
}


def initial_difficulty(stage: str | None) -> int:
    """Starting difficulty for a patient stage (unknown stages start at 1)."""
    return max(MIN_DIFFICULTY, _INITIAL_DIFFICULTY.get(stage or "", 1))


def games_for_stage(stage: str | None) -> list[GameDefinition]:
    """Games offered at a stage; anything but early/moderate gets the simple set."""
    if stage in (PatientStage.EARLY, PatientStage.MODERATE):
        return [MEMORY_MATCH, SUDOKU]
    return [SIMPLE_MEMORY_MATCH, JIGSAW]


def get_game(game_id: str) -> GameDefinition | None:
    return GAMES.get(game_id)
