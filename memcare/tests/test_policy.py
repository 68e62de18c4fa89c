"""
Tests for difficulty adaptation and the game catalog.
"""

import pytest

from ..adaptation import DifficultyPolicy, next_difficulty
from ..games import games_for_stage, get_game, initial_difficulty


class TestNextDifficulty:
    """Tests for the adaptation heuristic."""

    def test_fast_high_score_raises(self):
        """score=80, time=40 at difficulty 2 -> 3 (40 < 90)."""
        assert next_difficulty(80, 40, 2) == 3

    def test_low_score_lowers(self):
        assert next_difficulty(30, 10, 2) == 1

    def test_slow_game_lowers(self):
        assert next_difficulty(60, 181, 2) == 1

    def test_middling_game_keeps_level(self):
        assert next_difficulty(60, 60, 2) == 2

    def test_high_score_but_not_fast_keeps_level(self):
        """time_taken must be strictly below difficulty x 45."""
        assert next_difficulty(90, 45, 1) == 1

    def test_raise_boundary(self):
        assert next_difficulty(75, 44, 1) == 2
        assert next_difficulty(74, 10, 1) == 1

    def test_lower_boundary(self):
        assert next_difficulty(40, 90, 1) == 1
        assert next_difficulty(40, 180, 2) == 2
        assert next_difficulty(39, 10, 3) == 2

    def test_capped_at_three(self):
        assert next_difficulty(100, 1, 3) == 3

    def test_floored_at_one(self):
        assert next_difficulty(0, 1000, 1) == 1

    def test_raise_wins_over_lower(self):
        """Raise is checked first, as in the host's original ordering."""
        policy = DifficultyPolicy(raise_score=10, lower_score=50)
        assert policy.next_difficulty(20, 10, 1) == 2

    @pytest.mark.parametrize("difficulty", ["2", None, 2.0, True])
    def test_non_integer_difficulty_rejected(self, difficulty):
        with pytest.raises(ValueError):
            next_difficulty(80, 10, difficulty)


class TestCatalog:
    """Tests for stage-based game selection."""

    @pytest.mark.parametrize("stage,level", [
        ("early", 1),
        ("moderate", 2),
        ("advanced", 3),
        ("unknown", 1),
        (None, 1),
    ])
    def test_initial_difficulty(self, stage, level):
        assert initial_difficulty(stage) == level

    def test_early_and_moderate_games(self):
        for stage in ("early", "moderate"):
            ids = [g.game_id for g in games_for_stage(stage)]
            assert ids == ["memory", "sudoku"]

    def test_advanced_games(self):
        ids = [g.game_id for g in games_for_stage("advanced")]
        assert ids == ["memory_simple", "jigsaw"]

    def test_only_memory_games_are_playable(self):
        assert get_game("memory").playable
        assert get_game("memory_simple").playable
        assert not get_game("sudoku").playable
        assert not get_game("jigsaw").playable
        assert get_game("chess") is None
