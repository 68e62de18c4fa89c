"""
Tests for the command-line interface.
"""

import pytest

from .. import cli
from .conftest import ScriptedRandom


def test_render_board_hides_face_down_cards(make_engine):
    engine = make_engine(1, rng=ScriptedRandom())
    engine.click(0)

    rows = cli.render_board(engine).splitlines()

    assert len(rows) == 3
    assert "🍎" in rows[0]
    assert "[ 1]" in rows[0]


def test_catalog_command(capsys):
    cli.main(["catalog", "advanced"])
    out = capsys.readouterr().out

    assert "starting difficulty 3" in out
    assert "memory_simple" in out
    assert "coming soon" in out


def test_play_command_quits(monkeypatch, capsys):
    answers = iter(["0", "zero", "0", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    cli.main(["play", "--seed", "1"])
    out = capsys.readouterr().out

    assert "Memory Match - difficulty 1, 6 pairs" in out
    assert "Not a number: zero" in out
    assert "Ignored:" in out


def test_no_command_prints_help():
    with pytest.raises(SystemExit):
        cli.main([])
