"""Tests for the curve preview CLI."""

import preview


def test_curve_table(capsys):
    assert preview.main(["10"]) == 0
    out = capsys.readouterr().out
    assert "smallTree" in out
    assert "500" in out


def test_trust_lookup(capsys):
    assert preview.main(["--trust", "137"]) == 0
    out = capsys.readouterr().out
    assert "Trust score 137" in out
    assert "Level 5" in out


def test_negative_trust_rejected(capsys):
    assert preview.main(["--trust", "-3"]) == 1
