import os

import pytest

import cli

PUZZLES = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "puzzles")


def _puzzle(name):
    return os.path.join(PUZZLES, name)


def test_solved_prints_board_and_call_count(capsys):
    assert cli.main([_puzzle("strips.txt")]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Solution!"
    assert out[-1] == "Solved in 2 calls"


def test_quiet_skips_the_board(capsys):
    assert cli.main([_puzzle("rotate.txt"), "-q"]) == 0
    assert capsys.readouterr().out == "Solved in 1 calls\n"


def test_exhausted_exit_status(capsys):
    assert cli.main([_puzzle("no_fit.txt")]) == 1
    assert capsys.readouterr().out == "Can't solve, took 8 calls to find that out\n"


def test_invalid_puzzle(capsys):
    assert cli.main([_puzzle("bad_area.txt")]) == 2
    out = capsys.readouterr().out
    assert out.startswith("Bad puzzle: Total size of all initial rectangles (8)")
    assert "Usage:" in out


def test_unreadable_puzzle_prints_usage(tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.txt")]) == 2
    out = capsys.readouterr().out
    assert "Bad puzzle" in out
    assert "Usage:" in out


def test_node_limit_reports_stop(capsys):
    assert cli.main([_puzzle("no_fit.txt"), "--node-limit", "2"]) == 1
    assert "node limit" in capsys.readouterr().out


def test_outputs_and_event_checks(tmp_path, capsys):
    coords = tmp_path / "coords.txt"
    svg = tmp_path / "out.svg"
    html = tmp_path / "view.html"
    rc = cli.main([
        _puzzle("nine_blocks.txt"),
        "-q",
        "--check-events",
        "--coords", str(coords),
        "--svg", str(svg),
        "--html", str(html),
    ])
    assert rc == 0
    out = capsys.readouterr().out
    assert f"Wrote {coords}" in out
    assert coords.read_text(encoding="utf-8").startswith("# board 6 x 6")
    assert svg.read_text(encoding="utf-8").startswith("<svg")
    assert "<svg" in html.read_text(encoding="utf-8")


def test_cross_check_agrees(capsys):
    pytest.importorskip("ortools")
    assert cli.main([_puzzle("no_fit.txt"), "--cross-check"]) == 1
    assert capsys.readouterr().out.splitlines()[-1] == "Cross-check agrees (CP-SAT)"
