#!/usr/bin/env python3
"""
Block packer CLI

Usage:
    python -m cli <puzzle file> [options]

The puzzle file holds ``<width> <height> <count>`` followed by ``count`` pairs
of block sizes.  Exit status: 0 solved, 1 no tiling (or stopped), 2 bad input.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import CFG
from io_files import write_coords, write_layout_view_html
from puzzle_parser import Puzzle, parse_puzzle_file
from render import render_svg, render_text
from solver.backtrack import EXHAUSTED, INVALID, STOPPED, SearchResult
from solver.orchestrator import solve_puzzle
from solver.tracker import PlacementTracker

USAGE = "Usage: cli <file>\n\n\twhere <file> is the path to a properly formatted input file."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Tile a board with every given block exactly once.",
    )
    parser.add_argument("puzzle", help="path to the puzzle file")
    parser.add_argument("-q", "--quiet", action="store_true", help="do not print the final board")
    parser.add_argument("--svg", metavar="PATH", help="write the solution as SVG")
    parser.add_argument("--html", metavar="PATH", help="write an HTML layout view")
    parser.add_argument("--coords", metavar="PATH", help="write placement coordinates")
    parser.add_argument("--node-limit", type=int, default=None, help="stop after N search calls")
    parser.add_argument("--max-seconds", type=float, default=None, help="stop after S seconds")
    parser.add_argument("--cross-check", action="store_true", help="confirm the verdict with CP-SAT")
    parser.add_argument("--check-events", action="store_true", help="validate every place/clear event")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log search progress")
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _cross_check(puzzle: Puzzle, result: SearchResult) -> str:
    from solver.cp_isolate import run_cp_sat_isolated

    ok, _placed, reason, crash = run_cp_sat_isolated(
        puzzle.width, puzzle.height, puzzle.blocks, CFG.CROSS_CHECK_SECONDS
    )
    if crash:
        return f"Cross-check unavailable: {reason} ({crash})"
    if result.status == STOPPED:
        return f"Cross-check: CP-SAT ok={ok} ({reason or 'tiling found'})"
    if ok == result.ok:
        return "Cross-check agrees (CP-SAT)"
    if not ok and reason and "timebox" in reason:
        return f"Cross-check inconclusive: {reason}"
    return f"Cross-check DISAGREES: CP-SAT ok={ok} ({reason or 'no reason'})"


def _write_outputs(args, puzzle: Puzzle, result: SearchResult) -> List[str]:
    written: List[str] = []
    if args.coords:
        written.append(write_coords(result.placements, puzzle.width, puzzle.height, ".", path=args.coords))
    if args.svg or args.html:
        svg, legend = render_svg(puzzle.width, puzzle.height, result.placements)
        if args.svg:
            with open(args.svg, "w", encoding="utf-8") as fh:
                fh.write(svg)
            written.append(args.svg)
        if args.html:
            written.append(write_layout_view_html(svg, legend, ".", path=args.html))
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    puzzle, err = parse_puzzle_file(args.puzzle)
    if puzzle is None:
        print(f"Bad puzzle: {err}")
        print(USAGE)
        return 2

    listener = None
    if args.check_events:
        listener = PlacementTracker(puzzle.width, puzzle.height, puzzle.blocks)

    result = solve_puzzle(
        puzzle,
        listener=listener,
        node_limit=args.node_limit,
        max_seconds=args.max_seconds,
    )

    if result.status == INVALID:
        print(f"Bad puzzle: {result.reason}")
        print(USAGE)
        return 2

    if result.ok and CFG.PRINT_FINAL and not args.quiet:
        min_side = min(min(b.w, b.h) for b in puzzle.blocks)
        print(render_text(
            puzzle.width,
            puzzle.height,
            result.placements,
            total_blocks=len(puzzle.blocks),
            min_side=min_side,
        ), end="")

    if result.ok:
        print(f"Solved in {result.calls} calls")
    elif result.reason and result.status != EXHAUSTED:
        print(result.reason)
    else:
        print(f"Can't solve, took {result.calls} calls to find that out")

    for path in _write_outputs(args, puzzle, result):
        print(f"Wrote {path}")

    if args.cross_check:
        print(_cross_check(puzzle, result))

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
