import os

import pytest

from models import Block
from puzzle_parser import parse_puzzle_file
from solver.backtrack import (
    EXHAUSTED,
    INVALID,
    SOLVED,
    STOPPED,
    SearchContext,
    SearchListener,
    run_search,
)
from solver.catalog import BlockCatalog
from solver.orchestrator import solve_blocks, solve_puzzle
from solver.tracker import CompositeListener, PlacementTracker

PUZZLES = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "puzzles")


class Recorder(SearchListener):
    def __init__(self):
        self.events = []
        self.results = []

    def placed(self, w, h, col, row):
        self.events.append(("place", w, h, col, row))

    def cleared(self, w, h, col, row):
        self.events.append(("clear", w, h, col, row))

    def finished(self, result):
        self.results.append(result)


def _load(name):
    puzzle, err = parse_puzzle_file(os.path.join(PUZZLES, name))
    assert err is None
    return puzzle


def test_two_strips_fill_the_board():
    result = solve_blocks(4, 4, [(4, 2), (4, 2)])
    assert result.status == SOLVED and result.ok
    assert result.calls == 2
    assert [p.as_tuple() for p in result.placements] == [(4, 2, 0, 0), (4, 2, 0, 2)]
    assert [p.index for p in result.placements] == [0, 1]


def test_unit_blocks_are_placed_row_major():
    result = solve_blocks(2, 2, [(1, 1)] * 4)
    assert result.status == SOLVED
    assert result.calls == 4
    assert result.grid == [[1, 2], [3, 4]]
    assert [(p.col, p.row) for p in result.placements] == [(0, 0), (1, 0), (0, 1), (1, 1)]
    assert [p.index for p in result.placements] == [0, 1, 2, 3]


def test_area_mismatch_never_starts_the_search():
    rec = Recorder()
    result = solve_blocks(3, 3, [(2, 2), (2, 2)], listener=rec)
    assert result.status == INVALID
    assert result.calls == 0
    assert result.placements == []
    assert "not equal to size of target" in result.reason
    assert rec.events == []
    assert rec.results == [result]


def test_block_is_rotated_when_only_the_swap_fits():
    result = solve_blocks(2, 3, [(3, 2)])
    assert result.status == SOLVED
    assert result.calls == 1
    assert [p.as_tuple() for p in result.placements] == [(2, 3, 0, 0)]


def test_exhausted_search_leaves_nothing_on_the_board():
    puzzle = _load("no_fit.txt")
    tracker = PlacementTracker(puzzle.width, puzzle.height, puzzle.blocks)
    result = solve_puzzle(puzzle, listener=tracker)
    assert result.status == EXHAUSTED
    assert result.calls == 8
    assert result.reason == "No tiling exists (8 calls)"
    assert result.placements == []
    assert tracker.placed_rects == []
    assert tracker.result is result


def test_square_blocks_are_offered_once():
    assert Block(2, 2).is_square and not Block(1, 2).is_square
    cat = BlockCatalog([Block(2, 2), Block(1, 2)])
    ctx = SearchContext(3, 2, cat)
    assert list(ctx._candidates()) == [(0, 2, 2), (1, 1, 2), (1, 2, 1)]


def test_square_only_puzzle_never_places_the_same_square_twice_in_one_spot():
    rec = Recorder()
    result = solve_blocks(3, 3, [(2, 2), (2, 2), (1, 1)], listener=rec)
    assert result.status == EXHAUSTED
    first_frame = [e for e in rec.events if e[0] == "place" and e[3:] == (0, 0)]
    # two distinct 2x2 blocks and the 1x1, each offered once at the origin
    assert first_frame == [
        ("place", 2, 2, 0, 0),
        ("place", 2, 2, 0, 0),
        ("place", 1, 1, 0, 0),
    ]


def test_events_pass_the_tracker_on_a_sorted_catalog():
    puzzle = _load("nine_blocks.txt")
    tracker = PlacementTracker(puzzle.width, puzzle.height, puzzle.blocks)
    rec = Recorder()
    result = solve_puzzle(puzzle, listener=CompositeListener([tracker, rec]))
    assert result.status == SOLVED
    assert tracker.complete
    assert len(tracker.placed_rects) == 9
    # more than eight blocks: the 3x3 goes first
    assert rec.events[0] == ("place", 3, 3, 0, 0)
    assert result.placements[0].index == 8
    assert sorted(p.index for p in result.placements) == list(range(9))


def test_search_is_deterministic():
    puzzle = _load("nine_blocks.txt")
    first = solve_puzzle(puzzle)
    second = solve_puzzle(puzzle)
    assert first.calls == second.calls
    assert first.placements == second.placements
    assert first.grid == second.grid


def test_node_limit_stops_and_unwinds():
    puzzle = _load("no_fit.txt")
    tracker = PlacementTracker(puzzle.width, puzzle.height, puzzle.blocks)
    result = solve_puzzle(puzzle, listener=tracker, node_limit=3)
    assert result.status == STOPPED
    assert not result.ok
    assert result.calls == 3
    assert "node limit" in result.reason
    assert tracker.placed_rects == []


def test_time_limit_stops_and_unwinds():
    blocks = [(2, 2)] * 20 + [(1, 1)]
    tracker = PlacementTracker(9, 9, [Block(w, h) for w, h in blocks])
    result = solve_blocks(9, 9, blocks, listener=tracker, max_seconds=1e-9)
    assert result.status == STOPPED
    assert "time limit" in result.reason
    assert result.placements == []
    assert tracker.placed_rects == []


def test_area_sort_changes_the_search():
    puzzle = _load("nine_blocks.txt")
    sorted_rec, plain_rec = Recorder(), Recorder()
    by_area = solve_puzzle(puzzle, listener=sorted_rec)
    as_given = solve_puzzle(puzzle, listener=plain_rec, sort_threshold=99)
    assert by_area.status == as_given.status == SOLVED
    # largest first tiles this board without a single backtrack
    assert by_area.calls == 9
    assert as_given.calls > by_area.calls
    assert plain_rec.events[0] == ("place", 2, 1, 0, 0)
    assert sorted_rec.events[0] == ("place", 3, 3, 0, 0)


def test_deep_search_does_not_recurse():
    # deeper than the default interpreter recursion limit
    side = 40
    cat = BlockCatalog([Block(1, 1)] * (side * side))
    result = run_search(side, side, cat)
    assert result.status == SOLVED
    assert result.calls == side * side
    assert cat.consumed_count == side * side


def test_empty_block_list_is_invalid():
    result = solve_blocks(1, 1, [])
    assert result.status == INVALID
    assert result.calls == 0


@pytest.mark.parametrize("name,status", [
    ("strips.txt", SOLVED),
    ("rotate.txt", SOLVED),
    ("nine_blocks.txt", SOLVED),
    ("no_fit.txt", EXHAUSTED),
    ("bad_area.txt", INVALID),
])
def test_sample_puzzles(name, status):
    assert solve_puzzle(_load(name)).status == status
