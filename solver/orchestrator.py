# Orchestrator: pre-flight -> catalog ordering -> backtracking search
from __future__ import annotations

import time
from typing import Iterable, Optional

from config import CFG
from progress import log_attempt_detail
from solver.backtrack import INVALID, SearchListener, SearchResult, run_search
from solver.catalog import BlockCatalog
from solver.pre_flight import BlockLike, as_blocks, check_puzzle


def _limit_or_default(value, default) -> float:
    if value is None:
        value = default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return value if value > 0 else 0.0


def solve_blocks(
    width: int,
    height: int,
    blocks: Iterable[BlockLike],
    *,
    listener: Optional[SearchListener] = None,
    node_limit: Optional[int] = None,
    max_seconds: Optional[float] = None,
    sort_threshold: Optional[int] = None,
) -> SearchResult:
    """Tile a ``width`` × ``height`` board with every block exactly once.

    Returns a :class:`SearchResult`.  A puzzle that fails pre-flight comes back
    as ``Invalid`` with zero calls and the reason; the search never starts.
    ``node_limit`` and ``max_seconds`` default to ``CFG.NODE_LIMIT`` /
    ``CFG.MAX_SECONDS`` (0 means unlimited) and turn a long search into a
    ``Stopped`` result instead of a proof of exhaustion.
    """

    t0 = time.time()
    width, height = int(width), int(height)
    block_list = as_blocks(blocks)

    log_attempt_detail(
        "Search requested",
        board=f"{width}x{height}",
        blocks=len(block_list),
    )

    pre = check_puzzle(width, height, block_list)
    if not pre.ok:
        result = SearchResult(
            status=INVALID,
            calls=0,
            reason=pre.reason,
            elapsed=time.time() - t0,
        )
        log_attempt_detail("Pre-flight failed", reason=pre.reason)
        if listener is not None:
            listener.finished(result)
        return result

    catalog = BlockCatalog.ordered(block_list, sort_threshold)
    log_attempt_detail(
        "Search started",
        board=f"{width}x{height}",
        blocks=len(catalog),
        area=pre.board_area,
        reordered=int(catalog.reordered),
    )

    result = run_search(
        width,
        height,
        catalog,
        listener=listener,
        node_limit=int(_limit_or_default(node_limit, CFG.NODE_LIMIT)),
        max_seconds=_limit_or_default(max_seconds, CFG.MAX_SECONDS) or None,
    )
    log_attempt_detail(
        "Search finished",
        status=result.status,
        calls=result.calls,
        placed=len(result.placements),
        duration=f"{result.elapsed:.3f}s",
        reason=result.reason,
    )
    return result


def solve_puzzle(puzzle, **kwargs) -> SearchResult:
    """Convenience wrapper for a parsed :class:`puzzle_parser.Puzzle`."""

    return solve_blocks(puzzle.width, puzzle.height, puzzle.blocks, **kwargs)


__all__ = ["solve_blocks", "solve_puzzle"]
