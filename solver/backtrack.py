# solver/backtrack.py
"""Depth-first placement search that anchors every block at the next open cell.

The search keeps an explicit stack of frames instead of recursing: a frame is
one configuration of the board with an open cell, the lazy sequence of
candidates for that cell and the placement currently committed from it.
Branch order is exactly the recursive one:

* the open cell is the first empty cell in row-major order;
* candidates are the unconsumed blocks in catalog order;
* a block is tried in its native orientation first and then swapped, unless
  it is square.

Every commit is paired with an undo in stack order, so a failed subtree leaves
the board and the catalog exactly as they were.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from models import Cell, Placement
from solver.board import Board
from solver.catalog import BlockCatalog

log = logging.getLogger(__name__)

SOLVED = "Solved"
EXHAUSTED = "Exhausted"
STOPPED = "Stopped"
INVALID = "Invalid"


class SearchListener:
    """Receives placement events.  The default implementation ignores them."""

    def placed(self, w: int, h: int, col: int, row: int) -> None:
        pass

    def cleared(self, w: int, h: int, col: int, row: int) -> None:
        pass

    def finished(self, result: "SearchResult") -> None:
        pass


@dataclass
class SearchResult:
    status: str
    calls: int = 0
    placements: List[Placement] = field(default_factory=list)
    grid: Optional[List[List[int]]] = None
    reason: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == SOLVED


class _Frame:
    __slots__ = ("cell", "candidates", "index", "placement")

    def __init__(self, cell: Cell, candidates: Iterator[Tuple[int, int, int]]):
        self.cell = cell
        self.candidates = candidates
        self.index = -1
        self.placement: Optional[Placement] = None


class _Stop(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SearchContext:
    """Owns the board and the catalog for one search."""

    def __init__(
        self,
        width: int,
        height: int,
        catalog: BlockCatalog,
        *,
        listener: Optional[SearchListener] = None,
        node_limit: int = 0,
        deadline: Optional[float] = None,
    ):
        self.board = Board(width, height)
        self.catalog = catalog
        self.listener = listener or SearchListener()
        self.node_limit = max(0, int(node_limit or 0))
        self.deadline = deadline
        self.calls = 0
        self._stack: List[_Frame] = []
        self.stop_reason: Optional[str] = None

    # ---------------- helpers ----------------

    def _candidates(self) -> Iterator[Tuple[int, int, int]]:
        for index, w, h in self.catalog.iter_available():
            yield index, w, h
            if w != h:
                yield index, h, w

    def _step(self) -> None:
        if self.node_limit and self.calls >= self.node_limit:
            raise _Stop(f"Stopped after {self.calls} calls (node limit)")
        if self.deadline is not None and time.time() >= self.deadline:
            raise _Stop(f"Stopped after {self.calls} calls (time limit)")
        self.calls += 1

    def _open_frame(self, cell: Cell) -> None:
        self._step()
        self._stack.append(_Frame(cell, self._candidates()))

    def _place(self, frame: _Frame, index: int, w: int, h: int) -> None:
        anchor = frame.cell
        self.board.commit(w, h, anchor, self.calls)
        self.catalog.consume(index)
        frame.index = index
        frame.placement = Placement(self.catalog.source_index(index), w, h, anchor)
        log.debug("place %dx%d at (%d, %d)", w, h, anchor.col, anchor.row)
        self.listener.placed(w, h, anchor.col, anchor.row)

    def _remove(self, frame: _Frame) -> None:
        p = frame.placement
        self.board.undo(p.w, p.h, p.anchor)
        self.catalog.release(frame.index)
        frame.placement = None
        frame.index = -1
        log.debug("clear %dx%d at (%d, %d)", p.w, p.h, p.col, p.row)
        self.listener.cleared(p.w, p.h, p.col, p.row)

    def _next_fit(self, frame: _Frame) -> Optional[Tuple[int, int, int]]:
        fits = self.board.fits
        for index, w, h in frame.candidates:
            if fits(w, h, frame.cell):
                return index, w, h
        return None

    def _unwind(self) -> None:
        while self._stack:
            frame = self._stack.pop()
            if frame.placement is not None:
                self._remove(frame)

    @property
    def placements(self) -> List[Placement]:
        return [f.placement for f in self._stack if f.placement is not None]

    # ---------------- search ----------------

    def explore(self) -> str:
        """Run the search to a terminal status.

        Returns ``SOLVED`` with the board full and the winning placements still
        committed, ``EXHAUSTED`` with the board empty again, or ``STOPPED``
        (board empty) when the node limit or the deadline tripped first.
        """

        cell = self.board.find_next_open_cell()
        if cell is None:
            return SOLVED
        try:
            self._open_frame(cell)
            while self._stack:
                frame = self._stack[-1]
                if frame.placement is not None:
                    # subtree below this placement failed
                    self._remove(frame)
                choice = self._next_fit(frame)
                if choice is None:
                    self._stack.pop()
                    continue
                self._place(frame, *choice)
                cell = self.board.find_next_open_cell()
                if cell is None:
                    return SOLVED
                self._open_frame(cell)
        except _Stop as stop:
            self._unwind()
            self.stop_reason = stop.reason
            return STOPPED
        return EXHAUSTED


def run_search(
    width: int,
    height: int,
    catalog: BlockCatalog,
    *,
    listener: Optional[SearchListener] = None,
    node_limit: int = 0,
    max_seconds: Optional[float] = None,
) -> SearchResult:
    """Search an already validated and ordered catalog; report to ``listener``."""

    t0 = time.time()
    deadline = t0 + float(max_seconds) if max_seconds else None
    ctx = SearchContext(
        width,
        height,
        catalog,
        listener=listener,
        node_limit=node_limit,
        deadline=deadline,
    )
    status = ctx.explore()

    result = SearchResult(status=status, calls=ctx.calls, elapsed=time.time() - t0)
    if status == SOLVED:
        result.placements = ctx.placements
        result.grid = ctx.board.rows()
    elif status == STOPPED:
        result.reason = ctx.stop_reason
    else:
        result.reason = f"No tiling exists ({ctx.calls} calls)"
    ctx.listener.finished(result)
    return result


__all__ = [
    "SearchContext",
    "SearchListener",
    "SearchResult",
    "run_search",
    "SOLVED",
    "EXHAUSTED",
    "STOPPED",
    "INVALID",
]
