# solver/board.py
from typing import List, Optional, Tuple

from models import Cell
from solver.errors import LogicViolation

EMPTY = 0


class Board:
    """Target grid of ``height`` rows by ``width`` columns.

    Cells live in one flat row-major list so the next open cell is a single
    ``index(EMPTY)`` call.  Any non-zero value marks an occupied cell; the
    search writes its step number there, which helps when eyeballing a grid
    dump but carries no meaning.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Bad board size {width} x {height}")
        self.width = int(width)
        self.height = int(height)
        self._cells: List[int] = [EMPTY] * (self.width * self.height)
        self._commits: List[Tuple[int, int, Cell]] = []
        self._occupied = 0

    # ---------------- queries ----------------

    def find_next_open_cell(self) -> Optional[Cell]:
        try:
            idx = self._cells.index(EMPTY)
        except ValueError:
            return None
        row, col = divmod(idx, self.width)
        return Cell(col, row)

    def fits(self, w: int, h: int, anchor: Cell) -> bool:
        col, row = anchor.col, anchor.row
        if w <= 0 or h <= 0 or col < 0 or row < 0:
            return False
        if col + w > self.width or row + h > self.height:
            return False
        cells = self._cells
        W = self.width
        for r in range(row, row + h):
            base = r * W + col
            if any(cells[base:base + w]):
                return False
        return True

    def at(self, col: int, row: int) -> int:
        return self._cells[row * self.width + col]

    @property
    def occupied_count(self) -> int:
        return self._occupied

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_full(self) -> bool:
        return self._occupied == self.area

    @property
    def committed(self) -> Tuple[Tuple[int, int, Cell], ...]:
        return tuple(self._commits)

    def rows(self) -> List[List[int]]:
        W = self.width
        return [self._cells[r * W:(r + 1) * W] for r in range(self.height)]

    # ---------------- mutation ----------------

    def _fill(self, w: int, h: int, anchor: Cell, value: int) -> None:
        W = self.width
        run = [value] * w
        for r in range(anchor.row, anchor.row + h):
            base = r * W + anchor.col
            self._cells[base:base + w] = run

    def commit(self, w: int, h: int, anchor: Cell, tag: int) -> None:
        if tag == EMPTY:
            raise LogicViolation("commit needs a non-empty tag")
        if not self.fits(w, h, anchor):
            raise LogicViolation(
                f"rectangle {w} x {h} at ({anchor.col}, {anchor.row}) does not fit"
            )
        self._fill(w, h, anchor, tag)
        self._commits.append((w, h, anchor))
        self._occupied += w * h

    def undo(self, w: int, h: int, anchor: Cell) -> None:
        if not self._commits:
            raise LogicViolation("there is no rectangle that can be removed")
        last = self._commits[-1]
        if last != (w, h, anchor):
            lw, lh, la = last
            raise LogicViolation(
                f"rectangle to be unplaced {w} x {h} @ ({anchor.col}, {anchor.row}) "
                f"doesn't match last placed {lw} x {lh} @ ({la.col}, {la.row})"
            )
        self._commits.pop()
        self._fill(w, h, anchor, EMPTY)
        self._occupied -= w * h


__all__ = ["Board", "EMPTY"]
