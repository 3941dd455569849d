# solver/tracker.py
from typing import Iterable, List, Optional, Sequence

from models import Block, Cell, Placement
from solver.backtrack import SearchListener, SearchResult
from solver.errors import LogicViolation


class PlacementTracker(SearchListener):
    """Checks every placement event against the puzzle it was set up with.

    The tracker keeps its own record of which blocks are on the board, so it
    validates the engine from the outside: a placed size must name an unused
    block, lie inside the target and not overlap anything, and a clear must
    match the most recent placement.
    """

    def __init__(self, width: int, height: int, blocks: Sequence[Block]):
        self.width = int(width)
        self.height = int(height)
        # normalised so either orientation finds the same block
        self._shapes: List[tuple] = [(max(b.w, b.h), min(b.w, b.h)) for b in blocks]
        self._used: List[bool] = [False] * len(self._shapes)
        self._placed: List[Placement] = []
        self.events = 0
        self.result: Optional[SearchResult] = None

    def _find_unused(self, w: int, h: int) -> int:
        key = (max(w, h), min(w, h))
        matched = False
        for n, shape in enumerate(self._shapes):
            if shape == key:
                matched = True
                if not self._used[n]:
                    return n
        if matched:
            raise LogicViolation(f"rectangle {w} x {h} has already been used")
        raise LogicViolation(f"rectangle {w} x {h} does not exist")

    def placed(self, w: int, h: int, col: int, row: int) -> None:
        self.events += 1
        n = self._find_unused(w, h)
        loc = Placement(n, w, h, Cell(col, row))
        if col < 0 or row < 0 or col + w > self.width or row + h > self.height:
            raise LogicViolation(
                f"rectangle {w} x {h} at ({col}, {row}) does not fit inside "
                f"target rectangle {self.width} x {self.height}"
            )
        for other in self._placed:
            if _overlap(loc, other):
                raise LogicViolation(
                    f"rectangle {w} x {h} at ({col}, {row}) overlaps already placed "
                    f"rectangle {other.w} x {other.h} at ({other.col}, {other.row})"
                )
        self._used[n] = True
        self._placed.append(loc)

    def cleared(self, w: int, h: int, col: int, row: int) -> None:
        self.events += 1
        if not self._placed:
            raise LogicViolation("there is no rectangle that can be removed")
        last = self._placed[-1]
        if last.as_tuple() != (w, h, col, row):
            raise LogicViolation(
                f"rectangle to be unplaced {w} x {h} @ ({col}, {row}) doesn't match "
                f"last placed rectangle {last.w} x {last.h} at ({last.col}, {last.row})"
            )
        self._placed.pop()
        self._used[last.index] = False

    def finished(self, result: SearchResult) -> None:
        self.result = result

    @property
    def placed_rects(self) -> List[Placement]:
        return list(self._placed)

    @property
    def complete(self) -> bool:
        return bool(self._shapes) and all(self._used)


def _overlap(a: Placement, b: Placement) -> bool:
    return (
        a.col < b.col + b.w
        and b.col < a.col + a.w
        and a.row < b.row + b.h
        and b.row < a.row + a.h
    )


class CompositeListener(SearchListener):
    def __init__(self, listeners: Iterable[SearchListener]):
        self.listeners = [l for l in listeners if l is not None]

    def placed(self, w: int, h: int, col: int, row: int) -> None:
        for l in self.listeners:
            l.placed(w, h, col, row)

    def cleared(self, w: int, h: int, col: int, row: int) -> None:
        for l in self.listeners:
            l.cleared(w, h, col, row)

    def finished(self, result: SearchResult) -> None:
        for l in self.listeners:
            l.finished(result)


__all__ = ["PlacementTracker", "CompositeListener"]
