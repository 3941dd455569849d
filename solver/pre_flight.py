# solver/pre_flight.py
"""
Structural checks that run once before any search step.

A failed check is returned as a value; the engine never starts on a puzzle
that fails here, so it reports zero calls and no placements.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from config import CFG
from models import Block
from solver.errors import StructuralPrecondition

BlockLike = Union[Block, Tuple[int, int]]


def as_block(obj: BlockLike) -> Block:
    if isinstance(obj, Block):
        return obj
    if isinstance(obj, (tuple, list)) and len(obj) == 2:
        w, h = obj
        return Block(int(w), int(h))
    raise TypeError(f"Not a block-like value: {obj!r}")


def as_blocks(items: Iterable[BlockLike]) -> Tuple[Block, ...]:
    return tuple(as_block(b) for b in items)


@dataclass(frozen=True)
class PreFlight:
    ok: bool
    reason: Optional[str] = None
    board_area: int = 0
    block_area: int = 0

    def require_valid(self) -> None:
        if not self.ok:
            raise StructuralPrecondition(self.reason or "invalid puzzle")


def check_puzzle(
    width: int,
    height: int,
    blocks: Sequence[Block],
    *,
    max_size: Optional[int] = None,
) -> PreFlight:
    limit = CFG.MAX_SIZE if max_size is None else int(max_size)

    if width < 1 or width > limit or height < 1 or height > limit:
        return PreFlight(False, f"Bad target rectangle size {width} x {height}")

    board_area = width * height
    longest = max(width, height)
    block_area = 0
    for b in blocks:
        if b.w < 1 or b.w > longest or b.h < 1 or b.h > longest:
            return PreFlight(False, f"Bad rectangle size {b.w} x {b.h}", board_area)
        block_area += b.area

    if block_area != board_area:
        return PreFlight(
            False,
            f"Total size of all initial rectangles ({block_area}) is not equal "
            f"to size of target ({board_area})",
            board_area,
            block_area,
        )
    return PreFlight(True, None, board_area, block_area)


__all__ = ["PreFlight", "check_puzzle", "as_block", "as_blocks", "BlockLike"]
