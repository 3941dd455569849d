# solver/catalog.py
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from config import CFG
from models import Block
from solver.errors import LogicViolation


def order_blocks(blocks: Sequence[Block], threshold: Optional[int] = None) -> List[int]:
    """Return the search order as a permutation of input positions.

    Above ``threshold`` blocks (``CFG.SORT_THRESHOLD`` by default) the largest
    areas go first; ``sorted`` is stable so equal areas keep input order.  At or
    below the threshold the input order is used unchanged.
    """

    limit = CFG.SORT_THRESHOLD if threshold is None else int(threshold)
    order = list(range(len(blocks)))
    if len(blocks) > limit:
        order.sort(key=lambda i: -blocks[i].area)
    return order


class BlockCatalog:
    """Blocks in search order plus a consumed flag per position."""

    def __init__(self, blocks: Iterable[Block], source_index: Optional[Sequence[int]] = None):
        self._blocks: Tuple[Block, ...] = tuple(blocks)
        if source_index is None:
            source_index = range(len(self._blocks))
        self._source: Tuple[int, ...] = tuple(int(i) for i in source_index)
        if len(self._source) != len(self._blocks):
            raise ValueError("source_index must match the block count")
        self._consumed: List[bool] = [False] * len(self._blocks)
        self._used = 0

    @classmethod
    def ordered(cls, blocks: Sequence[Block], threshold: Optional[int] = None) -> "BlockCatalog":
        order = order_blocks(blocks, threshold)
        return cls([blocks[i] for i in order], order)

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    @property
    def blocks(self) -> Tuple[Block, ...]:
        return self._blocks

    def source_index(self, index: int) -> int:
        return self._source[index]

    @property
    def reordered(self) -> bool:
        return self._source != tuple(range(len(self._source)))

    def is_consumed(self, index: int) -> bool:
        return self._consumed[index]

    @property
    def consumed_count(self) -> int:
        return self._used

    def iter_available(self) -> Iterator[Tuple[int, int, int]]:
        # Flags are read lazily; callers restore any change before resuming.
        consumed = self._consumed
        for index, block in enumerate(self._blocks):
            if consumed[index]:
                continue
            yield index, block.w, block.h

    def consume(self, index: int) -> None:
        if self._consumed[index]:
            b = self._blocks[index]
            raise LogicViolation(f"rectangle {b.w} x {b.h} has already been used")
        self._consumed[index] = True
        self._used += 1

    def release(self, index: int) -> None:
        if not self._consumed[index]:
            b = self._blocks[index]
            raise LogicViolation(f"rectangle {b.w} x {b.h} was not in use")
        self._consumed[index] = False
        self._used -= 1


__all__ = ["BlockCatalog", "order_blocks"]
