from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Block:
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def is_square(self) -> bool:
        return self.w == self.h


@dataclass(frozen=True)
class Cell:
    col: int
    row: int


@dataclass(frozen=True)
class Placement:
    index: int  # position in the caller's block list
    w: int
    h: int
    anchor: Cell

    @property
    def col(self) -> int:
        return self.anchor.col

    @property
    def row(self) -> int:
        return self.anchor.row

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.w, self.h, self.anchor.col, self.anchor.row)

    @property
    def label(self) -> str:
        return f"{self.w}x{self.h}"
