# puzzle_parser.py: puzzle files and web payloads
from __future__ import annotations
import os
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from models import Block

PuzzleOrError = Tuple[Optional["Puzzle"], Optional[str]]

# "3x2", "3 x 2", "3×2"
_SIZE_RE = re.compile(r"^\s*(?P<w>\d+)\s*[xX×]\s*(?P<h>\d+)\s*$")


@dataclass(frozen=True)
class Puzzle:
    width: int
    height: int
    blocks: Tuple[Block, ...]

    @property
    def area(self) -> int:
        return self.width * self.height


def _to_int(x: Any) -> Optional[int]:
    if isinstance(x, bool):
        return None
    if isinstance(x, int):
        return x
    try:
        f = float(str(x).strip())
    except (TypeError, ValueError):
        return None
    if not f.is_integer():
        return None
    return int(f)


def _strip_comments(text: str) -> str:
    return "\n".join(line.split("#", 1)[0] for line in text.splitlines())


def parse_puzzle_text(text: str) -> PuzzleOrError:
    """
    Parse the whitespace separated puzzle format::

        <width> <height> <count>
        <w1> <h1>
        ...

    Everything after ``#`` on a line is ignored.  Returns ``(puzzle, None)`` or
    ``(None, error_message)``.  Only syntax and positivity are checked here;
    size limits and the area rule belong to the solver's pre-flight.
    """

    if text is None:
        return None, "empty puzzle"
    tokens = _strip_comments(str(text)).split()
    if not tokens:
        return None, "empty puzzle"

    numbers: List[int] = []
    for pos, tok in enumerate(tokens, start=1):
        n = _to_int(tok)
        if n is None:
            return None, f"token {pos} is not an integer: {tok!r}"
        numbers.append(n)

    if len(numbers) < 3:
        return None, "expected '<width> <height> <count>' header"
    width, height, count = numbers[:3]
    if width <= 0 or height <= 0:
        return None, f"board size must be positive (got {width} x {height})"
    if count < 0:
        return None, f"block count must not be negative (got {count})"

    dims = numbers[3:]
    if len(dims) != 2 * count:
        return None, f"expected {count} blocks ({2 * count} numbers), found {len(dims)} numbers"

    blocks: List[Block] = []
    for i in range(count):
        w, h = dims[2 * i], dims[2 * i + 1]
        if w <= 0 or h <= 0:
            return None, f"block {i + 1} has a non-positive size {w} x {h}"
        blocks.append(Block(w, h))

    return Puzzle(width, height, tuple(blocks)), None


def parse_puzzle_file(path: str) -> PuzzleOrError:
    if not path or not os.path.isfile(path):
        return None, f"not a readable file: {path}"
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        return None, f"cannot read {path}: {e}"
    return parse_puzzle_text(text)


def _first(v: Any) -> Any:
    # form posts arrive as single-element lists
    if isinstance(v, (list, tuple)) and len(v) == 1:
        return v[0]
    return v


def _block_items(item: Any) -> Optional[List[Block]]:
    if isinstance(item, str):
        m = _SIZE_RE.match(item)
        if not m:
            return None
        return [Block(int(m.group("w")), int(m.group("h")))]
    if isinstance(item, dict):
        w = _to_int(item.get("w", item.get("width")))
        h = _to_int(item.get("h", item.get("height")))
        n = _to_int(item.get("count", 1))
        if w is None or h is None or n is None or w <= 0 or h <= 0 or n < 0:
            return None
        return [Block(w, h)] * n
    if isinstance(item, (list, tuple)) and len(item) == 2:
        w, h = _to_int(item[0]), _to_int(item[1])
        if w is None or h is None or w <= 0 or h <= 0:
            return None
        return [Block(w, h)]
    return None


def parse_puzzle_payload(payload: Any) -> PuzzleOrError:
    """
    Accept the shapes the web form / JSON clients send:

    * ``{"puzzle": "<puzzle text>"}``
    * ``{"width": 4, "height": 4, "blocks": [[4, 2], "4x2", {"w": 1, "h": 1, "count": 3}]}``
    """

    if not isinstance(payload, dict) or not payload:
        return None, "nothing parsed from request"

    text = _first(payload.get("puzzle"))
    if isinstance(text, str) and text.strip():
        return parse_puzzle_text(text)

    width = _to_int(_first(payload.get("width")))
    height = _to_int(_first(payload.get("height")))
    if width is None or height is None:
        return None, "missing board width/height"
    if width <= 0 or height <= 0:
        return None, f"board size must be positive (got {width} x {height})"

    raw_blocks = payload.get("blocks")
    if isinstance(raw_blocks, list) and len(raw_blocks) == 1 and isinstance(raw_blocks[0], str):
        raw_blocks = raw_blocks[0]
    if isinstance(raw_blocks, str):
        raw_blocks = [s for s in re.split(r"[,;\s]+", raw_blocks) if s]
    if not isinstance(raw_blocks, (list, tuple)):
        return None, "missing block list"

    blocks: List[Block] = []
    for pos, item in enumerate(raw_blocks, start=1):
        parsed = _block_items(item)
        if parsed is None:
            return None, f"block {pos} is not a valid size: {item!r}"
        blocks.extend(parsed)

    return Puzzle(width, height, tuple(blocks)), None


def format_puzzle(puzzle: Puzzle) -> str:
    lines = [f"{puzzle.width} {puzzle.height} {len(puzzle.blocks)}"]
    lines.extend(f"{b.w} {b.h}" for b in puzzle.blocks)
    return "\n".join(lines) + "\n"


__all__ = [
    "Puzzle",
    "parse_puzzle_text",
    "parse_puzzle_file",
    "parse_puzzle_payload",
    "format_puzzle",
]
