import random
import zlib
from typing import Dict, List, Optional, Sequence, Tuple

from models import Placement


def _color(name: str) -> str:
    rng = random.Random(zlib.crc32(name.encode("utf-8")))
    r = rng.randint(40, 200)
    g = rng.randint(40, 200)
    b = rng.randint(40, 200)
    return f"rgb({r},{g},{b})"


def _print_multiple(min_side: int) -> int:
    # thin blocks need taller rows to fit their label
    if min_side <= 1:
        return 3
    if min_side == 2:
        return 2
    return 1


def render_text(
    width: int,
    height: int,
    placements: Sequence[Placement],
    *,
    total_blocks: Optional[int] = None,
    min_side: Optional[int] = None,
) -> str:
    """ASCII drawing of the board, one block per ``+--+`` box.

    Each cell is two characters wide; rows are stretched by 3 or 2 when the
    thinnest block is 1 or 2 cells across so every ``WxH`` label fits.
    Uncovered cells print as ``.``.
    """

    placed = list(placements)
    covered = sum(p.w * p.h for p in placed)
    if total_blocks is None:
        complete = bool(placed) and covered == width * height
    else:
        complete = bool(placed) and len(placed) == total_blocks
    if complete:
        header = "Solution!"
    elif not placed:
        header = "Empty target"
    else:
        header = "Partially filled target"

    if min_side is None:
        min_side = min((min(p.w, p.h) for p in placed), default=1)
    m = _print_multiple(min_side)

    rows = height * m
    cols = width * 2 * m
    canvas: List[List[str]] = [["."] * cols for _ in range(rows)]

    for p in placed:
        left = p.col * 2 * m
        n = 2 * p.w * m
        top = p.row * m
        bottom = (p.row + p.h) * m
        label = p.label
        for pr in range(top, bottom):
            if pr == top or pr == bottom - 1:
                line = "+" + "-" * (n - 2) + "+"
            else:
                line = "|" + " " * (n - 2) + "|"
                if pr == (top + bottom - 1) // 2 and len(label) <= n - 2:
                    st = (n - len(label)) // 2
                    line = line[:st] + label + line[st + len(label):]
            canvas[pr][left:left + n] = list(line)

    return "\n".join([header] + ["".join(r) for r in canvas]) + "\n"


def render_svg(width: int, height: int, placements: Sequence[Placement], scale: int = 40) -> Tuple[str, str]:
    palette: Dict[str, str] = {}
    for p in placements:
        palette.setdefault(p.label, _color(p.label))

    svg_w = int(width * scale) + 2
    svg_h = int(height * scale) + 2

    rects = []
    for p in placements:
        x = int(p.col * scale) + 1
        y = int(p.row * scale) + 1
        w = int(p.w * scale)
        h = int(p.h * scale)
        rects.append(
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" fill="{palette[p.label]}" stroke="black" stroke-width="1"/>'
            f'<text x="{x+4}" y="{y+14}" font-size="12" fill="black">{p.label}</text>'
        )
    grid = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{grid}{"".join(rects)}</svg>'
    )

    legend = "".join(f"<li><span class='swatch' style='background:{c}'></span>{n}</li>" for n, c in palette.items())
    return svg, legend
