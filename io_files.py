"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional, Sequence

from config import CFG
from models import Placement


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_coords(
    placements: Sequence[Placement],
    width: int,
    height: int,
    base_dir: str,
    *,
    path: Optional[str] = None,
) -> str:
    """Write one ``WxH @ (col,row)`` line per placed block, or ``No solution``."""

    path = path or _resolve_output_path(base_dir, CFG.COORDS_OUT, "coords.txt")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"# board {width} x {height}\n")
        if not placements:
            f.write("No solution\n")
        else:
            for p in placements:
                f.write(f"block {p.index + 1}: {p.label} @ ({p.col},{p.row})\n")
    return path


def write_layout_view_html(
    svg: str,
    legend_html: str,
    base_dir: str,
    *,
    title: str = "Layout View",
    path: Optional[str] = None,
) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = path or _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{title}</title>
<style>.swatch{{display:inline-block;width:1em;height:1em;margin-right:.4em}}</style></head>
<body>
<h1>{title}</h1>
<section><div>{svg}</div></section>
<section><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_coords", "write_layout_view_html"]
