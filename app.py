# app.py: web front for the block packer; progress no-cache
from __future__ import annotations
import os
import time
from typing import Any, Dict, Tuple

from flask import Flask, request, send_from_directory, jsonify

from config import CFG
from io_files import write_coords, write_layout_view_html
from puzzle_parser import parse_puzzle_payload
from render import render_svg, render_text
from solver.backtrack import SearchResult
from solver.orchestrator import solve_puzzle

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    ProgressListener,
    set_status, set_board, set_done,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_COORDS_FULL_PATH, COORDS_DIR, COORDS_FILENAME = _resolve_output_paths(
    CFG.COORDS_OUT, "coords.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

INDEX_HTML = """<!doctype html>
<html><head><meta charset='utf-8'><title>Block packer</title></head>
<body>
<h1>Block packer</h1>
<form method='post' action='/solve'>
<p>Puzzle: <code>width height count</code> then one <code>w h</code> pair per block.</p>
<textarea name='puzzle' rows='12' cols='30'>4 4 2
4 2
4 2</textarea>
<p><button type='submit'>Solve</button></p>
</form>
</body></html>"""

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return INDEX_HTML


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    form_dict = request.form.to_dict(flat=False)
    for k, v in form_dict.items():
        merged.setdefault(k, v if isinstance(v, list) else [v])

    args_dict = request.args.to_dict(flat=False)
    for k, v in args_dict.items():
        merged.setdefault(k, v if isinstance(v, list) else [v])

    return merged


def _result_payload(puzzle, result: SearchResult, t0: float) -> Dict[str, Any]:
    placements = result.placements
    out: Dict[str, Any] = {
        "ok": result.ok,
        "status": result.status,
        "calls": result.calls,
        "reason": result.reason,
        "width": puzzle.width,
        "height": puzzle.height,
        "blocks": len(puzzle.blocks),
        "placements": [
            {"block": p.index, "w": p.w, "h": p.h, "col": p.col, "row": p.row}
            for p in placements
        ],
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "text": "",
        "svg": "",
        "coords_filename": COORDS_FILENAME,
        "layout_filename": LAYOUT_FILENAME,
    }
    if result.ok:
        min_side = min(min(b.w, b.h) for b in puzzle.blocks)
        out["text"] = render_text(
            puzzle.width, puzzle.height, placements,
            total_blocks=len(puzzle.blocks), min_side=min_side,
        )
        svg, legend = render_svg(puzzle.width, puzzle.height, placements)
        out["svg"] = svg
        write_layout_view_html(svg, legend, BASE_DIR, path=_LAYOUT_FULL_PATH)
    write_coords(placements, puzzle.width, puzzle.height, BASE_DIR, path=_COORDS_FULL_PATH)
    return out


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    set_status("Solving")

    t0 = time.time()
    like = _merge_like_mapping()
    puzzle, err = parse_puzzle_payload(like)
    if puzzle is None:
        seen_keys = ", ".join(list(like.keys())[:8]) or "—"
        reason = f"Bad puzzle: {err} (saw keys: {seen_keys})"
        set_done(False, reason=reason, status="Error")
        return jsonify({"ok": False, "status": "Error", "reason": reason, "calls": 0}), 400

    set_board(puzzle.width, puzzle.height, len(puzzle.blocks))
    try:
        result = solve_puzzle(puzzle, listener=ProgressListener())
    except Exception as e:
        reason = f"solver exception: {type(e).__name__}: {e}"
        set_done(False, reason=reason, status="Error")
        app.logger.exception("solve failed")
        return jsonify({"ok": False, "status": "Error", "reason": reason, "calls": 0}), 500

    return jsonify(_result_payload(puzzle, result, t0))


@app.route("/download/coords")
def download_coords():
    return send_from_directory(COORDS_DIR, COORDS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
