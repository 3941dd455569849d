from __future__ import annotations

import logging
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from config import CFG
from solver.backtrack import SearchListener, SearchResult

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _log_file_path() -> Path:
    configured = (CFG.LOG_FILE or "").strip()
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "solver_attempts.log"


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.attempt_log")
    if logger.handlers:
        return logger

    log_path = _log_file_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except OSError:
        # No log file; progress tracking carries on without it.
        logger.handlers.clear()
    return logger


ATTEMPT_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(ATTEMPT_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except (TypeError, ValueError):
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            ATTEMPT_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            ATTEMPT_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to callers.
        pass


def log_attempt_detail(event: str, **fields: Any) -> None:
    _emit_log(event, **fields)


# Single source of truth for the status endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Exhausted | Stopped | Invalid | Error
    "board": "",               # e.g. "6 × 4"
    "blocks": 0,               # blocks in the puzzle
    "placed": 0,               # blocks on the board right now
    "best_placed": 0,          # deepest the search has reached
    "calls": 0,                # search calls, reported when the run finishes
    "moves": 0,                # place and clear events seen so far
    "percent": 0.0,            # 0..100 of the board covered right now
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # success flag if known
    "run_id": 0,               # monotonically increasing identifier
}

_COVERAGE: Dict[str, int] = {"area": 0, "cells": 0}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"

def reset() -> None:
    with PROGRESS_LOCK:
        new_run_id = int(PROGRESS.get("run_id", 0)) + 1
        PROGRESS.update({
            "status": "Idle",
            "board": "",
            "blocks": 0,
            "placed": 0,
            "best_placed": 0,
            "calls": 0,
            "moves": 0,
            "percent": 0.0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": new_run_id,
        })
        _COVERAGE.update(area=0, cells=0)
        _emit_log("Progress reset", run_id=new_run_id)

def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = _now()
        PROGRESS["elapsed"] = 0.0
        _emit_log("Run timer started")

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

# ------------------------------
# Setters (tolerant)
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)

def set_board(width: Any, height: Any, blocks: Any = 0) -> None:
    try:
        w, h = int(width), int(height)
    except (TypeError, ValueError):
        w = h = 0
    with PROGRESS_LOCK:
        PROGRESS["board"] = f"{w} × {h}" if w and h else ""
        PROGRESS["blocks"] = max(0, int(blocks or 0))
        _COVERAGE.update(area=w * h, cells=0)
        _emit_log("Board set", board=PROGRESS["board"], blocks=PROGRESS["blocks"])

def set_calls(n: Any) -> None:
    try:
        i = int(n)
    except (TypeError, ValueError):
        i = 0
    with PROGRESS_LOCK:
        PROGRESS["calls"] = max(0, i)

def _record_coverage_locked(delta_blocks: int, delta_cells: int) -> None:
    placed = max(0, int(PROGRESS["placed"]) + delta_blocks)
    PROGRESS["placed"] = placed
    PROGRESS["moves"] += 1
    if placed > PROGRESS["best_placed"]:
        PROGRESS["best_placed"] = placed
    covered = max(0, _COVERAGE["cells"] + delta_cells)
    _COVERAGE["cells"] = covered
    if _COVERAGE["area"]:
        PROGRESS["percent"] = min(100.0, 100.0 * covered / _COVERAGE["area"])

def set_done(ok: Any = None, *, reason: Any = None, status: Any = None) -> None:
    """Mark the run complete.

    ``status`` wins when given; otherwise ``ok`` picks ``"Solved"`` or
    ``"Error"``.  A supplied ``reason`` is surfaced via the ``message`` field.
    """

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if status is not None:
            PROGRESS["status"] = str(status)
        elif ok is not None:
            PROGRESS["status"] = "Solved" if ok else "Error"
        if ok is not None:
            PROGRESS["ok"] = bool(ok)
        if reason is not None:
            PROGRESS["message"] = str(reason)
        PROGRESS["done"] = True
        _emit_log(
            "Run finished",
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            calls=PROGRESS.get("calls"),
            best_placed=PROGRESS.get("best_placed"),
            duration=_fmt_seconds(PROGRESS.get("elapsed")),
            message=PROGRESS.get("message"),
        )


class ProgressListener(SearchListener):
    """Feeds search events into the shared progress state."""

    def placed(self, w: int, h: int, col: int, row: int) -> None:
        with PROGRESS_LOCK:
            _record_coverage_locked(1, w * h)

    def cleared(self, w: int, h: int, col: int, row: int) -> None:
        with PROGRESS_LOCK:
            _record_coverage_locked(-1, -w * h)

    def finished(self, result: SearchResult) -> None:
        set_calls(result.calls)
        set_done(result.ok, reason=result.reason, status=result.status)


# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        return {
            "status": PROGRESS["status"],
            "board": PROGRESS["board"],
            "blocks": PROGRESS["blocks"],
            "placed": PROGRESS["placed"],
            "best_placed": PROGRESS["best_placed"],
            "calls": PROGRESS["calls"],
            "moves": PROGRESS["moves"],
            "percent": PROGRESS["percent"],
            "elapsed": PROGRESS["elapsed"],
            "elapsed_str": _fmt_elapsed(PROGRESS["elapsed"]),
            "message": PROGRESS["message"],
            "done": PROGRESS["done"],
            "ok": PROGRESS["ok"],
            "run_id": PROGRESS["run_id"],
        }

def as_json() -> Dict[str, Any]:
    return snapshot()
