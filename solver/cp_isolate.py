# solver/cp_isolate.py
import multiprocessing as mp
import queue
from typing import List, Optional, Tuple
import traceback

from models import Placement


# Worker must be top-level (picklable on Windows spawn)
def _solve_worker(q, width: int, height: int, blocks, max_seconds: float):
    try:
        from solver.cp_sat import cp_sat_exact_cover  # import inside child
        ok, placed, reason = cp_sat_exact_cover(width, height, blocks, max_seconds)
        q.put(("ok", ok, placed, reason))
    except MemoryError:
        q.put(("err", False, [], "Child ran out of memory"))
    except Exception as e:
        q.put(("exc", False, [], f"{e}\n{traceback.format_exc()}"))


def run_cp_sat_isolated(
    width: int,
    height: int,
    blocks,
    max_seconds: float,
) -> Tuple[bool, List[Placement], Optional[str], Optional[str]]:
    """
    Returns (ok, placed, reason, crash_note).
    crash_note is non-empty only if the child crashed/was killed/timed out.
    """
    ctx = mp.get_context("spawn")  # safest on Windows
    q = ctx.Queue()
    blocks = [(b.w, b.h) if hasattr(b, "w") else tuple(b) for b in blocks]
    p = ctx.Process(target=_solve_worker, args=(q, int(width), int(height), blocks, float(max_seconds)))
    p.daemon = True
    p.start()

    # Allow a small buffer beyond model time for start-up and teardown
    timeout = float(max_seconds) + 10.0
    try:
        tag, ok, placed, reason = q.get(timeout=timeout)
    except queue.Empty:
        tag = None
    p.join(2.0)

    if tag is None:
        if p.is_alive():
            p.terminate()
            p.join(2.0)
            return False, [], "Stopped before solution (timebox)", "killed: timeout"
        if p.exitcode not in (0, None):
            return False, [], f"Stopped before solution (child exit {p.exitcode})", "child crashed"
        return False, [], "No result from child process", "no-result"

    if tag == "ok":
        return ok, placed, reason, None
    return False, [], reason, None
