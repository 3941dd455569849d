# solver/cp_sat.py
"""Independent exact-cover model of the same puzzle, solved with CP-SAT.

The backtracking engine is the solver; this model only answers "does a tiling
exist?" so the CLI and the tests can confirm an ``Exhausted`` verdict or a
found tiling against a second method.
"""
import logging
import time
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model as _cp

from config import CFG
from models import Block, Cell, Placement
from solver.pre_flight import BlockLike, as_blocks, check_puzzle

log = logging.getLogger(__name__)

Option = Tuple[int, int, int, int]  # (w, h, col, row)


def _options_for(width: int, height: int, block: Block) -> List[Option]:
    short, long_ = sorted((block.w, block.h))
    dims = [(short, long_)]
    if short != long_:
        dims.append((long_, short))
    out: List[Option] = []
    for w, h in dims:
        if w > width or h > height:
            continue
        for row in range(height - h + 1):
            for col in range(width - w + 1):
                out.append((w, h, col, row))
    return out


def cp_sat_exact_cover(
    width: int,
    height: int,
    blocks: Iterable[BlockLike],
    max_seconds: Optional[float] = None,
) -> Tuple[bool, List[Placement], Optional[str]]:
    """Return ``(ok, placements, reason)`` for an exact tiling found by CP-SAT."""

    block_list = as_blocks(blocks)
    pre = check_puzzle(int(width), int(height), block_list)
    if not pre.ok:
        return False, [], pre.reason

    seconds = float(max_seconds if max_seconds is not None else CFG.CROSS_CHECK_SECONDS)
    t0 = time.time()

    m = _cp.CpModel()
    options: List[List[Option]] = [_options_for(width, height, b) for b in block_list]
    p: List[List] = []
    for i, opts in enumerate(options):
        if not opts:
            return False, [], f"block {i + 1} fits nowhere on the board"
        p.append([m.new_bool_var(f"p_{i}_{k}") for k in range(len(opts))])
        m.add_exactly_one(p[i])

    # identical shapes share one option list: order them to break symmetry
    by_shape: Dict[Tuple[int, int], List[int]] = defaultdict(list)
    for i, b in enumerate(block_list):
        by_shape[tuple(sorted((b.w, b.h)))].append(i)
    for idxs in by_shape.values():
        if len(idxs) < 2:
            continue
        place_idx = {}
        for i in idxs:
            idx = m.new_int_var(0, max(0, len(options[i]) - 1), f"idx_{i}")
            m.add(idx == sum(k * p[i][k] for k in range(len(options[i]))))
            place_idx[i] = idx
        for a, b in zip(idxs, idxs[1:]):
            m.add(place_idx[a] < place_idx[b])

    cell_to_vars: Dict[Tuple[int, int], List] = defaultdict(list)
    for i, opts in enumerate(options):
        for k, (w, h, col, row) in enumerate(opts):
            for dy in range(h):
                for dx in range(w):
                    cell_to_vars[(col + dx, row + dy)].append(p[i][k])

    for row in range(height):
        for col in range(width):
            vars_here = cell_to_vars.get((col, row))
            if not vars_here:
                return False, [], f"cell ({col}, {row}) cannot be covered by any block"
            m.add_exactly_one(vars_here)

    solver = _cp.CpSolver()
    solver.parameters.max_time_in_seconds = max(0.1, seconds)
    solver.parameters.num_workers = 1
    status = solver.solve(m)
    log.debug("cp-sat status=%s in %.3fs", solver.status_name(status), time.time() - t0)

    if status in (_cp.OPTIMAL, _cp.FEASIBLE):
        placements: List[Placement] = []
        for i, opts in enumerate(options):
            for k, (w, h, col, row) in enumerate(opts):
                if solver.boolean_value(p[i][k]):
                    placements.append(Placement(i, w, h, Cell(col, row)))
                    break
        placements.sort(key=lambda pl: (pl.row, pl.col))
        return True, placements, None
    if status == _cp.INFEASIBLE:
        return False, [], "Proven infeasible"
    if status == _cp.MODEL_INVALID:
        return False, [], "CP-SAT model invalid"
    return False, [], "Stopped before solution (timebox)"


def placements_tile_board(width: int, height: int, placements: Sequence[Placement]) -> bool:
    """True when ``placements`` cover every cell of the board exactly once."""

    seen = [[False] * width for _ in range(height)]
    for pl in placements:
        if pl.col < 0 or pl.row < 0 or pl.col + pl.w > width or pl.row + pl.h > height:
            return False
        for r in range(pl.row, pl.row + pl.h):
            for c in range(pl.col, pl.col + pl.w):
                if seen[r][c]:
                    return False
                seen[r][c] = True
    return all(all(row) for row in seen)


__all__ = ["cp_sat_exact_cover", "placements_tile_board"]
