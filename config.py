# config.py
import os

# ======= Puzzle limits =======
MAX_SIZE = int(os.getenv("BP_MAX_SIZE", "99"))

# ======= Search heuristics =======
# Catalogs longer than this are sorted largest-area first before searching.
SORT_THRESHOLD = int(os.getenv("BP_SORT_THRESHOLD", "8"))

# ======= Cooperative search guards (0 disables) =======
NODE_LIMIT  = int(os.getenv("BP_NODE_LIMIT", "0"))
MAX_SECONDS = float(os.getenv("BP_MAX_SECONDS", "0"))

# ======= CP-SAT cross-check =======
CROSS_CHECK_SECONDS = float(os.getenv("BP_CROSS_CHECK_SECONDS", "30"))

# ======= Output names =======
COORDS_OUT  = os.getenv("BP_COORDS_OUT", "coords.txt")
LAYOUT_HTML = os.getenv("BP_LAYOUT_HTML", "layout_view.html")
LOG_FILE    = os.getenv("BP_LOG_FILE", "")

# ======= Reporting =======
PRINT_FINAL = int(os.getenv("BP_PRINT_FINAL", "1")) != 0


class CFG:
    MAX_SIZE = MAX_SIZE

    SORT_THRESHOLD = SORT_THRESHOLD

    NODE_LIMIT  = NODE_LIMIT
    MAX_SECONDS = MAX_SECONDS

    CROSS_CHECK_SECONDS = CROSS_CHECK_SECONDS

    COORDS_OUT  = COORDS_OUT
    LAYOUT_HTML = LAYOUT_HTML
    LOG_FILE    = LOG_FILE

    PRINT_FINAL = PRINT_FINAL


__all__ = ["CFG", "MAX_SIZE"]
