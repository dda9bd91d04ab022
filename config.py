# config.py
import os

# ======= Grid defaults =======
DEFAULT_COLUMNS = int(os.getenv("RG_DEFAULT_COLUMNS", "4"))
ENABLE_REORDER  = int(os.getenv("RG_ENABLE_REORDER", "1")) != 0

# ======= Packer search bound =======
# Extra rows scanned past the analytic bound in solver/dense.py.  The bound
# alone is sufficient; the margin only widens the scan.
ROW_LIMIT_MARGIN = int(os.getenv("RG_ROW_LIMIT_MARGIN", "1"))

# ======= Request guards =======
MAX_TILES = int(os.getenv("RG_MAX_TILES", "500"))

# ======= Logging =======
# An empty RG_LOG_FILE turns the pack event log off.
LOG_FILE  = os.getenv("RG_LOG_FILE", os.path.join("logs", "pack_events.log"))
LOG_LEVEL = os.getenv("RG_LOG_LEVEL", "INFO").upper()


class CFG:
    DEFAULT_COLUMNS = DEFAULT_COLUMNS
    ENABLE_REORDER  = ENABLE_REORDER

    ROW_LIMIT_MARGIN = ROW_LIMIT_MARGIN

    MAX_TILES = MAX_TILES

    LOG_FILE  = LOG_FILE
    LOG_LEVEL = LOG_LEVEL
