from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

from config import CFG

# ------------------------------
# Thread-safe pack counters
# ------------------------------

STATS_LOCK = threading.Lock()


_HANDLER_TAG = "reorder_grid_pack_file"


def _log_file_path(configured: str) -> Path:
    path = Path(configured)
    if path.is_absolute():
        return path
    return Path(__file__).resolve().parent / path


def configure_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """
    (Re)attach the pack event file handler.

    ``log_file``/``level`` default to CFG.LOG_FILE / CFG.LOG_LEVEL.  An empty
    path detaches the handler and leaves the logger silent.
    """
    logger = logging.getLogger("reorder_grid.pack_log")
    for h in [h for h in logger.handlers if getattr(h, "name", None) == _HANDLER_TAG]:
        logger.removeHandler(h)
        h.close()

    logger.setLevel(getattr(logging, (level or CFG.LOG_LEVEL or "INFO").upper(), logging.INFO))
    logger.propagate = False

    target = CFG.LOG_FILE if log_file is None else log_file
    if not target:
        return logger

    log_path = _log_file_path(target)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # An unwritable log directory only disables the file log.
        return logger
    handler.name = _HANDLER_TAG
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger


PACK_LOGGER = configure_logging()


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    return f"{float(seconds) * 1000.0:.2f}ms"


def _emit_log(event: str, level: int = logging.INFO, **fields: Any) -> None:
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    if extras:
        PACK_LOGGER.log(level, "%s | %s", event, " ".join(extras))
    else:
        PACK_LOGGER.log(level, "%s", event)


def _blank_stats() -> Dict[str, Any]:
    return {
        "packs": 0,               # packing calls made
        "ok": 0,                  # calls that produced a placement
        "failed": 0,
        "failures": {},           # reason -> count
        "moves": 0,               # committed reorders
        "last_reason": "",
        "last_elapsed": 0.0,      # seconds
        "run_id": 0,
    }


STATS: Dict[str, Any] = _blank_stats()


def reset() -> None:
    with STATS_LOCK:
        run_id = int(STATS.get("run_id", 0)) + 1
        STATS.clear()
        STATS.update(_blank_stats())
        STATS["run_id"] = run_id
    _emit_log("Stats reset", run_id=run_id)


def record_pack(
    ok: bool,
    *,
    reason: Optional[str] = None,
    tiles: int = 0,
    columns: int = 0,
    pins: int = 0,
    elapsed: Optional[float] = None,
) -> None:
    with STATS_LOCK:
        STATS["packs"] += 1
        if ok:
            STATS["ok"] += 1
            STATS["last_reason"] = ""
        else:
            STATS["failed"] += 1
            failures = STATS["failures"]
            failures[reason or "unknown"] = failures.get(reason or "unknown", 0) + 1
            STATS["last_reason"] = reason or "unknown"
        if elapsed is not None:
            STATS["last_elapsed"] = float(elapsed)
    _emit_log(
        "Pack finished" if ok else "Pack failed",
        tiles=tiles,
        columns=columns,
        pins=pins,
        reason=None if ok else reason,
        duration=_fmt_seconds(elapsed),
    )


def record_defect(message: str, **fields: Any) -> None:
    """Log an invariant violation inside the packer.  These are bugs, not user errors."""
    _emit_log(f"Defect: {message}", level=logging.ERROR, **fields)


def record_move(old_index: int, new_index: int, key: Any = None) -> None:
    with STATS_LOCK:
        STATS["moves"] += 1
    _emit_log("Reorder committed", key=key, old=old_index, new=new_index)


def snapshot() -> Dict[str, Any]:
    with STATS_LOCK:
        snap = dict(STATS)
        snap["failures"] = dict(STATS["failures"])
    return snap


def now() -> float:
    return time.perf_counter()


__all__ = [
    "PACK_LOGGER",
    "configure_logging",
    "reset",
    "record_pack",
    "record_defect",
    "record_move",
    "snapshot",
    "now",
]
