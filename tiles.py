# tiles.py — tolerant tile / cell payload parser
from __future__ import annotations
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from config import CFG
from models import Cell, Tile

_CELL_RE = re.compile(r"^\s*(?P<r>-?\d+)\s*[,;:xX ]\s*(?P<c>-?\d+)\s*$")


def _to_int(x: Any) -> Optional[int]:
    if isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f) or f != int(f):
        return None
    return int(f)


def is_tile_key(value: Any) -> bool:
    """Keys arrive from JSON; only scalars can be hashed and compared."""
    return value is not None and not isinstance(value, (dict, list))


def _first(d: Dict[str, Any], *names: str) -> Any:
    for n in names:
        if n in d and d[n] is not None:
            return d[n]
    return None


def _tile_items(payload: Any) -> Optional[List[Any]]:
    if isinstance(payload, dict) and isinstance(payload.get("tiles"), list):
        return payload["tiles"]
    if isinstance(payload, (list, tuple)):
        return list(payload)
    return None


def _parse_one(item: Any, index: int) -> Tuple[Optional[Tile], Optional[str]]:
    payload = None
    if isinstance(item, dict):
        key = _first(item, "key", "id", "name")
        w_raw = _first(item, "width", "w", "cross_axis_cells")
        h_raw = _first(item, "height", "h", "main_axis_cells")
        payload = item.get("payload")
    elif isinstance(item, (list, tuple)) and item:
        key = item[0]
        w_raw = item[1] if len(item) > 1 else None
        h_raw = item[2] if len(item) > 2 else None
    elif isinstance(item, (str, int)) and not isinstance(item, bool):
        key, w_raw, h_raw = item, None, None
    else:
        return None, f"tile #{index}: unsupported entry {item!r}"

    if not is_tile_key(key):
        return None, f"tile #{index}: missing key"

    w = 1 if w_raw is None else _to_int(w_raw)
    h = 1 if h_raw is None else _to_int(h_raw)
    if w is None or w < 1 or h is None or h < 1:
        return None, f"tile {key!r}: size must be positive integers (got {w_raw!r}×{h_raw!r})"

    return Tile(key, w, h, payload), None


def parse_tiles(payload: Any) -> Tuple[List[Tile], Optional[str]]:
    """
    Return (tiles, error_message_or_None).

    Accepts ``{"tiles": [...]}`` or a bare list.  Each entry may be a dict
    (``key``/``id``, ``width``/``w``, ``height``/``h``, optional ``payload``),
    a ``[key, width, height]`` sequence, or a bare key for a 1×1 tile.
    """
    items = _tile_items(payload)
    if items is None:
        return [], "expected a list of tiles"
    if len(items) > CFG.MAX_TILES:
        return [], f"too many tiles ({len(items)} > {CFG.MAX_TILES})"

    tiles: List[Tile] = []
    seen = set()
    for i, item in enumerate(items):
        tile, err = _parse_one(item, i)
        if err:
            return [], err
        if tile.key in seen:
            return [], f"duplicate tile key {tile.key!r}"
        seen.add(tile.key)
        tiles.append(tile)
    return tiles, None


def parse_cell(value: Any) -> Optional[Cell]:
    """Accept [r, c], "r,c" or {"row": r, "col": c}."""
    if isinstance(value, dict):
        r = _to_int(_first(value, "row", "r"))
        c = _to_int(_first(value, "col", "column", "c"))
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        r, c = _to_int(value[0]), _to_int(value[1])
    elif isinstance(value, str):
        m = _CELL_RE.match(value)
        if not m:
            return None
        r, c = int(m.group("r")), int(m.group("c"))
    else:
        return None
    if r is None or c is None:
        return None
    return (r, c)


def parse_columns(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return default
    n = _to_int(value)
    if n is None or n < 1:
        return None
    return n


__all__ = ["is_tile_key", "parse_tiles", "parse_cell", "parse_columns"]
