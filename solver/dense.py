# solver/dense.py
"""
First-fit dense packer for a fixed-width grid.

Pinned tiles are placed first, exactly where requested.  Every other tile is
then placed at the first free row-major cell, visiting tiles in the order of
their previous placement so that repeated packs keep tiles visually stable.

Every failure is reported as ``(False, {}, reason)``; callers never receive a
partial placement.
"""
from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

import pack_log
from config import CFG
from models import Cell, Placement, Tile
from solver.occupancy import OccupancyGrid

STRUCTURAL_INFEASIBILITY = "structural_infeasibility"
PIN_CONFLICT = "pin_conflict"
ROW_LIMIT_EXHAUSTION = "row_limit_exhaustion"

PackResult = Tuple[bool, Placement, Optional[str]]

# ---------------- helpers ----------------

def _index_tiles(tiles: Sequence[Tile]) -> Dict[Hashable, Tile]:
    by_key: Dict[Hashable, Tile] = {}
    for t in tiles:
        if t.key in by_key:
            raise ValueError(f"duplicate tile key {t.key!r}")
        by_key[t.key] = t
    return by_key


def _as_cell(value) -> Cell:
    r, c = value
    return (int(r), int(c))


def min_columns(tiles: Iterable[Tile]) -> int:
    """Narrowest grid that can hold the widest tile (1 for no tiles)."""
    return max((t.width for t in tiles), default=1)


def search_row_limit(tiles: Sequence[Tile], columns: int, pinned: Optional[Mapping[Hashable, Cell]] = None) -> int:
    """
    Last row the first-fit scan may visit.

    A tile always fits at (grid.rows, 0), and grid.rows never exceeds the
    lowest pinned edge plus the heights of tiles auto-placed before it, so
    ``pinned_bottom + sum(unpinned heights)`` always reaches a free slot.  The
    area bound is kept as a floor and CFG.ROW_LIMIT_MARGIN is added on top.
    """
    pinned = pinned or {}
    area = sum(t.width * t.height for t in tiles)
    dense_rows = -(-area // columns) if columns > 0 else 0

    pinned_bottom = 0
    free_height = 0
    for t in tiles:
        cell = pinned.get(t.key)
        if cell is None:
            free_height += t.height
        else:
            pinned_bottom = max(pinned_bottom, int(cell[0]) + t.height)

    return max(dense_rows, pinned_bottom + free_height) + max(0, int(CFG.ROW_LIMIT_MARGIN))


def _first_fit(grid: OccupancyGrid, tile: Tile, row_limit: int) -> Optional[Cell]:
    for r, c in grid.scan(row_limit):
        if grid.fits(r, c, tile.width, tile.height):
            return (r, c)
    return None


def _pack(
    tiles: List[Tile],
    by_key: Dict[Hashable, Tile],
    columns: int,
    pins: Mapping[Hashable, Cell],
    previous: Mapping[Hashable, Cell],
    row_limit: Optional[int],
) -> PackResult:
    if columns < min_columns(tiles):
        return False, {}, STRUCTURAL_INFEASIBILITY

    grid = OccupancyGrid(columns)
    placement: Placement = {}
    limit = search_row_limit(tiles, columns, pins) if row_limit is None else int(row_limit)

    # Pins are hard constraints, placed in the caller's order.
    for key, cell in pins.items():
        tile = by_key.get(key)
        if tile is None:
            continue
        r, c = _as_cell(cell)
        if not grid.fits(r, c, tile.width, tile.height):
            return False, {}, PIN_CONFLICT
        grid.place(r, c, tile.width, tile.height)
        placement[key] = (r, c)

    # Stable sort: tiles with no previous cell sort as (0, 0) in list order.
    others = sorted(
        (t for t in tiles if t.key not in placement),
        key=lambda t: _as_cell(previous.get(t.key, (0, 0))),
    )

    for tile in others:
        pos = _first_fit(grid, tile, limit)
        if pos is None:
            pack_log.record_defect(
                "row limit exhausted",
                key=tile.key,
                columns=columns,
                row_limit=limit,
                tiles=len(tiles),
            )
            return False, {}, ROW_LIMIT_EXHAUSTION
        grid.place(pos[0], pos[1], tile.width, tile.height)
        placement[tile.key] = pos

    return True, placement, None


def try_pack_dense(
    tiles: Iterable[Tile],
    columns: int,
    pins: Optional[Mapping[Hashable, Cell]] = None,
    previous: Optional[Mapping[Hashable, Cell]] = None,
    *,
    row_limit: Optional[int] = None,
) -> PackResult:
    """
    Pack ``tiles`` into a grid ``columns`` wide.

    Returns:
        (ok, placement, reason).  ``placement`` maps tile key to its top-left
        (row, col) and is empty on failure; ``reason`` is one of
        STRUCTURAL_INFEASIBILITY, PIN_CONFLICT or ROW_LIMIT_EXHAUSTION.
    """
    t0 = pack_log.now()
    tiles = list(tiles)
    by_key = _index_tiles(tiles)
    pins = dict(pins or {})

    ok, placement, reason = _pack(tiles, by_key, int(columns), pins, previous or {}, row_limit)

    pack_log.record_pack(
        ok,
        reason=reason,
        tiles=len(tiles),
        columns=int(columns),
        pins=len(pins),
        elapsed=pack_log.now() - t0,
    )
    return ok, placement, reason


def layout_dense(
    tiles: Iterable[Tile],
    columns: int,
    pins: Optional[Mapping[Hashable, Cell]] = None,
    previous: Optional[Mapping[Hashable, Cell]] = None,
) -> Optional[Placement]:
    ok, placement, _reason = try_pack_dense(tiles, columns, pins, previous)
    return placement if ok else None


def grid_rows(tiles: Iterable[Tile], placement: Mapping[Hashable, Cell]) -> int:
    """Rows spanned by ``placement`` (0 when nothing is placed)."""
    rows = 0
    for t in tiles:
        cell = placement.get(t.key)
        if cell is not None:
            rows = max(rows, int(cell[0]) + t.height)
    return rows


def check_placement(tiles: Iterable[Tile], placement: Mapping[Hashable, Cell], columns: int) -> Tuple[bool, Optional[str]]:
    """Re-verify bounds and no-overlap for a finished placement."""
    owner: Dict[Cell, Hashable] = {}
    for t in tiles:
        if t.key not in placement:
            return False, f"tile {t.key!r} not placed"
        r, c = _as_cell(placement[t.key])
        if r < 0 or c < 0 or c + t.width > columns:
            return False, f"tile {t.key!r} out of bounds at ({r},{c})"
        for cell in t.cells_at(r, c):
            if cell in owner:
                return False, f"tiles {owner[cell]!r} and {t.key!r} overlap at {cell}"
            owner[cell] = t.key
    return True, None


__all__ = [
    "STRUCTURAL_INFEASIBILITY",
    "PIN_CONFLICT",
    "ROW_LIMIT_EXHAUSTION",
    "min_columns",
    "search_row_limit",
    "try_pack_dense",
    "layout_dense",
    "grid_rows",
    "check_placement",
]
