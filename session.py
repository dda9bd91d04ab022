# session.py — per-grid reorder state machine
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

import pack_log
from config import CFG
from models import Cell, Move, Placement, Tile
from solver.dense import grid_rows, try_pack_dense
from solver.reorder import apply_move, derive_move

ReorderCallback = Callable[[int, int], None]


class GridSession:
    """
    Holds the canonical tile order for one grid and drives the drag lifecycle.

    ``placement`` is always the last good rest-state layout; a failed repack
    leaves it untouched and records the failure reason in ``error``.
    """

    def __init__(
        self,
        columns: Optional[int] = None,
        tiles: Iterable[Tile] = (),
        *,
        enable_reorder: Optional[bool] = None,
        on_reorder: Optional[ReorderCallback] = None,
    ):
        self._lock = threading.RLock()
        self.columns = int(columns if columns is not None else CFG.DEFAULT_COLUMNS)
        if self.columns < 1:
            raise ValueError(f"columns must be >= 1, got {self.columns}")
        self.enable_reorder = CFG.ENABLE_REORDER if enable_reorder is None else bool(enable_reorder)
        self.on_reorder = on_reorder

        self.tiles: List[Tile] = []
        self.placement: Placement = {}
        self.error: Optional[str] = None

        self.dragging: Optional[Hashable] = None
        self.preview: Optional[Placement] = None
        self.last_move: Optional[Move] = None
        self.last_drop_ok: Optional[bool] = None   # outcome of the last commit

        tiles = list(tiles)
        if tiles:
            self.set_tiles(tiles)

    # ---------- canonical list ----------

    @property
    def order(self) -> List[Hashable]:
        return [t.key for t in self.tiles]

    def tile(self, key: Hashable) -> Optional[Tile]:
        for t in self.tiles:
            if t.key == key:
                return t
        return None

    def _layout_unchanged(self, columns: int, tiles: List[Tile]) -> bool:
        # Tile equality ignores payload, so this compares keys and sizes only.
        return (
            columns == self.columns
            and tiles == self.tiles
            and self.error is None
            and set(self.placement) == {t.key for t in tiles}
        )

    def configure(self, columns: Optional[int] = None, tiles: Optional[Iterable[Tile]] = None) -> bool:
        """
        Swap the column count and/or tile list together and reflow once.

        Payload-only changes are stored without a repack.  Returns True when
        the layout was recomputed.
        """
        columns = self.columns if columns is None else int(columns)
        if columns < 1:
            raise ValueError(f"columns must be >= 1, got {columns}")
        with self._lock:
            tiles = list(self.tiles if tiles is None else tiles)
            keys = [t.key for t in tiles]
            if len(set(keys)) != len(keys):
                raise ValueError("tile keys must be unique")

            unchanged = self._layout_unchanged(columns, tiles)
            self.tiles = tiles
            if unchanged:
                return False
            self.columns = columns
            self._end_drag()
            self.reflow()
            return True

    def set_tiles(self, tiles: Iterable[Tile]) -> bool:
        """Replace the canonical list.  Returns False when the layout is unchanged."""
        return self.configure(tiles=tiles)

    def set_columns(self, columns: int) -> bool:
        return self.configure(columns=columns)

    def reflow(self) -> bool:
        """Rest-state repack with no pins, in canonical order."""
        with self._lock:
            ok, placement, reason = try_pack_dense(self.tiles, self.columns)
            if ok:
                self.placement = placement
                self.error = None
            else:
                self.error = reason
            return ok

    # ---------- drag lifecycle ----------

    def drag_start(self, key: Hashable) -> bool:
        with self._lock:
            if not self.enable_reorder or self.tile(key) is None:
                return False
            self.dragging = key
            self.preview = None
            return True

    def _pack_pinned(self, cell: Cell) -> Optional[Placement]:
        ok, placement, _reason = try_pack_dense(
            self.tiles,
            self.columns,
            pins={self.dragging: (int(cell[0]), int(cell[1]))},
            previous=self.placement,
        )
        return placement if ok else None

    def drag_candidate(self, cell: Cell) -> Optional[Placement]:
        """Preview the layout with the dragged tile pinned at ``cell``."""
        with self._lock:
            if self.dragging is None:
                return None
            self.preview = self._pack_pinned(cell)
            return self.preview

    def drag_commit(self, cell: Cell) -> Optional[Move]:
        with self._lock:
            key = self.dragging
            if key is None:
                self.last_drop_ok = False
                return None
            placement = self._pack_pinned(cell)
            self._end_drag()
            self.last_drop_ok = placement is not None
            if placement is None:
                return None

            move = derive_move(self.order, placement, key)
            if move is None:
                return None

            self.tiles = apply_move(self.tiles, move)
            self.last_move = move
            pack_log.record_move(move.old_index, move.new_index, key=key)
            if self.on_reorder is not None:
                self.on_reorder(move.old_index, move.new_index)
            self.reflow()
            return move

    def drag_cancel(self) -> None:
        with self._lock:
            self._end_drag()

    def _end_drag(self) -> None:
        self.dragging = None
        self.preview = None

    def tile_target(self, key: Hashable) -> Optional[Cell]:
        """Dropping onto another tile targets that tile's current cell."""
        with self._lock:
            if key == self.dragging:
                return None
            return self.placement.get(key)

    # ---------- geometry ----------

    @property
    def rows(self) -> int:
        return grid_rows(self.tiles, self.placement)

    def drop_cells(self) -> List[Cell]:
        if not self.enable_reorder:
            return []
        return [(r, c) for r in range(self.rows) for c in range(self.columns)]

    def placement_rows(self, placement: Optional[Placement] = None) -> List[Dict[str, Any]]:
        """Serialise a placement in canonical order."""
        placement = self.placement if placement is None else placement
        out = []
        for t in self.tiles:
            cell = placement.get(t.key)
            if cell is None:
                continue
            out.append({"key": t.key, "row": cell[0], "col": cell[1], "width": t.width, "height": t.height})
        return out

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "columns": self.columns,
                "rows": self.rows,
                "order": self.order,
                "placement": self.placement_rows(),
                "error": self.error or "",
                "dragging": self.dragging,
                "preview": None if self.preview is None else self.placement_rows(self.preview),
                "enable_reorder": self.enable_reorder,
                "last_move": None if self.last_move is None else self.last_move.as_dict(),
                "last_drop_ok": self.last_drop_ok,
            }
