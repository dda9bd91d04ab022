# solver/reorder.py
from typing import Hashable, List, Mapping, Optional, Sequence, TypeVar

from models import Cell, Move

T = TypeVar("T")


class PlacementCollision(ValueError):
    """Two tiles share a top-left cell; the placement is corrupt."""


def row_major_keys(placement: Mapping[Hashable, Cell]) -> List[Hashable]:
    """Keys ordered by (row, col).  The placement order itself never breaks a tie."""
    seen = {}
    for key, cell in placement.items():
        cell = (int(cell[0]), int(cell[1]))
        if cell in seen:
            raise PlacementCollision(f"tiles {seen[cell]!r} and {key!r} both anchored at {cell}")
        seen[cell] = key
    return [seen[cell] for cell in sorted(seen)]


def derive_move(order: Sequence[Hashable], placement: Mapping[Hashable, Cell], dragged_key: Hashable) -> Optional[Move]:
    """
    Map a pinned placement back onto the canonical list.

    The dragged tile's new index is its rank in row-major order.  Returns
    None when the key is unknown or the index does not change.
    """
    try:
        old_index = list(order).index(dragged_key)
    except ValueError:
        return None
    if dragged_key not in placement:
        return None

    new_index = row_major_keys(placement).index(dragged_key)
    if new_index == old_index:
        return None
    return Move(old_index, new_index)


def apply_move(items: Sequence[T], move: Move) -> List[T]:
    """Remove the item at old_index and reinsert it at new_index."""
    out = list(items)
    item = out.pop(move.old_index)
    out.insert(move.new_index, item)
    return out
