from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, Tuple

Cell = Tuple[int, int]                 # (row, col)
Placement = Dict[Hashable, Cell]       # tile key -> top-left cell


@dataclass(frozen=True)
class Tile:
    key: Hashable
    width: int = 1     # cross-axis cells
    height: int = 1    # main-axis cells
    payload: Any = field(default=None, compare=False)

    def __post_init__(self):
        for name in ("width", "height"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v < 1:
                raise ValueError(f"tile {self.key!r}: {name} must be a positive integer, got {v!r}")

    def cells_at(self, row: int, col: int) -> Iterator[Cell]:
        for r in range(row, row + self.height):
            for c in range(col, col + self.width):
                yield (r, c)


@dataclass(frozen=True)
class Move:
    old_index: int
    new_index: int

    def as_dict(self):
        return {"old_index": self.old_index, "new_index": self.new_index}
