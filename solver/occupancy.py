# solver/occupancy.py
from typing import Iterator, Set

from models import Cell


class OccupancyGrid:
    """
    Sparse set of occupied unit cells for one packing computation.

    Columns are fixed; rows are unbounded and ``rows`` tracks one past the
    lowest occupied row.  A fresh grid is built for every packing call.
    """

    def __init__(self, columns: int):
        self.columns = int(columns)
        self.rows = 0
        self._used: Set[Cell] = set()

    def __len__(self) -> int:
        return len(self._used)

    def is_used(self, row: int, col: int) -> bool:
        return (row, col) in self._used

    def fits(self, row: int, col: int, w: int, h: int) -> bool:
        if row < 0 or col < 0 or col + w > self.columns:
            return False
        for r in range(row, row + h):
            for c in range(col, col + w):
                if (r, c) in self._used:
                    return False
        return True

    def place(self, row: int, col: int, w: int, h: int) -> None:
        # Caller has already checked fits() for the same rectangle.
        self.rows = max(self.rows, row + h)
        for r in range(row, row + h):
            for c in range(col, col + w):
                self._used.add((r, c))

    def scan(self, row_limit: int) -> Iterator[Cell]:
        """Yield (row, col) in row-major order for rows 0..row_limit inclusive."""
        for r in range(row_limit + 1):
            for c in range(self.columns):
                yield (r, c)
