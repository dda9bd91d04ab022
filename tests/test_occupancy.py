from itertools import islice

from solver.occupancy import OccupancyGrid


def test_fits_rejects_negative_origin_and_column_overflow():
    grid = OccupancyGrid(3)
    assert not grid.fits(-1, 0, 1, 1)
    assert not grid.fits(0, -1, 1, 1)
    assert not grid.fits(0, 2, 2, 1)
    assert grid.fits(0, 1, 2, 1)


def test_rows_are_unbounded():
    grid = OccupancyGrid(2)
    assert grid.fits(10_000, 0, 2, 5)


def test_place_marks_rectangle_and_grows_rows():
    grid = OccupancyGrid(4)
    assert grid.rows == 0

    grid.place(1, 1, 2, 3)

    assert grid.rows == 4
    assert len(grid) == 6
    assert grid.is_used(1, 1) and grid.is_used(3, 2)
    assert not grid.is_used(0, 1)
    assert not grid.fits(2, 0, 2, 1)
    assert grid.fits(0, 0, 4, 1)
    assert grid.fits(1, 3, 1, 3)


def test_rows_never_shrink():
    grid = OccupancyGrid(2)
    grid.place(5, 0, 1, 1)
    grid.place(0, 1, 1, 1)
    assert grid.rows == 6


def test_scan_is_row_major_and_inclusive():
    grid = OccupancyGrid(2)
    assert list(grid.scan(1)) == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_scan_restarts_from_origin():
    grid = OccupancyGrid(3)
    first = list(islice(grid.scan(5), 4))
    second = list(islice(grid.scan(5), 2))
    assert first[-1] == (1, 0)
    assert second == [(0, 0), (0, 1)]
