import pytest

from models import Move, Tile
from solver.dense import layout_dense
from solver.reorder import PlacementCollision, apply_move, derive_move, row_major_keys


def test_row_major_keys_sort_by_row_then_column():
    placement = {"A": (1, 0), "B": (0, 2), "C": (0, 0), "D": (1, 1)}
    assert row_major_keys(placement) == ["C", "B", "A", "D"]


def test_shared_anchor_is_a_collision():
    with pytest.raises(PlacementCollision):
        row_major_keys({"A": (0, 0), "B": (0, 0)})


def test_single_move_example():
    tiles = [Tile(k) for k in "ABC"]
    rest = layout_dense(tiles, 3)
    placement = layout_dense(tiles, 3, pins={"A": (0, 2)}, previous=rest)

    assert row_major_keys(placement) == ["B", "C", "A"]
    assert derive_move(["A", "B", "C"], placement, "A") == Move(0, 2)


def test_pin_to_last_cell_of_two_column_grid():
    tiles = [Tile(k) for k in "ABCD"]
    rest = layout_dense(tiles, 2)
    placement = layout_dense(tiles, 2, pins={"A": (1, 1)}, previous=rest)

    assert derive_move(list("ABCD"), placement, "A") == Move(0, 3)


def test_no_move_when_rank_is_unchanged():
    tiles = [Tile(k) for k in "ABC"]
    rest = layout_dense(tiles, 3)
    placement = layout_dense(tiles, 3, pins={"B": (0, 1)}, previous=rest)
    assert derive_move(list("ABC"), placement, "B") is None


def test_unknown_drag_key_reports_nothing():
    placement = {"A": (0, 0), "B": (0, 1)}
    assert derive_move(["A", "B"], placement, "Z") is None
    assert derive_move(["A", "B", "Z"], placement, "Z") is None


def test_apply_move_matches_row_major_order():
    assert apply_move(["A", "B", "C"], Move(0, 2)) == ["B", "C", "A"]
    assert apply_move(["A", "B", "C"], Move(2, 0)) == ["C", "A", "B"]
    assert apply_move(["A", "B", "C", "D"], Move(1, 2)) == ["A", "C", "B", "D"]


def test_apply_move_leaves_input_untouched():
    items = ["A", "B"]
    apply_move(items, Move(0, 1))
    assert items == ["A", "B"]
