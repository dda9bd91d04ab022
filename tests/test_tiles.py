from config import CFG
from models import Tile
from tiles import is_tile_key, parse_cell, parse_columns, parse_tiles


def test_parse_tiles_from_dict_entries():
    payload = {
        "tiles": [
            {"key": "a", "width": 2, "height": "1"},
            {"id": 7, "w": "1", "h": 3, "payload": {"title": "clock"}},
            {"key": "c"},
        ]
    }

    tiles, err = parse_tiles(payload)

    assert err is None
    assert tiles == [Tile("a", 2, 1), Tile(7, 1, 3), Tile("c", 1, 1)]
    assert tiles[1].payload == {"title": "clock"}


def test_parse_tiles_from_bare_list_of_sequences_and_keys():
    tiles, err = parse_tiles([["a", 2, 2], ["b", 1], "c"])
    assert err is None
    assert [(t.key, t.width, t.height) for t in tiles] == [("a", 2, 2), ("b", 1, 1), ("c", 1, 1)]


def test_parse_tiles_rejects_bad_sizes_and_duplicates():
    assert parse_tiles({"tiles": [{"key": "a", "w": 0}]})[1]
    assert parse_tiles({"tiles": [{"key": "a", "w": 1.5}]})[1]
    assert parse_tiles({"tiles": [{"key": "a", "h": "tall"}]})[1]
    tiles, err = parse_tiles({"tiles": ["a", "a"]})
    assert tiles == []
    assert "duplicate" in err


def test_parse_tiles_rejects_missing_keys_and_shapes():
    assert parse_tiles({"tiles": [{"w": 1}]})[1]
    assert parse_tiles({"tiles": [None]})[1]
    assert parse_tiles({"nope": 1}) == ([], "expected a list of tiles")


def test_parse_tiles_enforces_tile_cap(monkeypatch):
    monkeypatch.setattr(CFG, "MAX_TILES", 2, raising=False)
    tiles, err = parse_tiles(["a", "b", "c"])
    assert tiles == []
    assert "too many" in err


def test_parse_cell_accepts_common_shapes():
    assert parse_cell([1, 2]) == (1, 2)
    assert parse_cell(("3", "0")) == (3, 0)
    assert parse_cell("4, 5") == (4, 5)
    assert parse_cell({"row": 2, "col": 1}) == (2, 1)
    assert parse_cell({"r": "0", "c": "0"}) == (0, 0)
    assert parse_cell("-1,0") == (-1, 0)


def test_parse_cell_rejects_garbage():
    assert parse_cell(None) is None
    assert parse_cell("somewhere") is None
    assert parse_cell([1]) is None
    assert parse_cell({"row": 1}) is None
    assert parse_cell([1.5, 0]) is None


def test_parse_columns():
    assert parse_columns(None, default=4) == 4
    assert parse_columns("3") == 3
    assert parse_columns(0) is None
    assert parse_columns("x") is None


def test_non_finite_numbers_are_rejected():
    for bad in ("inf", "-inf", "nan", float("inf")):
        assert parse_columns(bad) is None
        assert parse_cell([bad, 0]) is None
        assert parse_cell({"row": 0, "col": bad}) is None
        tiles, err = parse_tiles([{"key": "a", "w": bad}])
        assert tiles == [] and err
        tiles, err = parse_tiles([["a", 1, bad]])
        assert tiles == [] and err


def test_tile_keys_must_be_scalars():
    assert is_tile_key("a") and is_tile_key(3)
    assert not is_tile_key(None)
    assert not is_tile_key(["a"])
    assert not is_tile_key({"k": 1})
    assert parse_tiles([{"key": ["a"]}])[1]
