# app.py — JSON surface over one reorderable grid
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

import pack_log
from config import CFG
from models import Cell
from session import GridSession
from tiles import is_tile_key, parse_cell, parse_columns, parse_tiles

SESSION = GridSession(CFG.DEFAULT_COLUMNS)

app = Flask(__name__)


@app.after_request
def _no_cache_state(resp):
    if request.path in ("/grid", "/stats"):
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, list):
        return {"tiles": payload}
    return {}


def _bad_request(reason: str):
    return jsonify({"ok": False, "error": reason}), 400


def _target_cell(p: Dict[str, Any]) -> Tuple[Optional[Cell], Optional[str]]:
    """Resolve a drop target from a cell or from the tile being dropped onto."""
    if p.get("target_key") is not None:
        if not is_tile_key(p["target_key"]):
            return None, f"bad target_key: {p['target_key']!r}"
        cell = SESSION.tile_target(p["target_key"])
        if cell is None:
            return None, f"no drop target for tile {p['target_key']!r}"
        return cell, None
    cell = parse_cell(p.get("cell") if p.get("cell") is not None else p)
    if cell is None:
        return None, "expected a target cell (row/col, cell or target_key)"
    return cell, None


@app.route("/grid", methods=["GET"])
def grid_state():
    return jsonify(SESSION.snapshot())


@app.route("/grid", methods=["POST"])
def grid_update():
    p = _payload()
    columns = parse_columns(p.get("columns"), default=SESSION.columns)
    if columns is None:
        return _bad_request(f"bad column count: {p.get('columns')!r}")

    if "tiles" in p:
        tiles, err = parse_tiles(p)
        if err:
            return _bad_request(f"Bad tiles: {err}")
    else:
        tiles = None

    SESSION.configure(columns, tiles)
    snap = SESSION.snapshot()
    snap["ok"] = not snap["error"]
    return jsonify(snap)


@app.route("/drag/start", methods=["POST"])
def drag_start():
    p = _payload()
    if not is_tile_key(p.get("key")):
        return _bad_request(f"bad tile key: {p.get('key')!r}")
    ok = SESSION.drag_start(p["key"])
    return jsonify({"ok": ok, "dragging": SESSION.dragging})


@app.route("/drag/candidate", methods=["POST"])
def drag_candidate():
    cell, err = _target_cell(_payload())
    if err:
        return _bad_request(err)
    placement = SESSION.drag_candidate(cell)
    return jsonify({
        "ok": placement is not None,
        "cell": list(cell),
        "placement": None if placement is None else SESSION.placement_rows(placement),
    })


@app.route("/drag/commit", methods=["POST"])
def drag_commit():
    cell, err = _target_cell(_payload())
    if err:
        SESSION.drag_cancel()
        return _bad_request(err)
    move = SESSION.drag_commit(cell)
    snap = SESSION.snapshot()
    snap["ok"] = bool(SESSION.last_drop_ok)
    snap["move"] = None if move is None else move.as_dict()
    return jsonify(snap)


@app.route("/drag/cancel", methods=["POST"])
def drag_cancel():
    SESSION.drag_cancel()
    return jsonify({"ok": True})


@app.route("/stats")
def stats():
    return jsonify(pack_log.snapshot())


if __name__ == "__main__":
    app.run(debug=False)
