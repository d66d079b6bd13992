# app.py: start runs, watch progress, browse the best board
from __future__ import annotations

import logging
import math
import os
import random
import time
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from config import CFG, seed_from_config
from models import Tile
from tiles import TileSetError, generate_universe, load_tiles
from solver.orchestrator import leaderboard_summary, run_attempts
from io_files import write_board_export, write_history
from render import render_board

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    set_status, set_done, set_result_url,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

logger = logging.getLogger(__name__)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "message": "No run yet.",
    "grid": "",
    "best_filled": 0,
    "total_cells": 0,
    "attempts": 0,
    "scores": [],
    "seed": None,
    "best_seed": None,
    "elapsed_str": "0s",
    "svg": "",
    "legend": "",
    "export_text": "",
    "export_path": "",
    "history_path": "",
    "tile_source": "",
}

app = Flask(__name__, static_folder=None, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return render_template(
        "index.html",
        seconds=CFG.RUN_SECONDS,
        max_attempts=CFG.MAX_ATTEMPTS,
        workers=CFG.WORKERS,
        seed=CFG.RANDOM_SEED,
        grid=f"{CFG.GRID_W} × {CFG.GRID_H}",
    )


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _form_value(name: str) -> Optional[str]:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and payload.get(name) not in (None, ""):
        return str(payload[name])
    value = request.values.get(name)
    if value is None or str(value).strip() == "":
        return None
    return str(value).strip()


def _to_float(x: Optional[str]) -> Optional[float]:
    # nan/inf fall back to the configured default
    try:
        value = float(x) if x is not None else None
    except ValueError:
        return None
    if value is None or not math.isfinite(value):
        return None
    return value


def _to_int(x: Optional[str]) -> Optional[int]:
    value = _to_float(x)
    try:
        return int(value) if value is not None else None
    except (OverflowError, ValueError):
        return None


def _tiles_path() -> str:
    name = (CFG.TILES_FILE or "").strip() or "pieces.txt"
    return name if os.path.isabs(name) else os.path.join(BASE_DIR, name)


def _load_universe(seed: Optional[int]) -> Tuple[List[Tile], str]:
    """Tile database from disk, or a synthetic puzzle when none is present."""
    path = _tiles_path()
    if os.path.exists(path):
        return load_tiles(path), os.path.basename(path)
    logger.warning("Tile database %s missing; generating a synthetic puzzle", path)
    tiles = generate_universe(
        CFG.GRID_W, CFG.GRID_H, CFG.SYNTH_COLORS,
        rng=random.Random(seed), interior_id=CFG.SEED_TILE_ID,
    )
    return tiles, f"synthetic ({CFG.SYNTH_COLORS} colours)"


def _finalize_solver_progress(ok_flag: bool, message: str) -> None:
    """Write the terminal solver status without clobbering failure states."""

    set_status("Solved" if ok_flag else "error")
    set_done(ok_flag, reason=message)


def _fail(message: str, t0: float):
    _finalize_solver_progress(False, message)
    LAST_RESULT.update({
        "ok": False,
        "message": message,
        "svg": "",
        "legend": "",
        "export_text": "",
        "elapsed_str": _fmt_elapsed(time.time() - t0),
    })
    set_result_url(url_for("result_latest"))
    return render_template("result.html", **LAST_RESULT), 400


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    t0 = time.time()

    seconds = _to_float(_form_value("seconds"))
    max_attempts = _to_int(_form_value("max_attempts"))
    workers = _to_int(_form_value("workers"))
    raw_seed = _form_value("seed")
    seed = seed_from_config(raw_seed) if raw_seed is not None else seed_from_config()

    try:
        tiles, source = _load_universe(seed)
        result = run_attempts(
            tiles,
            seconds=seconds,
            max_attempts=max_attempts,
            workers=workers,
            seed=seed,
            base_dir=BASE_DIR,
        )
    except (TileSetError, FileNotFoundError) as e:
        return _fail(f"Bad tile set: {e}", t0)

    best = result.best
    summary = leaderboard_summary(result)
    message = f"{result.attempts} attempts; best board placed {best.peak_filled} of {best.total_cells} tiles"
    _finalize_solver_progress(True, message)

    svg, legend = render_board(best, tiles)
    export_path = write_board_export(best, BASE_DIR)
    history_path = write_history(best, BASE_DIR)

    LAST_RESULT.update({
        "ok": True,
        "message": message,
        "grid": f"{best.grid.width} × {best.grid.height}",
        "best_filled": best.peak_filled,
        "total_cells": best.total_cells,
        "attempts": result.attempts,
        "scores": summary["scores"],
        "seed": result.seed,
        "best_seed": best.seed,
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "svg": svg,
        "legend": legend,
        "export_text": best.export_peak(),
        "export_path": export_path,
        "history_path": history_path,
        "tile_source": source,
    })
    set_result_url(url_for("result_latest"))
    return render_template("result.html", **LAST_RESULT)


def _send(path_key: str):
    path = LAST_RESULT.get(path_key) or ""
    if not path or not os.path.exists(path):
        return jsonify({"error": "nothing exported yet"}), 404
    return send_from_directory(os.path.dirname(path), os.path.basename(path), as_attachment=True)


@app.route("/download/export")
def download_export():
    return _send("export_path")


@app.route("/download/history")
def download_history():
    return _send("history_path")


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False)
