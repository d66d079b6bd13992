"""Shared fixtures: a small solvable puzzle and matching solver settings."""

import random

import pytest

from config import CFG
from tiles import generate_universe

SMALL_W = 6
SMALL_H = 6
SMALL_SEED_XY = (2, 3)
SMALL_SEED_ID = 8


@pytest.fixture
def small_universe():
    return generate_universe(SMALL_W, SMALL_H, 3, rng=random.Random(7), interior_id=SMALL_SEED_ID)


@pytest.fixture
def attempt_kwargs():
    return {
        "width": SMALL_W,
        "height": SMALL_H,
        "seed_xy": SMALL_SEED_XY,
        "seed_tile_id": SMALL_SEED_ID,
        "seed_rotation": 2,
    }


@pytest.fixture
def small_cfg(monkeypatch, tmp_path):
    """Point CFG at the small puzzle and keep every output under tmp_path."""
    monkeypatch.setattr(CFG, "GRID_W", SMALL_W)
    monkeypatch.setattr(CFG, "GRID_H", SMALL_H)
    monkeypatch.setattr(CFG, "SEED_X", SMALL_SEED_XY[0])
    monkeypatch.setattr(CFG, "SEED_Y", SMALL_SEED_XY[1])
    monkeypatch.setattr(CFG, "SEED_TILE_ID", SMALL_SEED_ID)
    monkeypatch.setattr(CFG, "SEED_ROTATION", 2)
    monkeypatch.setattr(CFG, "SYNTH_COLORS", 3)
    monkeypatch.setattr(CFG, "EXPORT_DIR", str(tmp_path / "outputs"))
    monkeypatch.setattr(CFG, "HISTORY_DIR", str(tmp_path / "history-output"))
    monkeypatch.setattr(CFG, "TILES_FILE", str(tmp_path / "pieces.txt"))
    monkeypatch.setattr(CFG, "WORKERS", 1)
    return CFG


def assert_sound(grid):
    """Every pair of filled orthogonal neighbours agrees on the shared edge."""
    for cell in grid.iter_cells():
        if cell.is_empty:
            continue
        right = grid.neighbor(cell.x, cell.y, "right")
        if right is not None and not right.is_empty:
            assert cell.tile.right == right.tile.left, (cell, right)
        below = grid.neighbor(cell.x, cell.y, "bottom")
        if below is not None and not below.is_empty:
            assert cell.tile.bottom == below.tile.top, (cell, below)
