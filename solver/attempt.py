# solver/attempt.py
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from config import CFG
from models import Board, Tile
from tiles import TileSetError, validate_universe
from solver.border import solve_borders
from solver.interior import solve_interior

logger = logging.getLogger(__name__)


def partition_tiles(tiles: Sequence[Tile]) -> Tuple[List[Tile], List[Tile]]:
    """Split into (interior, border) keeping input order."""
    interior: List[Tile] = []
    border: List[Tile] = []
    for t in tiles:
        (border if t.is_border() else interior).append(t)
    return interior, border


def _take_seed(interior: List[Tile], seed_tile_id: int) -> Tile:
    for idx, tile in enumerate(interior):
        if tile.id == seed_tile_id:
            return interior.pop(idx)
    raise TileSetError(f"seed tile {seed_tile_id} not among interior tiles")


def run_attempt(
    universe: Sequence[Tile],
    rng: Optional[random.Random] = None,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    seed_xy: Optional[Tuple[int, int]] = None,
    seed_tile_id: Optional[int] = None,
    seed_rotation: Optional[int] = None,
    attempt: int = 0,
    seed: Optional[int] = None,
    validate: bool = True,
    trace: Optional[List[int]] = None,
) -> Board:
    """
    One complete border-then-interior attempt over a private shuffled copy
    of ``universe``.

    ``seed`` builds the RNG when ``rng`` is not given and is recorded on the
    returned board so the attempt can be replayed.
    """
    width = CFG.GRID_W if width is None else int(width)
    height = CFG.GRID_H if height is None else int(height)
    if seed_xy is None:
        seed_xy = (CFG.SEED_X, CFG.SEED_Y)
    seed_tile_id = CFG.SEED_TILE_ID if seed_tile_id is None else int(seed_tile_id)
    seed_rotation = CFG.SEED_ROTATION if seed_rotation is None else int(seed_rotation)

    if validate:
        validate_universe(universe, width, height, seed_tile_id, seed_xy)

    if rng is None:
        rng = random.Random(seed)

    tiles = [t.copy() for t in universe]
    rng.shuffle(tiles)
    interior, border = partition_tiles(tiles)

    board = Board.new(width, height, attempt=attempt, seed=seed)

    anchor = _take_seed(interior, seed_tile_id)
    anchor.rotate(seed_rotation)
    board.place(anchor, seed_xy[0], seed_xy[1])

    missed = solve_borders(board, border, rng)
    solve_interior(board, interior, seed_xy, trace=trace)
    board.stats["border_missed"] = len(missed)

    logger.debug(
        "attempt %d: peak %d/%d, final %d",
        attempt, board.peak_filled, board.total_cells, board.filled_count,
    )
    return board


__all__ = ["partition_tiles", "run_attempt"]
