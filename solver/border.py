# solver/border.py
"""
Border pass: corners first, then a single greedy sweep over the edge ring.

No backtracking happens here.  A ring cell that no remaining edge tile can
satisfy is left empty and the sweep moves on; the interior search treats
such cells as unconstrained neighbours.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from models import Board, Cell, Tile

logger = logging.getLogger(__name__)


def flat_turns(tile: Tile, sides: Sequence[str]) -> Optional[int]:
    """Quarter turns (0..3) that bring a zero code onto every side in ``sides``."""
    for turns in range(4):
        view = tile.oriented(turns)
        if all(view.side(s) == 0 for s in sides):
            return turns
    return None


def partition_border(tiles: Sequence[Tile]) -> Tuple[List[Tile], List[Tile]]:
    """Split border tiles into (corners, edges)."""
    corners = [t for t in tiles if t.is_corner()]
    edges = [t for t in tiles if not t.is_corner()]
    return corners, edges


def set_corners(board: Board, corners: Sequence[Tile]) -> List[Cell]:
    """Place corners in canonical order (TL, TR, BL, BR); return cells left empty."""
    missed: List[Cell] = []
    for cell, tile in zip(board.grid.corner_cells(), corners):
        turns = flat_turns(tile, cell.boundary_sides())
        if turns is None:
            missed.append(cell)
            continue
        tile.rotate(turns)
        board.place(tile, cell.x, cell.y)
    return missed


def solve_edges(board: Board, edges: List[Tile]) -> List[Cell]:
    """
    Fill non-corner ring cells in row-major order with the first edge tile
    whose flat side faces out and whose inner sides agree with placed
    neighbours.  Placed tiles are removed from ``edges``.
    """
    grid = board.grid
    unfilled: List[Cell] = []
    for cell in grid.border_cells():
        flat = cell.boundary_sides()
        chosen = None
        for idx, tile in enumerate(edges):
            turns = flat_turns(tile, flat)
            if turns is None:
                continue
            if grid.fits(tile.oriented(turns), cell.x, cell.y, skip=flat):
                chosen = idx
                tile.rotate(turns)
                board.place(tile, cell.x, cell.y)
                break
        if chosen is None:
            unfilled.append(cell)
        else:
            edges.pop(chosen)
    return unfilled


def solve_borders(board: Board, border_tiles: Sequence[Tile], rng: Optional[random.Random] = None) -> List[Cell]:
    """Run the whole border pass; returns the ring cells that stayed empty."""
    rng = rng or random.Random()
    corners, edges = partition_border(border_tiles)
    rng.shuffle(corners)

    missed = set_corners(board, corners)
    missed.extend(solve_edges(board, edges))
    if missed:
        logger.debug("border pass left %d ring cells empty", len(missed))
    return missed


__all__ = ["flat_turns", "partition_border", "set_corners", "solve_edges", "solve_borders"]
