# solver/interior.py
"""
Interior growth search.

Cells are chosen in square rings around a fixed origin; each chosen cell is
tried with every pool tile (and every rotation of it) and the search recurses
after each placement, unwinding the placement afterwards.  The ``tried`` set
is shared by the whole call tree and only ever grows, so every interior cell
is selected at most once per attempt.  That keeps the work bounded by
cells × pool × 4 rotations instead of exploding with the tile count.
"""
from __future__ import annotations

import logging
import sys
from typing import Iterator, List, Optional, Set, Tuple

from models import Board, Cell, Grid, Tile

logger = logging.getLogger(__name__)


def ring_offsets(radius: int) -> Iterator[Tuple[int, int]]:
    """Offsets at Chebyshev distance ``radius``; dx outer, dy inner."""
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if max(abs(dx), abs(dy)) == radius:
                yield dx, dy


def closest_empty_cell(grid: Grid, x: int, y: int, tried: Set[int]) -> Optional[Cell]:
    """
    First frontier cell around ``(x, y)``: in bounds, not on the border, empty,
    touching at least one filled cell and not yet in ``tried``.
    """
    max_radius = max(grid.width, grid.height) // 2
    for radius in range(1, max_radius + 1):
        for dx, dy in ring_offsets(radius):
            cell = grid.cell(x + dx, y + dy)
            if cell is None or cell.is_border() or not cell.is_empty:
                continue
            if not grid.has_filled_neighbor(cell.x, cell.y):
                continue
            if cell.id in tried:
                continue
            return cell
    return None


def fit_turns(grid: Grid, cell: Cell, tile: Tile) -> Optional[int]:
    """Quarter turns (0..3) under which ``tile`` agrees with the filled neighbours of ``cell``."""
    for turns in range(4):
        if grid.fits(tile.oriented(turns), cell.x, cell.y):
            return turns
    return None


class InteriorSearch:
    """One growth pass over the interior of ``board``.

    ``pool`` and ``tried`` are shared by reference across every level of the
    recursion.  ``trace`` optionally records selected cell ids in order.
    """

    def __init__(
        self,
        board: Board,
        pool: List[Tile],
        origin: Tuple[int, int],
        tried: Optional[Set[int]] = None,
        trace: Optional[List[int]] = None,
    ):
        self.board = board
        self.pool = pool
        self.origin = origin
        self.tried: Set[int] = tried if tried is not None else set()
        self.trace = trace
        self.placements = 0

    def run(self) -> Board:
        interior = max(0, (self.board.grid.width - 2) * (self.board.grid.height - 2))
        # one frame per selected cell plus headroom for the caller
        needed = interior + 100
        previous = sys.getrecursionlimit()
        if previous < needed:
            sys.setrecursionlimit(needed)
        try:
            self.grow()
        finally:
            sys.setrecursionlimit(previous)
        self.board.stats.update(
            cells_tried=len(self.tried),
            placements=self.placements,
            unplaced=len(self.pool),
        )
        return self.board

    def grow(self) -> None:
        grid = self.board.grid
        cell = closest_empty_cell(grid, self.origin[0], self.origin[1], self.tried)
        if cell is None:
            return
        self.tried.add(cell.id)
        if self.trace is not None:
            self.trace.append(cell.id)

        # every tile in the pool at entry is tried exactly once at this cell
        # (even after a backtrack re-appends it); deeper levels may reorder
        # the pool but always hand every tile back
        for tile in list(self.pool):
            turns = fit_turns(grid, cell, tile)
            if turns is None:
                continue
            idx = next(i for i, t in enumerate(self.pool) if t is tile)
            self.pool.pop(idx)
            tile.rotate(turns)
            self.board.place(tile, cell.x, cell.y)
            self.placements += 1
            self.grow()
            self.pool.append(self.board.remove(cell.x, cell.y))


def solve_interior(
    board: Board,
    pool: List[Tile],
    origin: Tuple[int, int],
    trace: Optional[List[int]] = None,
) -> Board:
    search = InteriorSearch(board, pool, origin, trace=trace)
    search.run()
    logger.debug(
        "interior pass: %d cells tried, %d placements, peak %d",
        len(search.tried), search.placements, board.peak_filled,
    )
    return board


__all__ = ["ring_offsets", "closest_empty_cell", "fit_turns", "InteriorSearch", "solve_interior"]
