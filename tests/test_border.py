import random

from conftest import SMALL_H, SMALL_W, assert_sound
from models import Board, Tile
from solver.border import flat_turns, partition_border, set_corners, solve_borders, solve_edges


def test_top_left_corner_needs_two_turns_for_bottom_right():
    tile = Tile(1, top=0, left=0, bottom=3, right=4)
    board = Board.new(16, 16)
    bottom_right = board.grid.cell(15, 15)

    sides = bottom_right.boundary_sides()
    assert sides == ("bottom", "right")
    assert not all(tile.side(s) == 0 for s in sides)
    assert not all(tile.oriented(1).side(s) == 0 for s in sides)
    assert flat_turns(tile, sides) == 2

    tile.rotate(2)
    assert tile.bottom == 0 and tile.right == 0


def test_flat_turns_none_for_interior_tile():
    assert flat_turns(Tile(1, 1, 2, 3, 4), ("top",)) is None


def test_set_corners_turns_flat_sides_outward(small_universe):
    corners, _ = partition_border([t for t in small_universe if t.is_border()])
    board = Board.new(SMALL_W, SMALL_H)

    assert set_corners(board, corners) == []
    for cell in board.grid.corner_cells():
        assert not cell.is_empty
        assert all(cell.tile.side(s) == 0 for s in cell.boundary_sides())


def test_solve_borders_fills_ring_consistently(small_universe):
    border = [t.copy() for t in small_universe if t.is_border()]
    board = Board.new(SMALL_W, SMALL_H)

    missed = solve_borders(board, border, random.Random(3))

    ring = board.grid.border_cells() + board.grid.corner_cells()
    filled = [c for c in ring if not c.is_empty]
    assert len(filled) + len(missed) == len(ring)
    for cell in filled:
        assert all(cell.tile.side(s) == 0 for s in cell.boundary_sides())
    assert all(c.is_empty for c in missed)
    assert_sound(board.grid)
    # every placed tile is distinct
    ids = [c.tile.id for c in filled]
    assert len(ids) == len(set(ids))


def test_unmatched_edge_cells_are_left_empty():
    # 3x3: each edge cell sits between two corners whose inner codes never match
    corners = [Tile(i, top=0, left=0, right=1, bottom=1) for i in range(1, 5)]
    edges = [Tile(i, top=0, left=2, right=2, bottom=2) for i in range(5, 9)]
    board = Board.new(3, 3)

    set_corners(board, corners)
    missed = solve_edges(board, edges)

    assert [(c.x, c.y) for c in missed] == [(1, 0), (0, 1), (2, 1), (1, 2)]
    assert len(edges) == 4
    assert board.filled_count == 4


def test_solve_edges_consumes_placed_tiles():
    corners = [Tile(i, top=0, left=0, right=1, bottom=1) for i in range(1, 5)]
    edges = [Tile(i, top=0, left=1, right=1, bottom=2) for i in range(5, 9)]
    board = Board.new(3, 3)

    set_corners(board, corners)
    missed = solve_edges(board, edges)

    assert missed == []
    assert edges == []
    assert board.filled_count == 8
    assert_sound(board.grid)
