from models import Board, Grid, Tile
from solver.interior import InteriorSearch, closest_empty_cell, fit_turns, ring_offsets


def test_ring_offsets_cover_the_square_ring():
    ring = list(ring_offsets(1))
    assert len(ring) == 8
    assert ring[0] == (-1, -1)
    assert (0, 0) not in ring
    assert len(list(ring_offsets(2))) == 16


def test_closest_empty_cell_scans_rings_around_origin():
    grid = Grid(8, 8)
    grid.place(Tile(1, 1, 1, 1, 1), 3, 3)

    first = closest_empty_cell(grid, 3, 3, set())
    assert (first.x, first.y) == (2, 3)

    second = closest_empty_cell(grid, 3, 3, {first.id})
    assert (second.x, second.y) == (3, 2)


def test_closest_empty_cell_needs_a_filled_neighbour():
    assert closest_empty_cell(Grid(8, 8), 3, 3, set()) is None


def test_closest_empty_cell_never_returns_the_border():
    grid = Grid(6, 6)
    grid.place(Tile(1, 1, 1, 1, 1), 1, 1)

    cell = closest_empty_cell(grid, 1, 1, set())
    assert (cell.x, cell.y) == (1, 2)
    assert not cell.is_border()


def test_fit_turns_finds_matching_rotation():
    grid = Grid(5, 5)
    grid.place(Tile(1, top=1, bottom=1, left=1, right=5), 1, 2)
    tile = Tile(2, top=5, bottom=6, left=7, right=8)

    turns = fit_turns(grid, grid.cell(2, 2), tile)
    assert turns == 3
    assert tile.oriented(turns).left == 5
    assert tile.rotation == 0


def test_fit_turns_none_when_nothing_matches():
    grid = Grid(5, 5)
    grid.place(Tile(1, top=1, bottom=1, left=1, right=5), 1, 2)
    assert fit_turns(grid, grid.cell(2, 2), Tile(2, 6, 6, 6, 6)) is None


def test_search_returns_every_tile_to_the_pool():
    board = Board.new(5, 5)
    board.place(Tile(1, 1, 1, 1, 1), 2, 2)
    pool = [Tile(i, 1, 1, 1, 1) for i in range(2, 10)]
    trace = []

    InteriorSearch(board, pool, (2, 2), trace=trace).run()

    assert sorted(t.id for t in pool) == list(range(2, 10))
    # each of the 8 free interior cells is selected exactly once
    assert len(trace) == 8
    assert len(set(trace)) == 8
    assert board.filled_count == 1
    assert board.peak_filled == 9
    assert board.stats["cells_tried"] == 8
    assert board.stats["unplaced"] == 8


def test_run_restores_the_recursion_limit(monkeypatch):
    import sys

    calls = []
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 50)
    monkeypatch.setattr(sys, "setrecursionlimit", calls.append)

    board = Board.new(5, 5)
    board.place(Tile(1, 1, 1, 1, 1), 2, 2)
    InteriorSearch(board, [Tile(2, 1, 1, 1, 1)], (2, 2)).run()

    assert calls == [9 + 100, 50]


def test_each_pool_tile_is_tried_once_per_cell():
    board = Board.new(4, 3)
    board.place(Tile(1, 1, 1, 1, 1), 1, 1)
    pool = [Tile(2, 1, 1, 1, 1), Tile(3, 1, 1, 1, 1)]

    InteriorSearch(board, pool, (1, 1)).run()

    added = [e.tile_id for e in board.history[1:] if e.kind == "add"]
    assert added == [2, 3]
    assert board.stats["placements"] == 2
