import random

import pytest

from conftest import SMALL_H, SMALL_SEED_ID, SMALL_SEED_XY, SMALL_W
from tiles import (
    TileSetError,
    expected_distribution,
    format_tiles,
    generate_universe,
    load_tiles,
    parse_tiles,
    validate_universe,
)


def test_parse_tiles_reads_top_bottom_left_right():
    tiles = parse_tiles("1 2 0 0\n# comment\n\n3 4 5 6  # trailing\n")
    assert [t.id for t in tiles] == [1, 2]
    assert (tiles[0].top, tiles[0].bottom, tiles[0].left, tiles[0].right) == (1, 2, 0, 0)
    assert tiles[1].codes() == (3, 4, 5, 6)
    assert all(t.rotation == 0 for t in tiles)


def test_parse_tiles_rejects_short_line():
    with pytest.raises(TileSetError, match="line 2"):
        parse_tiles("1 2 3 4\n1 2 3\n")


def test_format_tiles_is_parseable(small_universe):
    again = parse_tiles(format_tiles(small_universe))
    assert [t.codes() for t in again] == [t.codes() for t in small_universe]


def test_load_tiles(tmp_path, small_universe):
    path = tmp_path / "pieces.txt"
    path.write_text(format_tiles(small_universe), encoding="utf-8")
    assert len(load_tiles(path)) == SMALL_W * SMALL_H

    with pytest.raises(FileNotFoundError):
        load_tiles(tmp_path / "missing.txt")


def test_expected_distribution_for_full_board():
    assert expected_distribution(16, 16) == (4, 56, 196)


def test_generated_universe_is_valid(small_universe):
    validate_universe(small_universe, SMALL_W, SMALL_H, SMALL_SEED_ID, SMALL_SEED_XY)
    assert sorted(t.id for t in small_universe) == list(range(1, SMALL_W * SMALL_H + 1))


def test_generated_universe_honours_interior_id():
    for seed in range(10):
        tiles = generate_universe(5, 5, 2, rng=random.Random(seed), interior_id=3)
        assert next(t for t in tiles if t.id == 3).is_interior()


def test_generated_universe_is_reproducible():
    a = generate_universe(5, 5, 4, rng=random.Random(11))
    b = generate_universe(5, 5, 4, rng=random.Random(11))
    assert a == b


def test_validate_rejects_wrong_count(small_universe):
    with pytest.raises(TileSetError, match="expected 36 tiles"):
        validate_universe(small_universe[:-1], SMALL_W, SMALL_H)


def test_validate_rejects_duplicate_ids(small_universe):
    small_universe[1].id = small_universe[0].id
    with pytest.raises(TileSetError, match="duplicate"):
        validate_universe(small_universe, SMALL_W, SMALL_H)


def test_validate_rejects_wrong_class_distribution(small_universe):
    corner = next(t for t in small_universe if t.is_corner())
    corner.top = corner.bottom = corner.left = corner.right = 1
    with pytest.raises(TileSetError, match="corners/edges/interior"):
        validate_universe(small_universe, SMALL_W, SMALL_H)


def test_validate_rejects_border_seed_tile(small_universe):
    edge = next(t for t in small_universe if t.is_edge())
    with pytest.raises(TileSetError, match="not an interior tile"):
        validate_universe(small_universe, SMALL_W, SMALL_H, seed_tile_id=edge.id)


def test_validate_rejects_unknown_seed_tile(small_universe):
    with pytest.raises(TileSetError, match="not in tile set"):
        validate_universe(small_universe, SMALL_W, SMALL_H, seed_tile_id=999)


def test_validate_rejects_border_seed_cell(small_universe):
    with pytest.raises(TileSetError, match="not an interior cell"):
        validate_universe(small_universe, SMALL_W, SMALL_H, seed_xy=(0, 3))
