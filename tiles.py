# tiles.py: tile database parsing, validation and synthetic puzzles
from __future__ import annotations

import logging
import random
import re
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from models import Tile

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"[\s,;]+")


class TileSetError(ValueError):
    """Raised when a tile universe cannot be used to start an attempt."""


def _to_int(tok: str) -> Optional[int]:
    try:
        return int(tok)
    except (TypeError, ValueError):
        return None


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse the connector database: one tile per line, ``top bottom left right``.
    Ids are assigned 1..N in line order; blank lines and ``#`` comments are skipped.
    """
    tiles: List[Tile] = []
    for lineno, raw in enumerate((text or "").splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = [p for p in _SPLIT_RE.split(line) if p]
        codes = [_to_int(p) for p in parts]
        if len(codes) != 4 or any(c is None for c in codes):
            raise TileSetError(f"line {lineno}: expected 4 connector codes, got {raw.strip()!r}")
        top, bottom, left, right = codes
        tiles.append(Tile(len(tiles) + 1, top=top, bottom=bottom, left=left, right=right))
    return tiles


def load_tiles(path) -> List[Tile]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Tile database not found: {p}")
    tiles = parse_tiles(p.read_text(encoding="utf-8"))
    logger.info("Loaded %d tiles from %s", len(tiles), p)
    return tiles


def format_tiles(tiles: Iterable[Tile]) -> str:
    """Inverse of :func:`parse_tiles` for tiles sorted by id."""
    ordered = sorted(tiles, key=lambda t: t.id)
    return "\n".join(f"{t.top} {t.bottom} {t.left} {t.right}" for t in ordered)


def expected_distribution(width: int, height: int) -> Tuple[int, int, int]:
    """Return (corners, edges, interior) for a ``width`` × ``height`` board."""
    ring = 2 * (width + height) - 4
    return 4, ring - 4, (width - 2) * (height - 2)


def validate_universe(
    tiles: Sequence[Tile],
    width: int,
    height: int,
    seed_tile_id: Optional[int] = None,
    seed_xy: Optional[Tuple[int, int]] = None,
) -> None:
    """Fail fast on a malformed tile universe; returns None when usable."""
    if width < 3 or height < 3:
        raise TileSetError(f"board {width}x{height} has no interior")

    total = width * height
    if len(tiles) != total:
        raise TileSetError(f"expected {total} tiles for a {width}x{height} board, got {len(tiles)}")

    ids = Counter(t.id for t in tiles)
    dupes = sorted(i for i, n in ids.items() if n > 1)
    if dupes:
        raise TileSetError(f"duplicate tile ids: {dupes[:10]}")
    out_of_range = sorted(i for i in ids if not 1 <= i <= total)
    if out_of_range:
        raise TileSetError(f"tile ids outside 1..{total}: {out_of_range[:10]}")

    for t in tiles:
        if any(not isinstance(c, int) or c < 0 for c in t.codes()):
            raise TileSetError(f"tile {t.id} has invalid connector codes {t.codes()}")
        if t.zero_count > 2:
            raise TileSetError(f"tile {t.id} has {t.zero_count} flat sides")

    corners = sum(1 for t in tiles if t.is_corner())
    edges = sum(1 for t in tiles if t.is_edge())
    interior = sum(1 for t in tiles if t.is_interior())
    want = expected_distribution(width, height)
    if (corners, edges, interior) != want:
        raise TileSetError(
            f"tile classes corners/edges/interior = {corners}/{edges}/{interior}, "
            f"expected {want[0]}/{want[1]}/{want[2]}"
        )

    if seed_tile_id is not None:
        seed = next((t for t in tiles if t.id == seed_tile_id), None)
        if seed is None:
            raise TileSetError(f"seed tile {seed_tile_id} not in tile set")
        if not seed.is_interior():
            raise TileSetError(f"seed tile {seed_tile_id} is not an interior tile")

    if seed_xy is not None:
        sx, sy = seed_xy
        if not (0 < sx < width - 1 and 0 < sy < height - 1):
            raise TileSetError(f"seed cell ({sx}, {sy}) is not an interior cell")


def generate_universe(
    width: int,
    height: int,
    colors: int,
    rng: Optional[random.Random] = None,
    interior_id: Optional[int] = None,
) -> List[Tile]:
    """
    Build a solvable puzzle: random joints on a solved board (flat on the
    boundary), then shuffle ids and spin every tile.  Returned sorted by id.

    When ``interior_id`` is given it is guaranteed to name an interior tile.
    """
    rng = rng or random.Random()
    colors = max(1, int(colors))

    # hjoint[y][x]: code between column x-1 and x in row y
    hjoint = [[0] + [rng.randint(1, colors) for _ in range(width - 1)] + [0] for _ in range(height)]
    # vjoint[y][x]: code between row y-1 and y in column x
    vjoint = [[0] * width] + [
        [rng.randint(1, colors) for _ in range(width)] for _ in range(height - 1)
    ] + [[0] * width]

    solved: List[Tile] = []
    for y in range(height):
        for x in range(width):
            solved.append(Tile(
                0,
                top=vjoint[y][x],
                bottom=vjoint[y + 1][x],
                left=hjoint[y][x],
                right=hjoint[y][x + 1],
            ))

    ids = list(range(1, len(solved) + 1))
    rng.shuffle(ids)
    for tile, tile_id in zip(solved, ids):
        tile.id = tile_id

    if interior_id is not None:
        holder = next((t for t in solved if t.id == interior_id), None)
        if holder is not None and not holder.is_interior():
            swap = rng.choice([t for t in solved if t.is_interior()])
            holder.id, swap.id = swap.id, holder.id

    for tile in solved:
        tile.rotate(rng.randrange(4))
        tile.rotation = 0

    return sorted(solved, key=lambda t: t.id)


__all__ = [
    "TileSetError",
    "parse_tiles",
    "load_tiles",
    "format_tiles",
    "expected_distribution",
    "validate_universe",
    "generate_universe",
]
