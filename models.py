from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from config import CFG

EMPTY_ID = 0

SIDES: Tuple[str, ...] = ("top", "bottom", "left", "right")

# direction -> (dx, dy)
OFFSETS: Dict[str, Tuple[int, int]] = {
    "top": (0, -1),
    "bottom": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

OPPOSITE: Dict[str, str] = {
    "top": "bottom",
    "bottom": "top",
    "left": "right",
    "right": "left",
}

# A snapshot cell is (tile_id, rotation) or None when empty.
SnapshotCell = Optional[Tuple[int, int]]
Snapshot = List[List[SnapshotCell]]


@dataclass
class Tile:
    id: int
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0
    rotation: int = 0

    @classmethod
    def empty(cls) -> "Tile":
        return cls(EMPTY_ID)

    @property
    def is_empty(self) -> bool:
        return self.id == EMPTY_ID

    def rotate(self, times: int = 1) -> "Tile":
        """Rotate clockwise ``times`` quarter turns in place.

        new top = old left, new right = old top, new bottom = old right,
        new left = old bottom.
        """
        for _ in range(int(times) % 4):
            self.top, self.right, self.bottom, self.left = (
                self.left, self.top, self.right, self.bottom,
            )
            self.rotation = (self.rotation + 1) % 4
        return self

    def oriented(self, times: int) -> "Tile":
        """Return a rotated copy; ``self`` is left untouched."""
        return replace(self).rotate(times)

    def copy(self) -> "Tile":
        return replace(self)

    def side(self, name: str) -> int:
        return getattr(self, name)

    def codes(self) -> Tuple[int, int, int, int]:
        return (self.top, self.bottom, self.left, self.right)

    @property
    def zero_count(self) -> int:
        return sum(1 for code in self.codes() if code == 0)

    def is_corner(self) -> bool:
        return self.zero_count == 2

    def is_edge(self) -> bool:
        return self.zero_count == 1

    def is_border(self) -> bool:
        # border-eligible: corner or edge
        return self.zero_count >= 1

    def is_interior(self) -> bool:
        return self.zero_count == 0


@dataclass
class Cell:
    id: int
    x: int
    y: int
    width: int = field(repr=False)
    height: int = field(repr=False)
    tile: Tile = field(default_factory=Tile.empty)

    @property
    def is_empty(self) -> bool:
        return self.tile.is_empty

    def _boundary_hits(self) -> Tuple[bool, bool, bool, bool]:
        return (
            self.y == 0,
            self.y == self.height - 1,
            self.x == 0,
            self.x == self.width - 1,
        )

    def is_border(self) -> bool:
        return any(self._boundary_hits())

    def is_corner(self) -> bool:
        return sum(self._boundary_hits()) >= 2

    def boundary_sides(self) -> Tuple[str, ...]:
        """Sides of this cell that face outside the grid."""
        return tuple(side for side, hit in zip(SIDES, self._boundary_hits()) if hit)


@dataclass(frozen=True)
class HistoryEvent:
    kind: str  # "add" | "remove"
    tile_id: int
    rotation: int
    x: int
    y: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind,
            "tile_id": self.tile_id,
            "rotation": self.rotation,
            "x": self.x,
            "y": self.y,
        }


class Grid:
    """Fixed-size rectangle of cells; every place/remove lands in ``history``."""

    def __init__(self, width: int, height: int, history: Optional[List[HistoryEvent]] = None):
        self.width = int(width)
        self.height = int(height)
        self.cells: List[List[Cell]] = [
            [Cell(y * self.width + x + 1, x, y, self.width, self.height) for x in range(self.width)]
            for y in range(self.height)
        ]
        self.history: List[HistoryEvent] = history if history is not None else []
        self._filled = 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _require(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return self.cells[y][x]

    def cell(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def neighbor(self, x: int, y: int, direction: str) -> Optional[Cell]:
        dx, dy = OFFSETS[direction]
        return self.cell(x + dx, y + dy)

    def neighbors(self, x: int, y: int) -> Iterator[Tuple[str, Optional[Cell]]]:
        for direction in SIDES:
            yield direction, self.neighbor(x, y, direction)

    def has_filled_neighbor(self, x: int, y: int) -> bool:
        return any(n is not None and not n.is_empty for _, n in self.neighbors(x, y))

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    @property
    def filled_count(self) -> int:
        return self._filled

    def place(self, tile: Tile, x: int, y: int) -> None:
        cell = self._require(x, y)
        self._filled += int(not tile.is_empty) - int(not cell.is_empty)
        cell.tile = tile
        self.history.append(HistoryEvent("add", tile.id, tile.rotation, x, y))

    def remove(self, x: int, y: int) -> Tile:
        cell = self._require(x, y)
        tile = cell.tile
        self._filled -= int(not tile.is_empty)
        cell.tile = Tile.empty()
        self.history.append(HistoryEvent("remove", tile.id, tile.rotation, x, y))
        return tile

    def fits(self, tile: Tile, x: int, y: int, skip: Sequence[str] = ()) -> bool:
        """True when ``tile`` agrees with every filled orthogonal neighbour.

        Missing or empty neighbours impose no constraint; sides named in
        ``skip`` are not checked.
        """
        for direction, other in self.neighbors(x, y):
            if direction in skip or other is None or other.is_empty:
                continue
            if tile.side(direction) != other.tile.side(OPPOSITE[direction]):
                return False
        return True

    def border_cells(self) -> List[Cell]:
        """Non-corner border cells in row-major order."""
        return [c for c in self.iter_cells() if c.is_border() and not c.is_corner()]

    def corner_cells(self) -> List[Cell]:
        """Corners in canonical order: top-left, top-right, bottom-left, bottom-right."""
        w, h = self.width - 1, self.height - 1
        return [self.cells[0][0], self.cells[0][w], self.cells[h][0], self.cells[h][w]]

    def snapshot(self) -> Snapshot:
        return [
            [None if c.is_empty else (c.tile.id, c.tile.rotation) for c in row]
            for row in self.cells
        ]


def export_snapshot(
    rows: Snapshot,
    empty_symbol: Optional[str] = None,
    delimiter: Optional[str] = None,
) -> str:
    """One line per grid row; tiles as ``<id-1>(<rotation>)``."""
    empty_symbol = CFG.EMPTY_SYMBOL if empty_symbol is None else empty_symbol
    delimiter = CFG.CELL_DELIMITER if delimiter is None else delimiter
    lines = []
    for row in rows:
        out = []
        for entry in row:
            if entry is None:
                out.append(empty_symbol)
            else:
                tile_id, rotation = entry
                # ids are 1-based internally, 0-based in the export
                out.append(f"{tile_id - 1}({rotation})")
        lines.append(delimiter.join(out))
    return "\n".join(lines)


@dataclass(eq=False)
class Board:
    """One attempt's grid, history and peak."""

    grid: Grid
    attempt: int = 0
    seed: Optional[int] = None
    peak_filled: int = 0
    peak_snapshot: Optional[Snapshot] = None
    peak_history_length: int = 0
    stats: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def new(cls, width: int, height: int, **kw) -> "Board":
        return cls(Grid(width, height), **kw)

    @property
    def history(self) -> List[HistoryEvent]:
        return self.grid.history

    @property
    def filled_count(self) -> int:
        return self.grid.filled_count

    @property
    def total_cells(self) -> int:
        return self.grid.width * self.grid.height

    def place(self, tile: Tile, x: int, y: int) -> None:
        self.grid.place(tile, x, y)
        filled = self.grid.filled_count
        if filled > self.peak_filled:
            self.peak_filled = filled
            self.peak_snapshot = self.grid.snapshot()
            self.peak_history_length = len(self.grid.history)

    def remove(self, x: int, y: int) -> Tile:
        return self.grid.remove(x, y)

    def export(self) -> str:
        return export_snapshot(self.grid.snapshot())

    def export_peak(self) -> str:
        return export_snapshot(self.peak_snapshot or self.grid.snapshot())

    def history_records(self, upto: Optional[int] = None) -> List[Dict[str, object]]:
        events = self.history if upto is None else self.history[:upto]
        return [e.to_dict() for e in events]


__all__ = [
    "EMPTY_ID", "SIDES", "OFFSETS", "OPPOSITE",
    "Tile", "Cell", "HistoryEvent", "Grid", "Board", "export_snapshot",
]
