import random
from typing import Dict, Iterable, List, Tuple

from models import Board, Tile

CELL_PX = 40


def _color(code: int) -> str:
    if code == 0:
        return "rgb(90,90,90)"
    rng = random.Random(code * 7919)
    r = rng.randint(40, 220)
    g = rng.randint(40, 220)
    b = rng.randint(40, 220)
    return f"rgb({r},{g},{b})"


def _triangles(x: int, y: int, s: int) -> Dict[str, str]:
    cx, cy = x + s / 2, y + s / 2
    return {
        "top": f"{x},{y} {x + s},{y} {cx},{cy}",
        "right": f"{x + s},{y} {x + s},{y + s} {cx},{cy}",
        "bottom": f"{x},{y + s} {x + s},{y + s} {cx},{cy}",
        "left": f"{x},{y} {x},{y + s} {cx},{cy}",
    }


def render_board(board: Board, tiles: Iterable[Tile], peak: bool = True) -> Tuple[str, str]:
    """Return (svg, legend_html) for the board's peak (or current) grid.

    ``tiles`` is the universe in database orientation; snapshot rotations
    are applied to it to recover each cell's connector codes.
    """
    by_id = {t.id: t for t in tiles}
    rows = board.peak_snapshot if (peak and board.peak_snapshot) else board.grid.snapshot()

    s = CELL_PX
    svg_w = board.grid.width * s + 2
    svg_h = board.grid.height * s + 2

    used: Dict[int, str] = {}
    parts: List[str] = []
    for y, row in enumerate(rows):
        for x, entry in enumerate(row):
            px, py = 1 + x * s, 1 + y * s
            if entry is None:
                parts.append(
                    f'<rect x="{px}" y="{py}" width="{s}" height="{s}" fill="white" stroke="#ccc" stroke-width="1"/>'
                )
                continue
            tile_id, rotation = entry
            base = by_id.get(tile_id)
            if base is None:
                continue
            view = base.oriented(rotation - base.rotation)
            for side, points in _triangles(px, py, s).items():
                code = view.side(side)
                fill = used.setdefault(code, _color(code))
                parts.append(f'<polygon points="{points}" fill="{fill}" stroke="black" stroke-width="0.5"/>')
            parts.append(
                f'<text x="{px + 3}" y="{py + 12}" font-size="9" fill="black">{tile_id - 1}</text>'
            )

    frame = f'<rect x="1" y="1" width="{svg_w - 2}" height="{svg_h - 2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="board-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(parts)}{frame}</svg>'
    )

    legend = "".join(
        f"<li><span class='swatch' style='background:{c}'></span>{code}</li>"
        for code, c in sorted(used.items())
    )
    return svg, legend
