"""SVG rendering of a tree.

The output is meant to be embedded inline by a web page, so the markup is
kept byte-for-byte identical to what the counterpart renderer emits.
"""

from __future__ import annotations

from collections.abc import Mapping

from .digits import SeedLike, extract_digits, seed_digits
from .grid import BRANCH, DEFAULT_GRID, LEAF, ROOT, TRUNK, TRUNK_THICK, Grid, Point
from .score import score

WOOD_COLORS: dict[str, str] = {
    ROOT: "#5D4037",
    TRUNK: "#795548",
    TRUNK_THICK: "#795548",
    BRANCH: "#8D6E63",
}
LEAF_LIGHT = "#66BB6A"
LEAF_DARK = "#2E7D32"
FRAME_STROKE = "#3b3d5c"

HOURGLASS = "⌛"
SEEDLING = "\U0001f331"
CLOVER = "\U0001f340"
STAR = "⭐"


def _js_number(value: float) -> str:
    # "13" rather than "13.0", "12.5" stays as is.
    return format(value, "g")


def background_hsl(seed: SeedLike) -> tuple[int, int, float]:
    """Dark, muted background (hue, saturation %, lightness %) from the seed."""
    d = seed_digits(seed)
    hue = (d[0] * 100 + d[1] * 10 + d[2]) % 360
    saturation = 15 + (d[3] * 3 + d[4])
    lightness = 12 + (d[5] + d[6]) / 2
    return hue, saturation, lightness


def background_color(seed: SeedLike) -> str:
    hue, saturation, lightness = background_hsl(seed)
    return f"hsl({hue}, {saturation}%, {_js_number(lightness)}%)"


def leaf_color(x: int, y: int, leaf_density: int) -> str:
    return LEAF_LIGHT if (x * 7 + y * 13) % 10 < leaf_density else LEAF_DARK


def pixel_color(point: Point, kind: str, leaf_density: int) -> str | None:
    if kind == LEAF:
        return leaf_color(point[0], point[1], leaf_density)
    return WOOD_COLORS.get(kind)


def with_foundation(pixels: Mapping[Point, str], grid: Grid = DEFAULT_GRID) -> dict[Point, str]:
    """Foundation cells first, then growth; the first writer of a cell wins."""
    merged: dict[Point, str] = {}
    for point, kind in grid.foundation():
        merged.setdefault(point, kind)
    for point, kind in pixels.items():
        merged.setdefault(point, kind)
    return merged


def score_color(total: int) -> str:
    if total >= 75:
        return "#66BB6A"
    if total >= 50:
        return "#FFA726"
    if total >= 25:
        return "#76c7c0"
    return "#888"


def _text(x: int, y: int, fill: str, body: str) -> str:
    return (
        f'<text x="{x}" y="{y}" font-family="monospace" font-size="1.2" '
        f'font-weight="bold" fill="{fill}">{body}</text>'
    )


def render(pixels: Mapping[Point, str], seed: SeedLike, grid: Grid = DEFAULT_GRID) -> str:
    """Render growth pixels plus foundation and stat overlay as an SVG string."""
    params = extract_digits(seed)
    w, h = grid.width, grid.height
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w} {h}" '
        f'preserveAspectRatio="xMidYMid meet">',
        f'<rect width="{w}" height="{h}" fill="{background_color(seed)}" '
        f'stroke="{FRAME_STROKE}" stroke-width="0.5"/>',
    ]

    for (x, y), kind in with_foundation(pixels, grid).items():
        color = pixel_color((x, y), kind, params.leaf_density)
        if color is None:
            continue
        if kind == LEAF:
            parts.append(f'<circle cx="{x + 0.5}" cy="{y + 0.5}" r="0.45" fill="{color}"/>')
        else:
            parts.append(f'<rect x="{x}" y="{y}" width="1" height="1" fill="{color}"/>')

    result = score(pixels, grid)
    color = score_color(result.total)
    parts.append(_text(1, h - 7, color, f"{HOURGLASS}{result.age:>5}"))
    parts.append(_text(1, h - 5, color, f"{SEEDLING}{result.branches:>5}"))
    parts.append(_text(1, h - 3, LEAF_LIGHT, f"{CLOVER}{result.foliage:>5}"))
    parts.append(_text(1, h - 1, color, f"{STAR}{result.total:>5}/100"))
    parts.append("</svg>")
    return "".join(parts)
