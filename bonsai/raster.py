"""Raster output: RGB buffers, PPM/PNG files and pygame blitting."""

from __future__ import annotations

import colorsys
import itertools
import os
from collections.abc import Mapping
from typing import List, Tuple

from PIL import Image

from .digits import SeedLike, extract_digits
from .errors import InvalidInput
from .grid import DEFAULT_GRID, Grid, Point
from .render import background_hsl, pixel_color, render, with_foundation

RGB = Tuple[int, int, int]

IMAGE_FORMATS = ("svg", "png", "ppm")


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """Hue in degrees, saturation and lightness in [0, 1]."""
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, clamp01(l), clamp01(s))
    return (round(r * 255.0), round(g * 255.0), round(b * 255.0))


def hex_to_rgb(color: str) -> RGB:
    color = color.lstrip("#")
    return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16))


def render_rgb(
    pixels: Mapping[Point, str], seed: SeedLike, grid: Grid = DEFAULT_GRID
) -> List[RGB]:
    """Row-major RGB buffer, one entry per grid cell, without the text overlay."""
    hue, saturation, lightness = background_hsl(seed)
    background = hsl_to_rgb(hue, saturation / 100.0, lightness / 100.0)
    leaf_density = extract_digits(seed).leaf_density
    buffer: List[RGB] = [background] * (grid.width * grid.height)
    for (x, y), kind in with_foundation(pixels, grid).items():
        if not grid.contains(x, y):
            continue
        color = pixel_color((x, y), kind, leaf_density)
        if color is not None:
            buffer[y * grid.width + x] = hex_to_rgb(color)
    return buffer


def save_ppm(path: str, grid: Grid, buffer: List[RGB]) -> None:
    with open(path, "w", encoding="ascii") as handle:
        handle.write(f"P3\n{grid.width} {grid.height}\n255\n")
        for y in range(grid.height):
            row = buffer[y * grid.width : (y + 1) * grid.width]
            for r, g, b in row:
                handle.write(f"{r} {g} {b} ")
            handle.write("\n")


def save_png(path: str, grid: Grid, buffer: List[RGB], scale: int = 1) -> None:
    img = Image.new("RGB", (grid.width, grid.height))
    img.putdata(buffer)
    if scale > 1:
        img = img.resize((grid.width * scale, grid.height * scale), Image.Resampling.NEAREST)
    img.save(path)


def save_image(
    path: str,
    pixels: Mapping[Point, str],
    seed: SeedLike,
    fmt: str,
    grid: Grid = DEFAULT_GRID,
    scale: int = 1,
) -> None:
    fmt = fmt.lower()
    if fmt not in IMAGE_FORMATS:
        raise InvalidInput(f"Unsupported image format: {fmt}")
    if fmt == "svg":
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(render(pixels, seed, grid))
        return
    buffer = render_rgb(pixels, seed, grid)
    if fmt == "ppm":
        save_ppm(path, grid, buffer)
    else:
        save_png(path, grid, buffer, scale=scale)


def next_output_path(output_dir: str, prefix: str, fmt: str) -> Tuple[str, int]:
    """First unused ``<prefix>_NNNN.<fmt>`` in ``output_dir`` and its index."""
    for index in itertools.count(1):
        path = os.path.join(output_dir, f"{prefix}_{index:04d}.{fmt}")
        if not os.path.exists(path):
            return path, index


def blit_pixels(surface, buffer: List[RGB], grid: Grid) -> None:
    surface.lock()
    try:
        for idx, color in enumerate(buffer[: grid.area]):
            y, x = divmod(idx, grid.width)
            surface.set_at((x, y), color)
    finally:
        surface.unlock()
