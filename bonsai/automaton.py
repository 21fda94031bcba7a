"""One growth step of the bonsai automaton.

Tips are processed in list order and pixels written earlier in a step win,
so the order of ``tips`` and the insertion order of ``pixels`` are both part
of the result. Every probabilistic choice goes through :func:`rng.percent`
with a fixed mixing formula so that two implementations stepping the same
state with the same seed digits stay in lock step.
"""

from __future__ import annotations

import math
from dataclasses import replace

from . import rng
from .digits import GrowthParameters
from .grid import DEFAULT_GRID, LEAF, TRUNK, TRUNK_THICK, Grid, Point
from .tips import BranchTip, FoliageSpawner, Tip, TrunkTip

Pixels = dict[Point, str]

THICKEN_EVERY = 3
# A spawner loses one life for the step and one more for its own decay.
SPAWNER_DECAY = 2


def foliage_life(params: GrowthParameters) -> int:
    return 6 + params.leaf_density // 2


def trunk_branch_life(params: GrowthParameters, y: int, grid: Grid) -> int:
    # Lower branches get a bonus so the crown spreads wider at the base.
    base = math.floor((10 + params.branch_length * 1.5) * grid.scale)
    return base + max(0, (y - 10) // 3)


def sub_branch_life(params: GrowthParameters, grid: Grid) -> int:
    return math.floor((6 + params.branch_length * 0.8) * grid.scale)


def _trunk_heading(
    tip: TrunkTip,
    params: GrowthParameters,
    step: int,
    grid: Grid,
    spawned: list[Tip],
) -> tuple[int, int, int]:
    # Sinuous moyogi-style leader: flip the bias on a digit-driven cadence.
    change_every = 3 + math.floor(params.curve_change * 0.8)
    curve = -tip.curve if tip.life % change_every == 0 else tip.curve
    dx = curve if step % 8 < params.trunk_curve else 0

    if tip.life < grid.max_trunk_height - 2:
        chance = min(50 + params.branch_spawn * 100 // 12, 100)
        draw = rng.percent(rng.trunk_branch_seed(step, tip.x, tip.y, tip.life))
        if draw < chance:
            side = 1 if params.branch_dir >= 5 else -1
            spawned.append(
                BranchTip(
                    x=tip.x,
                    y=tip.y,
                    life=trunk_branch_life(params, tip.y, grid),
                    curve=side,
                    dx=side,
                    dy=0,
                )
            )
    return dx, -1, curve


def _branch_heading(
    tip: BranchTip,
    params: GrowthParameters,
    step: int,
    grid: Grid,
    spawned: list[Tip],
) -> tuple[int, int, int]:
    dy = -1 if params.branch_angle >= 3 and step % 2 == 0 else 0
    dx = 0 if step % 5 == 0 else tip.curve

    height_pct = abs(tip.y) * 100 // grid.height
    chance = 20 + height_pct * 30 // 100
    draw = rng.percent(rng.secondary_branch_seed(step, tip.x, tip.y, tip.life))
    if tip.life > 5 and tip.life % 6 == 0 and draw < chance:
        spawned.append(
            BranchTip(
                x=tip.x,
                y=tip.y,
                life=sub_branch_life(params, grid),
                curve=-tip.curve,
                dx=-tip.curve,
                dy=-1,
            )
        )
    return dx, dy, tip.curve


def scatter_leaves(
    pixels: Pixels,
    tip: FoliageSpawner,
    params: GrowthParameters,
    step: int,
    grid: Grid,
) -> int:
    """Drop a flattened cloud of leaves around a spawner. Returns leaves added."""
    radius = 2 + params.leaf_density // 5
    span = radius * 2 + 1
    count = 3 + math.floor(params.leaf_density * 0.8)
    added = 0
    for i in range(count):
        mix = rng.foliage_seed(step, i, tip.x, tip.y)
        ox = (mix * 19) % span - radius
        oy = (mix * 23) % span - radius
        if math.sqrt(ox * ox + oy * oy * 0.7) > radius:
            continue
        lx = tip.x + ox
        ly = tip.y + oy
        # Keep a clear gap around the trunk.
        if abs(lx - grid.center_x) < 2:
            continue
        if grid.contains(lx, ly) and (lx, ly) not in pixels:
            pixels[(lx, ly)] = LEAF
            added += 1
    return added


def _advance(
    pixels: Pixels,
    tip: TrunkTip | BranchTip,
    heading: tuple[int, int, int],
    params: GrowthParameters,
    grid: Grid,
    out: list[Tip],
) -> None:
    dx, dy, curve = heading
    nx = tip.x + dx
    ny = tip.y + dy
    if not grid.contains(nx, ny):
        return
    existing = pixels.get((nx, ny))
    if existing is None or existing == LEAF:
        if existing is not None:
            # Wood grows through foliage; re-insert so it sorts as new growth.
            del pixels[(nx, ny)]
        pixels[(nx, ny)] = tip.category
        out.append(replace(tip, x=nx, y=ny, dx=dx, dy=dy, life=tip.life - 1, curve=curve))
    elif isinstance(tip, BranchTip) and grid.far_or_high(tip.x, tip.y):
        out.append(FoliageSpawner(x=tip.x, y=tip.y, life=foliage_life(params)))


def thicken(pixels: Pixels, params: GrowthParameters, step: int, grid: Grid) -> int:
    """Pipe-model pass: widen plain trunk cells, more so near the base."""
    trunk_cells = [point for point, kind in pixels.items() if kind == TRUNK]
    added = 0
    for x, y in trunk_cells:
        height_pct = (y - 10) * 100 // 30 if y > 10 else 0
        chance = ((params.thickening * 100 + 450) * height_pct) // 3000
        left = (x - 1, y)
        right = (x + 1, y)
        if (
            grid.contains(*left)
            and left not in pixels
            and rng.percent(rng.thicken_left_seed(step, x, y)) < chance
        ):
            pixels[left] = TRUNK_THICK
            added += 1
        if (
            grid.contains(*right)
            and right not in pixels
            and rng.percent(rng.thicken_right_seed(step, x, y)) < chance
        ):
            pixels[right] = TRUNK_THICK
            added += 1
    return added


def grow_step(
    pixels: Pixels,
    tips: list[Tip],
    params: GrowthParameters,
    step: int,
    grid: Grid = DEFAULT_GRID,
) -> tuple[Pixels, list[Tip], int]:
    """Advance the tree by one step without mutating the inputs."""
    next_pixels: Pixels = dict(pixels)
    next_tips: list[Tip] = []

    for tip in tips:
        if tip.life <= 0:
            if isinstance(tip, BranchTip) and grid.far_or_high(tip.x, tip.y):
                next_tips.append(FoliageSpawner(x=tip.x, y=tip.y, life=foliage_life(params)))
            continue

        if isinstance(tip, FoliageSpawner):
            scatter_leaves(next_pixels, tip, params, step, grid)
            life = tip.life - SPAWNER_DECAY
            if life > 0:
                next_tips.append(replace(tip, life=life))
            continue

        if isinstance(tip, TrunkTip):
            heading = _trunk_heading(tip, params, step, grid, next_tips)
        else:
            heading = _branch_heading(tip, params, step, grid, next_tips)
        _advance(next_pixels, tip, heading, params, grid, next_tips)

    step += 1
    if step % THICKEN_EVERY == 0:
        thicken(next_pixels, params, step, grid)
    return next_pixels, next_tips, step
