"""Bounded quality score for a grown tree."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from .grid import BRANCH, DEFAULT_GRID, LEAF, Grid, Point

MAX_SCORE = 100
AGE_POINTS = 30
BRANCH_POINTS = 35
FOLIAGE_POINTS = 35


def round_half_up(value: float) -> int:
    # Matches JavaScript's Math.round, which the stored scores were made with.
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ScoreResult:
    total: int
    age: int
    branches: int
    foliage: int
    age_score: int = 0
    branch_score: int = 0
    foliage_score: int = 0
    max_score: int = MAX_SCORE


def score(pixels: Mapping[Point, str], grid: Grid = DEFAULT_GRID) -> ScoreResult:
    """Score growth pixels (the render-time foundation is not counted).

    Age tops out once ~15% of the grid is filled, branches at 0.85 per row of
    height and foliage at ~13% of the grid, so the caps scale with grid size.
    """
    age = round_half_up(len(pixels) / 5)
    kinds = list(pixels.values())
    branches = kinds.count(BRANCH)
    foliage = kinds.count(LEAF)

    max_age = grid.area * 0.15 / 5
    max_branches = grid.height * 0.85
    max_foliage = grid.area * 0.13

    age_score = min((age / max_age) * AGE_POINTS, AGE_POINTS)
    branch_score = min((branches / max_branches) * BRANCH_POINTS, BRANCH_POINTS)
    foliage_score = min((foliage / max_foliage) * FOLIAGE_POINTS, FOLIAGE_POINTS)

    return ScoreResult(
        total=round_half_up(age_score + branch_score + foliage_score),
        age=age,
        branches=branches,
        foliage=foliage,
        age_score=round_half_up(age_score),
        branch_score=round_half_up(branch_score),
        foliage_score=round_half_up(foliage_score),
    )
