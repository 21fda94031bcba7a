"""Growth parameters derived from the decimal digits of a seed value.

A seed is a wallet-style balance such as ``2.12345678``. Only the eight
fractional digits matter; each one steers one axis of growth.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

from .errors import InvalidInput

SeedLike = Union[int, float, str, Decimal]

DIGIT_COUNT = 8
_QUANTUM = Decimal(1).scaleb(-DIGIT_COUNT)


@dataclass(frozen=True)
class GrowthParameters:
    trunk_curve: int
    curve_change: int
    branch_spawn: int
    branch_dir: int
    branch_length: int
    leaf_density: int
    thickening: int
    branch_angle: int


def _as_decimal(seed: SeedLike) -> Decimal:
    if isinstance(seed, bool):
        raise InvalidInput(f"Seed must be numeric, got {seed!r}")
    if isinstance(seed, Decimal):
        value = seed
    elif isinstance(seed, float):
        # repr() gives the shortest round-tripping text, so 2.12345678
        # reads back as exactly eight digits instead of ...77999.
        value = Decimal(repr(seed))
    elif isinstance(seed, (int, str)):
        try:
            value = Decimal(str(seed).strip())
        except InvalidOperation as exc:
            raise InvalidInput(f"Seed is not a number: {seed!r}") from exc
    else:
        raise InvalidInput(f"Seed must be numeric, got {type(seed).__name__}")
    if not value.is_finite():
        raise InvalidInput(f"Seed must be finite, got {seed!r}")
    if value < 0:
        raise InvalidInput(f"Seed must be non-negative, got {seed!r}")
    return value


def seed_digits(seed: SeedLike) -> tuple[int, ...]:
    """Return the eight fractional digits, padded with zeros or truncated."""
    value = _as_decimal(seed)
    fraction = (value - value.to_integral_value(rounding=ROUND_DOWN)).quantize(
        _QUANTUM, rounding=ROUND_DOWN
    )
    text = format(fraction, "f").partition(".")[2]
    text = text.ljust(DIGIT_COUNT, "0")[:DIGIT_COUNT]
    return tuple(int(ch) for ch in text)


def extract_digits(seed: SeedLike) -> GrowthParameters:
    return GrowthParameters(*seed_digits(seed))


def format_seed(seed: SeedLike) -> str:
    value = _as_decimal(seed)
    whole = int(value.to_integral_value(rounding=ROUND_DOWN))
    return f"{whole}." + "".join(str(d) for d in seed_digits(value))


def shuffle_seed(rand: random.Random) -> float:
    """Draw a fresh wallet-like value: one integer digit and eight decimals."""
    return math.floor(rand.random() * 10) + round(rand.random(), DIGIT_COUNT)


def _tier(value: int, low: str, mid: str, high: str) -> str:
    if value < 3:
        return low
    if value < 7:
        return mid
    return high


def describe(params: GrowthParameters) -> list[tuple[str, str, str]]:
    """Human-readable (name, value, label) rows, one per digit."""
    p = params
    spawn_pct = math.floor((0.4 + p.branch_spawn / 15) * 100 + 0.5)
    return [
        ("Trunk Curve", f"{p.trunk_curve}/10",
         _tier(p.trunk_curve, "Straight", "Moderate", "High curve")),
        ("Change", f"{4 + p.curve_change} steps", "Direction switch"),
        ("Branch", f"{spawn_pct}%", _tier(p.branch_spawn, "Sparse", "Moderate", "Dense")),
        ("Direction", "Right" if p.branch_dir >= 5 else "Left", "Branch direction"),
        ("Length", f"{8 + math.floor(p.branch_length * 1.2)} px",
         _tier(p.branch_length, "Short", "Medium", "Long")),
        ("Leaves", f"{3 + math.floor(p.leaf_density * 0.8)}/step",
         _tier(p.leaf_density, "Sparse", "Medium", "Lush")),
        ("Thick", f"{p.thickening}/10", _tier(p.thickening, "Thin", "Medium", "Thick")),
        ("Angle", "Upward" if p.branch_angle >= 3 else "Horizontal", "Branch angle"),
    ]
