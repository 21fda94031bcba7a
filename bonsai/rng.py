"""Deterministic percentage draws.

Not a random source: every decision point mixes the step counter, tip
position and remaining life into an integer with its own fixed constants and
reduces it here. The constants are part of the reproducibility contract with
the counterpart implementation and must not change.
"""

from __future__ import annotations


def percent(seed: int) -> int:
    """Map an integer mixing seed to [0, 99]."""
    # Python's modulo already floors, so negative seeds land in range too.
    return seed % 100


def trunk_branch_seed(step: int, x: int, y: int, life: int) -> int:
    return (step * 31 + x * 17 + y * 13 + life * 7) * 97


def secondary_branch_seed(step: int, x: int, y: int, life: int) -> int:
    return (step * 23 + x * 11 + y * 7 + life * 3) * 89


def thicken_left_seed(step: int, x: int, y: int) -> int:
    return (step * 37 + x * 19 + y * 23) * 73


def thicken_right_seed(step: int, x: int, y: int) -> int:
    return (step * 41 + x * 29 + y * 31) * 79


def foliage_seed(step: int, index: int, x: int, y: int) -> int:
    return step * 11 + index * 17 + x * 7 + y * 13
