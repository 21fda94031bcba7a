"""Active growth points.

Three kinds of tip drive the tree: the single trunk leader, branches spawned
off the trunk or other branches, and foliage spawners that sit at a branch
end and scatter leaves around it. Tips are immutable; each growth step emits
replacements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import InvalidInput
from .grid import BRANCH, TRUNK

FOLIAGE_SPAWNER = "foliage_spawner"


@dataclass(frozen=True)
class TrunkTip:
    x: int
    y: int
    life: int
    curve: int
    dx: int = 0
    dy: int = -1

    category = TRUNK


@dataclass(frozen=True)
class BranchTip:
    x: int
    y: int
    life: int
    curve: int
    dx: int
    dy: int

    category = BRANCH


@dataclass(frozen=True)
class FoliageSpawner:
    x: int
    y: int
    life: int


Tip = Union[TrunkTip, BranchTip, FoliageSpawner]


def tip_to_dict(tip: Tip) -> dict:
    if isinstance(tip, FoliageSpawner):
        return {"type": FOLIAGE_SPAWNER, "x": tip.x, "y": tip.y, "life": tip.life}
    return {
        "type": tip.category,
        "x": tip.x,
        "y": tip.y,
        "dir": {"x": tip.dx, "y": tip.dy},
        "life": tip.life,
        "curve": tip.curve,
    }


def tip_from_dict(data: dict) -> Tip:
    try:
        kind = data["type"]
        x, y, life = int(data["x"]), int(data["y"]), int(data["life"])
        if kind == FOLIAGE_SPAWNER:
            return FoliageSpawner(x=x, y=y, life=life)
        heading = data.get("dir") or {}
        dx = int(heading.get("x", 0))
        dy = int(heading.get("y", -1 if kind == TRUNK else 0))
        curve = int(data["curve"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Malformed tip record: {data!r}") from exc
    if kind == TRUNK:
        return TrunkTip(x=x, y=y, life=life, curve=curve, dx=dx, dy=dy)
    if kind == BRANCH:
        return BranchTip(x=x, y=y, life=life, curve=curve, dx=dx, dy=dy)
    raise InvalidInput(f"Unknown tip type: {kind!r}")
