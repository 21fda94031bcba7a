"""Grid geometry shared by the automaton, scorer and renderers."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidInput

# Categories a grid cell can hold.
TRUNK = "trunk"
TRUNK_THICK = "trunk_thick"
BRANCH = "branch"
LEAF = "leaf"
ROOT = "root"

CATEGORIES = (TRUNK, TRUNK_THICK, BRANCH, LEAF, ROOT)

Point = tuple[int, int]

# Smallest grid that still fits the foundation and a trunk leader.
MIN_SIZE = 8


@dataclass(frozen=True)
class Grid:
    width: int = 32
    height: int = 32

    def __post_init__(self) -> None:
        if self.width < MIN_SIZE or self.height < MIN_SIZE:
            raise InvalidInput(
                f"Grid must be at least {MIN_SIZE}x{MIN_SIZE}, got {self.width}x{self.height}"
            )

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center_x(self) -> int:
        # Column of the main trunk.
        return self.width // 2

    @property
    def base_y(self) -> int:
        return self.height - 1

    @property
    def max_trunk_height(self) -> int:
        # Trunk starts at base_y - 2 and stops one row below the top edge.
        return self.height - 4

    @property
    def scale(self) -> float:
        return self.height / 32

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def far_or_high(self, x: int, y: int) -> bool:
        """True where a dying branch is allowed to sprout a foliage pad."""
        return abs(x - self.center_x) >= 3 or y < self.height * 0.6

    def foundation(self) -> list[tuple[Point, str]]:
        """Root base row and the thick trunk stub drawn under every tree."""
        cx = self.center_x
        by = self.base_y
        cells: list[tuple[Point, str]] = []
        for x in range(cx - 3, cx + 4):
            if self.contains(x, by):
                cells.append(((x, by), ROOT))
        for y in (by - 1, by - 2):
            cells.append(((cx, y), TRUNK))
            cells.append(((cx - 1, y), TRUNK_THICK))
            cells.append(((cx + 1, y), TRUNK_THICK))
        return cells


DEFAULT_GRID = Grid()
