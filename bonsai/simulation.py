"""Simulation driver: owns a tree's evolving state between growth steps.

Each "watering" advances the tree by exactly one step. Growth parameters are
re-derived from whatever seed accompanies the step, so a changed wallet value
steers the next step without touching the history already grown.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

from .automaton import Pixels, grow_step
from .digits import SeedLike, extract_digits, format_seed
from .errors import GrowthFinished, InvalidInput
from .grid import CATEGORIES, DEFAULT_GRID, Grid
from .render import render
from .score import ScoreResult, score
from .tips import Tip, TrunkTip, tip_from_dict, tip_to_dict


@dataclass
class SimulationState:
    seed: str
    pixels: Pixels = field(default_factory=dict)
    tips: list[Tip] = field(default_factory=list)
    step: int = 0
    grid: Grid = DEFAULT_GRID

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "step": self.step,
            "grid": {"width": self.grid.width, "height": self.grid.height},
            "pixels": [{"x": x, "y": y, "type": kind} for (x, y), kind in self.pixels.items()],
            "tips": [tip_to_dict(tip) for tip in self.tips],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationState":
        try:
            grid_data = data.get("grid") or {}
            grid = Grid(
                width=int(grid_data.get("width", DEFAULT_GRID.width)),
                height=int(grid_data.get("height", DEFAULT_GRID.height)),
            )
            pixels: Pixels = {}
            for record in data["pixels"]:
                kind = record["type"]
                if kind not in CATEGORIES:
                    raise InvalidInput(f"Unknown pixel type: {kind!r}")
                x, y = int(record["x"]), int(record["y"])
                if not grid.contains(x, y):
                    raise InvalidInput(f"Pixel ({x}, {y}) lies outside the grid")
                pixels[(x, y)] = kind
            tips = [tip_from_dict(record) for record in data["tips"]]
            for tip in tips:
                if not grid.contains(tip.x, tip.y):
                    raise InvalidInput(f"Tip at ({tip.x}, {tip.y}) lies outside the grid")
            state = cls(
                seed=format_seed(data["seed"]),
                pixels=pixels,
                tips=tips,
                step=int(data["step"]),
                grid=grid,
            )
        except InvalidInput:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise InvalidInput(f"Malformed simulation state: {exc}") from exc
        return state


def initialize(seed: SeedLike, grid: Grid = DEFAULT_GRID) -> SimulationState:
    """Fresh tree: no growth pixels and a single trunk leader above the base."""
    params = extract_digits(seed)
    leader = TrunkTip(
        x=grid.center_x,
        y=grid.base_y - 2,
        life=grid.max_trunk_height,
        curve=1 if params.trunk_curve >= 5 else -1,
    )
    return SimulationState(seed=format_seed(seed), tips=[leader], grid=grid)


def can_grow(state: SimulationState) -> bool:
    return bool(state.tips)


def advance_one_step(state: SimulationState, seed: Optional[SeedLike] = None) -> SimulationState:
    """Apply one growth step and return the new state.

    A finished tree (no tips left) is returned unchanged.
    """
    current = state.seed if seed is None else format_seed(seed)
    if not can_grow(state):
        return state
    params = extract_digits(current)
    pixels, tips, step = grow_step(state.pixels, state.tips, params, state.step, state.grid)
    return SimulationState(seed=current, pixels=pixels, tips=tips, step=step, grid=state.grid)


class Simulation:
    """One tree instance. Steps against it must be applied strictly in order."""

    def __init__(self, seed: SeedLike, grid: Grid = DEFAULT_GRID) -> None:
        self.state = initialize(seed, grid)

    @classmethod
    def from_state(cls, state: SimulationState) -> "Simulation":
        sim = cls.__new__(cls)
        sim.state = state
        return sim

    @property
    def finished(self) -> bool:
        return not can_grow(self.state)

    def reset(self, seed: Optional[SeedLike] = None) -> SimulationState:
        self.state = initialize(self.state.seed if seed is None else seed, self.state.grid)
        return self.state

    def step(self, seed: Optional[SeedLike] = None) -> SimulationState:
        self.state = advance_one_step(self.state, seed)
        return self.state

    def water(self, seed: Optional[SeedLike] = None) -> SimulationState:
        """Like :meth:`step`, but watering a finished tree is an error."""
        if self.finished:
            raise GrowthFinished(
                f"Tree reached its final shape after {self.state.step} steps"
            )
        return self.step(seed)

    def auto_grow(
        self,
        seeds: Optional[Iterable[SeedLike]] = None,
        max_steps: int = 0,
    ) -> Iterator[SimulationState]:
        """Yield the state after every step until growth stops.

        ``seeds`` supplies a new seed per tick (the current seed is reused when
        omitted). ``max_steps`` of 0 means no limit. Stop iterating to cancel.
        """
        source = iter(seeds) if seeds is not None else None
        taken = 0
        while not self.finished and (max_steps <= 0 or taken < max_steps):
            if source is None:
                seed = None
            else:
                try:
                    seed = next(source)
                except StopIteration:
                    return
            taken += 1
            yield self.step(seed)

    def score(self) -> ScoreResult:
        return score(self.state.pixels, self.state.grid)

    def svg(self) -> str:
        return render(self.state.pixels, self.state.seed, self.state.grid)
