"""Deterministic seed-driven bonsai growth."""

from .automaton import grow_step
from .digits import GrowthParameters, extract_digits
from .errors import BonsaiError, GrowthFinished, InvalidInput
from .grid import DEFAULT_GRID, Grid
from .render import render
from .score import ScoreResult, score
from .simulation import Simulation, SimulationState, advance_one_step, can_grow, initialize
from .tips import BranchTip, FoliageSpawner, TrunkTip

__all__ = [
    "BonsaiError",
    "BranchTip",
    "DEFAULT_GRID",
    "FoliageSpawner",
    "Grid",
    "GrowthFinished",
    "GrowthParameters",
    "InvalidInput",
    "ScoreResult",
    "Simulation",
    "SimulationState",
    "TrunkTip",
    "advance_one_step",
    "can_grow",
    "extract_digits",
    "grow_step",
    "initialize",
    "render",
    "score",
]
