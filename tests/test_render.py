from __future__ import annotations

import pytest

from bonsai.errors import InvalidInput
from bonsai.grid import BRANCH, LEAF, Grid
from bonsai.render import background_color, render, score_color
from bonsai.simulation import Simulation

SEED = "2.12345678"


def test_background_from_digits() -> None:
    assert background_color(SEED) == "hsl(123, 32%, 18.5%)"
    assert background_color("0.00000000") == "hsl(0, 15%, 12%)"
    assert background_color("0.99999999") == "hsl(279, 51%, 21%)"


def test_empty_tree_svg() -> None:
    svg = render({}, SEED)
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 32 32"')
    assert svg.endswith("</svg>")
    assert 'fill="hsl(123, 32%, 18.5%)"' in svg
    # Foundation is drawn even before any growth.
    assert '<rect x="13" y="31" width="1" height="1" fill="#5D4037"/>' in svg
    assert '<rect x="16" y="29" width="1" height="1" fill="#795548"/>' in svg
    assert svg.count("<text ") == 4
    assert "⭐    0/100" in svg
    assert 'fill="#888"' in svg


def test_leaves_render_as_circles() -> None:
    svg = render({(20, 10): LEAF, (21, 10): LEAF, (5, 5): BRANCH}, SEED)
    # (20*7 + 10*13) % 10 == 0 < leaf density 6
    assert '<circle cx="20.5" cy="10.5" r="0.45" fill="#66BB6A"/>' in svg
    # (21*7 + 10*13) % 10 == 7
    assert '<circle cx="21.5" cy="10.5" r="0.45" fill="#2E7D32"/>' in svg
    assert '<rect x="5" y="5" width="1" height="1" fill="#8D6E63"/>' in svg


def test_foundation_is_not_overridden() -> None:
    svg = render({(16, 30): LEAF}, SEED)
    assert 'cx="16.5" cy="30.5"' not in svg


def test_render_is_idempotent() -> None:
    sim = Simulation(SEED)
    list(sim.auto_grow(max_steps=30))
    first = render(sim.state.pixels, sim.state.seed)
    second = render(sim.state.pixels, sim.state.seed)
    assert first == second
    assert sim.svg() == first


def test_text_rows_follow_grid_height() -> None:
    svg = render({}, SEED, Grid(width=64, height=64))
    assert 'viewBox="0 0 64 64"' in svg
    assert '<text x="1" y="57"' in svg
    assert '<text x="1" y="63"' in svg


def test_score_colors() -> None:
    assert score_color(80) == "#66BB6A"
    assert score_color(50) == "#FFA726"
    assert score_color(25) == "#76c7c0"
    assert score_color(24) == "#888"


def test_bad_seed_is_rejected() -> None:
    with pytest.raises(InvalidInput):
        render({}, "-2.5")
