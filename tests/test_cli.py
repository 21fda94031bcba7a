from __future__ import annotations

import csv
import json

from bonsai import cli
from bonsai.render import render
from bonsai.simulation import Simulation

SEED = "2.12345678"


def run(tmp_path, *extra: str) -> int:
    argv = [
        "--config",
        str(tmp_path / "missing_config.json"),
        "--output-dir",
        str(tmp_path / "out"),
        *extra,
    ]
    return cli.main(argv)


def test_grows_and_saves_svg(tmp_path, capsys) -> None:
    assert run(tmp_path, "--seed", SEED) == 0
    path = tmp_path / "out" / "bonsai_0001.svg"
    assert path.exists()

    sim = Simulation(SEED)
    list(sim.auto_grow())
    assert path.read_text(encoding="utf-8") == render(sim.state.pixels, sim.state.seed)

    out = capsys.readouterr().out
    assert "Tree reached its final shape." in out
    assert f"Saved: {path}" in out


def test_run_and_change_logs(tmp_path) -> None:
    assert run(tmp_path, "--steps", "3") == 0
    assert run(tmp_path, "--steps", "4", "--run-note", "longer") == 0

    out_dir = tmp_path / "out"
    assert (out_dir / "bonsai_0002.svg").exists()
    entries = json.loads((out_dir / "image_generation_log.json").read_text(encoding="utf-8"))
    assert [e["steps"] for e in entries] == [3, 4]
    assert entries[1]["last_instructions"] == "longer"
    assert entries[1]["seed"] == SEED

    changes = [
        json.loads(line)
        for line in (out_dir / "image_generation_changes.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert changes[0]["changes"] == ["initial run"]
    assert any("'steps'" in change for change in changes[1]["changes"])


def test_store_resumes_token(tmp_path) -> None:
    store = str(tmp_path / "trees")
    assert run(tmp_path, "--store", store, "--token", "9", "--steps", "5") == 0
    assert run(tmp_path, "--store", store, "--token", "9", "--steps", "5") == 0

    saved = json.loads((tmp_path / "trees" / "tree_9.json").read_text(encoding="utf-8"))
    assert saved["step"] == 10

    sim = Simulation(SEED)
    list(sim.auto_grow(max_steps=10))
    assert saved == sim.state.to_dict()


def test_config_file_supplies_defaults(tmp_path) -> None:
    config_path = tmp_path / "bonsai.json"
    config_path.write_text(
        json.dumps(
            {
                "seed": "0.5",
                "steps": 2,
                "output_dir": str(tmp_path / "cfg_out"),
                "output_prefix": "tree",
                "output_format": "ppm",
            }
        ),
        encoding="utf-8",
    )
    assert cli.main(["--config", str(config_path)]) == 0
    assert (tmp_path / "cfg_out" / "tree_0001.ppm").exists()
    log = json.loads((tmp_path / "cfg_out" / "image_generation_log.json").read_text(encoding="utf-8"))
    assert log[0]["seed"] == "0.50000000"
    assert log[0]["steps"] == 2


def test_render_every_saves_frames(tmp_path) -> None:
    assert run(tmp_path, "--steps", "4", "--render-every", "2") == 0
    out_dir = tmp_path / "out"
    assert (out_dir / "bonsai_0001_step002.svg").exists()
    assert (out_dir / "bonsai_0001_step004.svg").exists()
    assert (out_dir / "bonsai_0001.svg").exists()


def test_invalid_seed(tmp_path, capsys) -> None:
    assert run(tmp_path, "--seed", "abc") == 2
    assert "Invalid input" in capsys.readouterr().err


def test_stats_csv(tmp_path) -> None:
    stats_path = tmp_path / "stats.csv"
    assert run(tmp_path, "--steps", "6", "--stats-csv", str(stats_path)) == 0
    with open(stats_path, newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [int(row["step"]) for row in rows] == [1, 2, 3, 4, 5, 6]
    assert all(row["seed"] == SEED for row in rows)


def test_auto_mode_is_reproducible(tmp_path) -> None:
    assert run(tmp_path, "--auto", "--shuffle-seed", "7", "--steps", "20") == 0
    assert run(tmp_path, "--auto", "--shuffle-seed", "7", "--steps", "20") == 0
    out_dir = tmp_path / "out"
    first = (out_dir / "bonsai_0001.svg").read_text(encoding="utf-8")
    second = (out_dir / "bonsai_0002.svg").read_text(encoding="utf-8")
    assert first == second


def test_explain(tmp_path, capsys) -> None:
    assert run(tmp_path, "--explain", "--steps", "1") == 0
    out = capsys.readouterr().out
    assert f"Seed {SEED}" in out
    assert "Digit 8:" in out
