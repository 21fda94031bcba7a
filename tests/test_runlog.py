from __future__ import annotations

import json

from bonsai.runlog import StatsLogger, append_change_log, append_run_log, diff_args


def test_append_run_log_returns_previous(tmp_path) -> None:
    path = str(tmp_path / "log.json")
    assert append_run_log(path, {"run_index": 1}) is None
    assert append_run_log(path, {"run_index": 2}) == {"run_index": 1}
    with open(path, encoding="utf-8") as handle:
        assert [entry["run_index"] for entry in json.load(handle)] == [1, 2]


def test_corrupt_run_log_starts_over(tmp_path) -> None:
    path = tmp_path / "log.json"
    path.write_text("[", encoding="utf-8")
    assert append_run_log(str(path), {"run_index": 1}) is None


def test_diff_args() -> None:
    assert diff_args(None, {"args": {}}) == ["initial run"]
    changes = diff_args({"args": {"steps": 1, "seed": "a"}}, {"args": {"steps": 2, "seed": "a"}})
    assert changes == ["arg 'steps' changed from 1 to 2"]


def test_change_log_is_jsonl(tmp_path) -> None:
    path = str(tmp_path / "nested" / "changes.jsonl")
    config = {"timestamp": "t", "output_path": "p", "run_index": 1, "args": {"steps": 3}}
    append_change_log(path, None, config)
    append_change_log(path, config, dict(config, args={"steps": 4}))
    with open(path, encoding="utf-8") as handle:
        lines = [json.loads(line) for line in handle]
    assert lines[0]["changes"] == ["initial run"]
    assert lines[1]["changes"] == ["arg 'steps' changed from 3 to 4"]


def test_stats_logger(tmp_path) -> None:
    path = tmp_path / "stats.csv"
    with StatsLogger(str(path)) as stats:
        stats.log(1, "0.50000000", 1, 1, 0, 0, 0)
        stats.log(2, "0.50000000", 0, 9, 3, 2, 4, event="finished")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == StatsLogger.HEADER.strip()
    assert lines[1].startswith("1,")
    assert lines[2].endswith(",4,finished")
