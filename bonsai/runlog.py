"""Run bookkeeping for the command-line driver."""

from __future__ import annotations

import json
import os
import time
from typing import IO, List, Optional


def append_run_log(path: str, config: dict) -> Optional[dict]:
    """Append ``config`` to a JSON list file and return the previous entry."""
    data: List[dict] = []
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError):
            data = []
    last_config = data[-1] if data else None
    data.append(config)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2)
    return last_config


def diff_args(last_config: Optional[dict], new_config: dict) -> List[str]:
    if last_config is None:
        return ["initial run"]
    changes: List[str] = []
    last_args = last_config.get("args", {})
    new_args = new_config.get("args", {})
    for key in sorted(set(last_args.keys()) | set(new_args.keys())):
        if last_args.get(key) != new_args.get(key):
            changes.append(
                f"arg '{key}' changed from {last_args.get(key)} to {new_args.get(key)}"
            )
    return changes


def append_change_log(path: str, last_config: Optional[dict], new_config: dict) -> None:
    entry = {
        "timestamp": new_config["timestamp"],
        "output_path": new_config["output_path"],
        "run_index": new_config["run_index"],
        "changes": diff_args(last_config, new_config),
    }
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(entry) + "\n")


class StatsLogger:
    """Per-step growth telemetry as CSV."""

    HEADER = "step,time_s,seed,tips,pixels,branches,foliage,total,event\n"

    def __init__(self, path: str) -> None:
        self._path = path
        self._fh: Optional[IO[str]] = None
        self._t0 = time.monotonic()

    def open(self) -> None:
        self._fh = open(self._path, "w", encoding="utf-8")
        self._fh.write(self.HEADER)

    def log(
        self,
        step: int,
        seed: str,
        tips: int,
        pixels: int,
        branches: int,
        foliage: int,
        total: int,
        event: str = "",
    ) -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        self._fh.write(
            f"{step},{t:.3f},{seed},{tips},{pixels},{branches},{foliage},{total},{event}\n"
        )
        if event:
            self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "StatsLogger":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
