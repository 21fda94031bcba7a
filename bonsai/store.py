"""Local JSON persistence of tree state keyed by token id."""

from __future__ import annotations

import json
import os
import re
from typing import List, Optional

from .errors import InvalidInput
from .simulation import SimulationState

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
_FILE_RE = re.compile(r"^tree_(.+)\.json$")


class TreeStore:
    def __init__(self, root: str) -> None:
        self.root = root

    def _path(self, token_id: str) -> str:
        token_id = str(token_id)
        if not _TOKEN_RE.match(token_id):
            raise InvalidInput(f"Invalid token id: {token_id!r}")
        return os.path.join(self.root, f"tree_{token_id}.json")

    def save(self, token_id: str, state: SimulationState) -> str:
        path = self._path(token_id)
        os.makedirs(self.root, exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(state.to_dict(), handle, indent=2)
        return path

    def load(self, token_id: str) -> Optional[SimulationState]:
        path = self._path(token_id)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise InvalidInput(f"Corrupt tree file {path}: {exc}") from exc
        return SimulationState.from_dict(data)

    def tokens(self) -> List[str]:
        if not os.path.isdir(self.root):
            return []
        found = []
        for name in sorted(os.listdir(self.root)):
            match = _FILE_RE.match(name)
            if match:
                found.append(match.group(1))
        return found
