from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Protocol


class ScoreStore(Protocol):
    """Integer key-value store used for the last and best scores."""

    def get_int(self, key: str, default: int = 0) -> int: ...

    def set_int(self, key: str, value: int) -> None: ...


class InMemoryScoreStore:
    def __init__(self, initial: Dict[str, int] | None = None):
        self.values: Dict[str, int] = dict(initial or {})

    def get_int(self, key: str, default: int = 0) -> int:
        return self.values.get(key, default)

    def set_int(self, key: str, value: int) -> None:
        self.values[key] = int(value)


class JsonScoreStore:
    """Keeps scores in a flat JSON object on disk.

    A missing or unreadable file reads as empty; the file is rewritten on
    every ``set_int``.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> Dict[str, int]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        if not isinstance(payload, dict):
            return {}
        values: Dict[str, int] = {}
        for key, value in payload.items():
            try:
                values[str(key)] = int(value)
            except (TypeError, ValueError, OverflowError):
                continue
        return values

    def get_int(self, key: str, default: int = 0) -> int:
        return self._load().get(key, default)

    def set_int(self, key: str, value: int) -> None:
        values = self._load()
        values[key] = int(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(values, handle, indent=2, sort_keys=True)
