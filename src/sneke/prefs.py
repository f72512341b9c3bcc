# prefs.py
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Dict, Iterator
import json
import logging
import os

from .config import BEST_KEY, SPEED_KEY
from .timing import clamp_speed

logger = logging.getLogger(__name__)


class MemoryStore(dict):
    """In-process store; nothing survives the process."""


class JsonFileStore(MutableMapping):
    """
    String key/value pairs kept in a flat JSON object on disk.
    The file is read once and rewritten on every change.
    """

    def __init__(self, path: str):
        self.path = path
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("could not read preferences from %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("ignoring preferences in %s: not a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.warning("could not write preferences to %s: %s", self.path, e)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._save()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._save()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class Preferences:
    """The two values the game remembers between sessions: best score and speed."""

    def __init__(self, store: MutableMapping):
        self.store = store

    @property
    def best_score(self) -> int:
        try:
            return max(0, int(self.store.get(BEST_KEY, 0)))
        except (TypeError, ValueError):
            return 0

    @best_score.setter
    def best_score(self, value: int) -> None:
        # Never goes down
        if value > self.best_score:
            self.store[BEST_KEY] = str(int(value))

    @property
    def speed(self) -> int:
        return clamp_speed(self.store.get(SPEED_KEY))

    @speed.setter
    def speed(self, value: int) -> None:
        self.store[SPEED_KEY] = str(clamp_speed(value))
