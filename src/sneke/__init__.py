"""Single-player grid snake: simulation engine plus a pygame front end."""

from sneke.game import Engine, LockedEngine, GameOver, Snapshot, Status, StepResult, place_food
from sneke.prefs import Preferences, MemoryStore, JsonFileStore
from sneke.timing import Ticker, speed_to_period_ms, grid_size_for

__all__ = [
    "Engine", "LockedEngine", "GameOver", "Snapshot", "Status", "StepResult", "place_food",
    "Preferences", "MemoryStore", "JsonFileStore",
    "Ticker", "speed_to_period_ms", "grid_size_for",
]
