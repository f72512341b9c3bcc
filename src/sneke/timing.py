# timing.py
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from .config import (
    MIN_ROWS, MIN_COLS,
    MIN_SPEED, MAX_SPEED, DEFAULT_SPEED,
    SLOWEST_PERIOD_MS, PERIOD_STEP_MS,
)

logger = logging.getLogger(__name__)


def clamp_speed(setting) -> int:
    """Coerce a stored or typed speed into 1..10; junk or < 1 means the default."""
    try:
        value = int(setting)
    except (TypeError, ValueError):
        return DEFAULT_SPEED
    if value < MIN_SPEED:
        return DEFAULT_SPEED
    return min(value, MAX_SPEED)

def speed_to_period_ms(setting: int) -> int:
    """Higher setting = shorter period: 1 -> 400ms, 10 -> 94ms."""
    return SLOWEST_PERIOD_MS - (clamp_speed(setting) - 1) * PERIOD_STEP_MS

def grid_size_for(width_px: int, height_px: int, cell_px: int) -> Tuple[int, int]:
    """How many (rows, cols) of cell_px squares fit the surface, never below the minimum."""
    cell_px = max(1, int(cell_px))
    cols = max(MIN_COLS, int(width_px) // cell_px)
    rows = max(MIN_ROWS, int(height_px) // cell_px)
    return rows, cols


@dataclass
class Ticker:
    """
    Host-side periodic timer, polled from the frame loop.

    ``due(now)`` reports (and consumes) at most one tick per call. Changing the
    period goes through ``reschedule``, which restarts the countdown from
    ``now``; the engine is never touched. ``stop`` is the only way to cancel.
    """
    period_ms: int
    next_ms: Optional[int] = None   # None -> stopped

    @property
    def active(self) -> bool:
        return self.next_ms is not None

    def start(self, now_ms: int) -> None:
        self.next_ms = now_ms + self.period_ms

    def stop(self) -> None:
        self.next_ms = None

    def reschedule(self, period_ms: int, now_ms: int) -> None:
        logger.debug("tick period %dms -> %dms", self.period_ms, period_ms)
        self.period_ms = period_ms
        if self.active:
            self.start(now_ms)

    def due(self, now_ms: int) -> bool:
        if self.next_ms is None or now_ms < self.next_ms:
            return False
        self.next_ms += self.period_ms
        # Fell behind by more than a period: missed ticks are dropped, not replayed
        if self.next_ms <= now_ms:
            self.next_ms = now_ms + self.period_ms
        return True
