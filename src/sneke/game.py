# game.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging
import random
import threading
import time

import numpy as np  # type: ignore

from .config import MIN_ROWS, MIN_COLS, DELTAS, RIGHT

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (row, col)

# Cell codes used by Snapshot.to_grid()
EMPTY, BODY, HEAD, FOOD = 0, 1, 2, 3


class Status(str, Enum):
    IDLE = "idle"          # engine constructed, no session yet
    RUNNING = "running"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self in (Status.WON, Status.LOST)


# ---------- Helpers ----------
def place_food(rows: int, cols: int, snake: List[Cell], rng: random.Random) -> Optional[Cell]:
    """Pick a uniformly random empty cell, or None when the snake fills the board."""
    occupied = set(snake)
    empty = [(r, c) for r in range(rows) for c in range(cols) if (r, c) not in occupied]
    if not empty:
        return None
    return rng.choice(empty)

def is_opposite(a: str, b: str) -> bool:
    (ar, ac), (br, bc) = DELTAS[a], DELTAS[b]
    return ar == -br and ac == -bc

def clamp_grid(rows: int, cols: int) -> Tuple[int, int]:
    return max(MIN_ROWS, int(rows)), max(MIN_COLS, int(cols))

def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


# ---------- State ----------
@dataclass
class GameState:
    rows: int
    cols: int
    snake: List[Cell]              # head at index 0
    direction: str
    pending: str
    food: Optional[Cell]
    score: int = 0
    best: int = 0
    started_ms: int = 0            # clock reading at session start
    elapsed_ms: int = 0
    status: Status = Status.RUNNING


@dataclass(frozen=True)
class StepResult:
    ate: bool
    new_best: bool
    status: Status


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame."""
    rows: int
    cols: int
    snake: Tuple[Cell, ...]
    food: Optional[Cell]
    score: int
    best: int
    elapsed_ms: int
    status: Status

    @property
    def elapsed_seconds(self) -> int:
        return self.elapsed_ms // 1000

    def to_grid(self) -> np.ndarray:
        """Return a rows x cols matrix of EMPTY/BODY/HEAD/FOOD codes."""
        grid = np.full((self.rows, self.cols), EMPTY, dtype=np.int8)
        if self.food is not None:
            grid[self.food] = FOOD
        for r, c in self.snake[1:]:
            grid[r, c] = BODY
        if self.snake:
            grid[self.snake[0]] = HEAD
        return grid


@dataclass(frozen=True)
class GameOver:
    score: int
    best: int
    elapsed_seconds: int
    won: bool

    @property
    def title(self) -> str:
        return "You Win!" if self.won else "Game Over"

    @property
    def summary(self) -> str:
        mm, ss = divmod(self.elapsed_seconds, 60)
        return f"Score: {self.score} • High: {self.best} • Time: {mm:02d}:{ss:02d}"


def new_game_state(rows: int, cols: int, rng: random.Random, now_ms: int, best: int = 0) -> GameState:
    rows, cols = clamp_grid(rows, cols)
    r, c = rows // 2, cols // 2
    snake = [(r, c), (r, c - 1), (r, c - 2)]
    return GameState(
        rows=rows,
        cols=cols,
        snake=snake,
        direction=RIGHT,
        pending=RIGHT,
        food=place_food(rows, cols, snake, rng),
        score=0,
        best=best,
        started_ms=now_ms,
        elapsed_ms=0,
        status=Status.RUNNING,
    )


# ---------- Update ----------
def step_game(state: GameState, rng: random.Random, now_ms: int) -> StepResult:
    """
    Advance the session by one tick.

    Collisions are checked against the body as it was before the move, tail
    included, so steering into the cell the tail is about to leave is fatal.
    A collision only flips the status (and freezes the clock); snake, food
    and score stay as they were.
    """
    if state.status is not Status.RUNNING:
        return StepResult(ate=False, new_best=False, status=state.status)

    # Commit direction once per tick; a straight reversal is dropped
    if not is_opposite(state.pending, state.direction):
        state.direction = state.pending

    hr, hc = state.snake[0]
    dr, dc = DELTAS[state.direction]
    head = (hr + dr, hc + dc)

    # Wall collision
    if not (0 <= head[0] < state.rows and 0 <= head[1] < state.cols):
        return _finish(state, Status.LOST, now_ms, "wall")

    # Self collision
    if head in state.snake:
        return _finish(state, Status.LOST, now_ms, "self")

    ate = state.food is not None and head == state.food
    state.snake.insert(0, head)

    new_best = False
    if ate:
        state.score += 1
        if state.score > state.best:
            state.best = state.score
            new_best = True
        state.food = place_food(state.rows, state.cols, state.snake, rng)
        if state.food is None:
            result = _finish(state, Status.WON, now_ms, "board full")
            return StepResult(ate=True, new_best=new_best, status=result.status)
    else:
        state.snake.pop()

    state.elapsed_ms = now_ms - state.started_ms
    return StepResult(ate=ate, new_best=new_best, status=state.status)

def _finish(state: GameState, status: Status, now_ms: int, reason: str) -> StepResult:
    state.status = status
    state.elapsed_ms = now_ms - state.started_ms
    logger.info("session %s (%s): score=%d best=%d length=%d",
                status.value, reason, state.score, state.best, len(state.snake))
    return StepResult(ate=False, new_best=False, status=status)


# ---------- Engine ----------
class Engine:
    """
    Owns one session at a time. The host drives it:

      * ``initialize(rows, cols, best)`` / ``reset()`` start a session,
      * ``set_pending_direction(d)`` records player input,
      * ``step()`` is called once per tick,
      * ``snapshot()`` / ``game_over()`` feed the renderer.

    ``rng`` and ``clock`` (milliseconds) are injectable for tests.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], int]] = None):
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock if clock is not None else _monotonic_ms
        self.state: Optional[GameState] = None

    @property
    def status(self) -> Status:
        return Status.IDLE if self.state is None else self.state.status

    @property
    def running(self) -> bool:
        return self.status is Status.RUNNING

    def initialize(self, rows: int, cols: int, best: int = 0) -> Snapshot:
        self.state = new_game_state(rows, cols, self.rng, self.clock(), best=best)
        logger.info("session started on %dx%d grid (best=%d)",
                    self.state.rows, self.state.cols, best)
        return self.snapshot()

    def reset(self, rows: Optional[int] = None, cols: Optional[int] = None,
              best: Optional[int] = None) -> Snapshot:
        """Start a new session, keeping the current grid size and best unless given."""
        prev = self.state
        if prev is None and (rows is None or cols is None):
            raise RuntimeError("first reset needs a grid size")
        rows = prev.rows if rows is None else rows
        cols = prev.cols if cols is None else cols
        if best is None:
            best = prev.best if prev is not None else 0
        return self.initialize(rows, cols, best=best)

    def resize(self, rows: int, cols: int) -> Snapshot:
        """Change the grid. Never resizes in place: a running session is restarted."""
        if self.running:
            logger.info("resize requested mid-session; restarting")
        return self.reset(rows, cols)

    def set_pending_direction(self, direction: str) -> None:
        if direction not in DELTAS:
            raise ValueError(f"Unknown direction: {direction!r}")
        if self.state is None:
            logger.debug("ignoring direction %s: no session", direction)
            return
        self.state.pending = direction

    def step(self) -> StepResult:
        if self.state is None:
            return StepResult(ate=False, new_best=False, status=Status.IDLE)
        return step_game(self.state, self.rng, self.clock())

    def snapshot(self) -> Snapshot:
        if self.state is None:
            raise RuntimeError("no session; call initialize() first")
        s = self.state
        elapsed = s.elapsed_ms
        if s.status is Status.RUNNING:
            elapsed = self.clock() - s.started_ms
        return Snapshot(
            rows=s.rows,
            cols=s.cols,
            snake=tuple(s.snake),
            food=s.food,
            score=s.score,
            best=s.best,
            elapsed_ms=elapsed,
            status=s.status,
        )

    def game_over(self) -> Optional[GameOver]:
        """Final numbers for the end-of-game panel; None while a session is live."""
        if self.state is None or not self.state.status.terminal:
            return None
        s = self.state
        return GameOver(
            score=s.score,
            best=s.best,
            elapsed_seconds=s.elapsed_ms // 1000,
            won=s.status is Status.WON,
        )


@dataclass
class LockedEngine:
    """Engine behind one lock, for hosts that feed input from another thread."""
    engine: Engine = field(default_factory=Engine)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def status(self) -> Status:
        with self.lock:
            return self.engine.status

    def initialize(self, rows: int, cols: int, best: int = 0) -> Snapshot:
        with self.lock:
            return self.engine.initialize(rows, cols, best)

    def reset(self, rows: Optional[int] = None, cols: Optional[int] = None,
              best: Optional[int] = None) -> Snapshot:
        with self.lock:
            return self.engine.reset(rows, cols, best)

    def resize(self, rows: int, cols: int) -> Snapshot:
        with self.lock:
            return self.engine.resize(rows, cols)

    def set_pending_direction(self, direction: str) -> None:
        with self.lock:
            self.engine.set_pending_direction(direction)

    def step(self) -> StepResult:
        with self.lock:
            return self.engine.step()

    def snapshot(self) -> Snapshot:
        with self.lock:
            return self.engine.snapshot()

    def game_over(self) -> Optional[GameOver]:
        with self.lock:
            return self.engine.game_over()
