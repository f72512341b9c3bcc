from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# ----- Window & grid -----
WIDTH, HEIGHT = 672, 560
CELL_SIZE = 28
MIN_ROWS, MIN_COLS = 8, 6
HUD_HEIGHT = 32

# ----- Colors -----
BG    = (20, 20, 24)
GRID  = (30, 30, 36)
GREEN = (80, 200, 80)
HEAD_GREEN = (140, 235, 140)
RED   = (200, 70, 70)
TEXT  = (220, 220, 230)

# ----- Directions: name -> (d_row, d_col) -----
UP, DOWN, LEFT, RIGHT = "up", "down", "left", "right"
DELTAS: Dict[str, Tuple[int, int]] = {
    UP: (-1, 0),
    DOWN: (1, 0),
    LEFT: (0, -1),
    RIGHT: (0, 1),
}

# ----- Speed setting (1 = slowest, 10 = fastest) -----
MIN_SPEED, MAX_SPEED, DEFAULT_SPEED = 1, 10, 5
SLOWEST_PERIOD_MS = 400
PERIOD_STEP_MS = 34

# ----- Preference keys -----
BEST_KEY = "sneke-high"
SPEED_KEY = "sneke-speed"

# Window resizes settle for this long before the board is rebuilt
RESIZE_DEBOUNCE_MS = 250


# ----- Tunables (what the command line can override) -----
@dataclass
class Config:
    width: int = WIDTH
    height: int = HEIGHT
    cell_size: int = CELL_SIZE
    speed: Optional[int] = None       # None -> stored preference
    seed: Optional[int] = None
    prefs_path: str = "sneke-prefs.json"
    resize_debounce_ms: int = RESIZE_DEBOUNCE_MS
