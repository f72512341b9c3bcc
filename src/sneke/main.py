# main.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
import argparse
import logging
import random

import numpy as np  # type: ignore
import pygame  # type: ignore

from .config import (
    Config, HUD_HEIGHT,
    BG, GRID, GREEN, HEAD_GREEN, RED, TEXT,
    UP, DOWN, LEFT, RIGHT,
    MIN_SPEED, MAX_SPEED,
)
from .game import Engine, GameOver, Snapshot, EMPTY, BODY, HEAD, FOOD
from .prefs import Preferences, JsonFileStore
from .timing import Ticker, grid_size_for, speed_to_period_ms

logger = logging.getLogger(__name__)

DIRECTION_BY_KEY = {
    pygame.K_UP: UP,
    pygame.K_w: UP,
    pygame.K_DOWN: DOWN,
    pygame.K_s: DOWN,
    pygame.K_LEFT: LEFT,
    pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT,
    pygame.K_d: RIGHT,
}
FASTER_KEYS = (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS)
SLOWER_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS)
RESTART_KEYS = (pygame.K_RETURN, pygame.K_SPACE)

CELL_COLORS = {BODY: GREEN, HEAD: HEAD_GREEN, FOOD: RED}


# ---------- Host state ----------
@dataclass
class Host:
    """Everything the window needs besides the engine's own state."""
    engine: Engine
    prefs: Preferences
    ticker: Ticker
    cfg: Config
    window: Tuple[int, int]
    resize_at: Optional[int] = None   # ms timestamp of a pending board rebuild

    @property
    def board_px(self) -> Tuple[int, int]:
        w, h = self.window
        return w, max(0, h - HUD_HEIGHT)

    def grid_size(self) -> Tuple[int, int]:
        w, h = self.board_px
        return grid_size_for(w, h, self.cfg.cell_size)

    def board_origin(self, snap: Snapshot) -> Tuple[int, int]:
        """Top-left pixel of the board, centered horizontally under the HUD."""
        w, _ = self.board_px
        x = max(0, (w - snap.cols * self.cfg.cell_size) // 2)
        return x, HUD_HEIGHT


def new_host(cfg: Config, store=None, now_ms: int = 0, clock=None) -> Host:
    prefs = Preferences(store if store is not None else JsonFileStore(cfg.prefs_path))
    if cfg.speed is not None:
        prefs.speed = cfg.speed
    rng = random.Random(cfg.seed)
    host = Host(
        engine=Engine(rng=rng, clock=clock or pygame.time.get_ticks),
        prefs=prefs,
        ticker=Ticker(period_ms=speed_to_period_ms(prefs.speed)),
        cfg=cfg,
        window=(cfg.width, cfg.height),
    )
    new_session(host, now_ms)
    return host

def new_session(host: Host, now_ms: int) -> None:
    rows, cols = host.grid_size()
    host.engine.reset(rows, cols, best=host.prefs.best_score)
    host.ticker.start(now_ms)
    host.resize_at = None

def set_speed(host: Host, setting: int, now_ms: int) -> None:
    host.prefs.speed = setting
    # Restart the period only; the session carries on untouched
    host.ticker.reschedule(speed_to_period_ms(host.prefs.speed), now_ms)
    logger.info("speed set to %d (%dms per tick)", host.prefs.speed, host.ticker.period_ms)


# ---------- Input / Update / Draw ----------
def handle_event(host: Host, event: pygame.event.Event, now_ms: int) -> bool:
    """Apply one pygame event to the host. Return False to quit."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.VIDEORESIZE:
        host.window = (event.w, event.h)
        host.resize_at = now_ms + host.cfg.resize_debounce_ms
        return True
    if event.type != pygame.KEYDOWN:
        return True

    key = event.key
    if key == pygame.K_ESCAPE:
        return False
    if key in DIRECTION_BY_KEY:
        logger.debug("direction %s", DIRECTION_BY_KEY[key])
        host.engine.set_pending_direction(DIRECTION_BY_KEY[key])
    elif key == pygame.K_r or (key in RESTART_KEYS and host.engine.game_over() is not None):
        new_session(host, now_ms)
    elif pygame.K_0 <= key <= pygame.K_9:
        set_speed(host, (key - pygame.K_0) or MAX_SPEED, now_ms)
    elif key in FASTER_KEYS:
        set_speed(host, min(MAX_SPEED, host.prefs.speed + 1), now_ms)
    elif key in SLOWER_KEYS:
        set_speed(host, max(MIN_SPEED, host.prefs.speed - 1), now_ms)
    return True

def update(host: Host, now_ms: int) -> None:
    """Rebuild after a settled resize, then run at most one engine tick."""
    if host.resize_at is not None and now_ms >= host.resize_at:
        rows, cols = host.grid_size()
        logger.info("window resized; new board %dx%d", rows, cols)
        new_session(host, now_ms)
        return

    if not host.ticker.due(now_ms):
        return
    result = host.engine.step()
    if result.new_best:
        host.prefs.best_score = host.engine.snapshot().best
    if result.status.terminal:
        host.ticker.stop()

def format_time(seconds: int) -> str:
    mm, ss = divmod(max(0, seconds), 60)
    return f"{mm:02d}:{ss:02d}"

def draw_game(screen: pygame.Surface, font: pygame.font.Font, host: Host, snap: Snapshot) -> None:
    screen.fill(BG)
    cell = host.cfg.cell_size
    ox, oy = host.board_origin(snap)
    pygame.draw.rect(screen, GRID, pygame.Rect(ox, oy, snap.cols * cell, snap.rows * cell))

    grid = snap.to_grid()
    for (r, c), code in np.ndenumerate(grid):
        if code == EMPTY:
            continue
        rect = pygame.Rect(ox + c * cell + 1, oy + r * cell + 1, cell - 2, cell - 2)
        pygame.draw.rect(screen, CELL_COLORS[int(code)], rect)

    hud = (f"Score: {snap.score}   High: {snap.best}   "
           f"Time: {format_time(snap.elapsed_seconds)}   Speed: {host.prefs.speed}")
    screen.blit(font.render(hud, True, TEXT), (8, 8))

def draw_game_over(screen: pygame.Surface, font: pygame.font.Font, over: GameOver) -> None:
    width, height = screen.get_size()
    # Dim with translucent overlay
    overlay = pygame.Surface((width, height), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 140))  # RGBA
    screen.blit(overlay, (0, 0))

    lines: List[str] = [over.title, over.summary, "Press R to restart"]
    for i, text in enumerate(lines):
        surf = font.render(text, True, (240, 240, 250) if i == 0 else TEXT)
        screen.blit(surf, surf.get_rect(center=(width // 2, height // 2 - 24 + i * 28)))


# ---------- Entry point ----------
def parse_args(argv: Optional[List[str]] = None) -> Tuple[Config, str]:
    defaults = Config()
    parser = argparse.ArgumentParser(prog="sneke", description="Grid snake.")
    parser.add_argument("--width", type=int, default=defaults.width, help="window width in pixels")
    parser.add_argument("--height", type=int, default=defaults.height, help="window height in pixels")
    parser.add_argument("--cell-size", type=int, default=defaults.cell_size, help="pixels per grid cell")
    parser.add_argument(
        "--speed",
        type=int,
        default=None,
        choices=range(MIN_SPEED, MAX_SPEED + 1),
        metavar=f"{{{MIN_SPEED}..{MAX_SPEED}}}",
        help="tick speed (also saved as the new preference)",
    )
    parser.add_argument("--prefs", type=str, default=defaults.prefs_path, help="preferences JSON file")
    parser.add_argument("--seed", type=int, default=None, help="seed food placement")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    cfg = Config(
        width=args.width,
        height=args.height,
        cell_size=max(1, args.cell_size),
        speed=args.speed,
        seed=args.seed,
        prefs_path=args.prefs,
    )
    return cfg, args.log_level

def main(argv: Optional[List[str]] = None) -> None:
    cfg, log_level = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    font = pygame.font.SysFont(None, 24)
    screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("Sneke")
    clock = pygame.time.Clock()

    host = new_host(cfg, now_ms=pygame.time.get_ticks())
    running = True

    while running:
        # 1) input
        for event in pygame.event.get():
            if not handle_event(host, event, pygame.time.get_ticks()):
                running = False
                break
        if not running:
            break

        # 2) update
        update(host, pygame.time.get_ticks())

        # 3) render
        screen = pygame.display.get_surface()
        draw_game(screen, font, host, host.engine.snapshot())
        over = host.engine.game_over()
        if over is not None:
            draw_game_over(screen, font, over)
        pygame.display.flip()
        clock.tick(60)  # high FPS; movement gated by the ticker

    pygame.quit()

if __name__ == "__main__":
    main()
