"""pygame front-end for Neon Drop.

This module glues the engine to a window: it feeds frame timestamps into the
:class:`~neondrop.controller.GameController`, maps keys to commands and draws
the well, the preview of the next two pieces and the title, pause and
game-over overlays.  The game loop is a coroutine so the controller's cascade
resolution can run as a task on the same event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import pygame

from .board import Board
from .controller import GameController, GameView
from .piece import BallColor

LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 40
# Width of the side panel holding the preview and the score
PANEL_WIDTH = 160
# Frames per second to run the game loop at
FPS = 60
# Key repeat for held movement keys: initial delay and interval in ms
KEY_REPEAT_DELAY = 170
KEY_REPEAT_INTERVAL = 120

BACKGROUND = (10, 10, 24)
GRID_LINE = (40, 40, 70)
TEXT_COLOR = (230, 230, 255)
POP_COLOR = (255, 255, 255)

BALL_COLORS = {
    BallColor.RED: (255, 45, 110),
    BallColor.GREEN: (57, 255, 20),
    BallColor.BLUE: (0, 200, 255),
    BallColor.YELLOW: (255, 230, 0),
}

TITLE = "NEON DROP"


def draw_ball(screen: pygame.Surface, row: int, col: int, color, x0: int = 0, y0: int = 0) -> None:
    """Draw one ball centred in the cell at ``(row, col)``."""

    center = (x0 + col * CELL_SIZE + CELL_SIZE // 2, y0 + row * CELL_SIZE + CELL_SIZE // 2)
    pygame.draw.circle(screen, color, center, CELL_SIZE // 2 - 3)


def draw_board(screen: pygame.Surface, view: GameView, frame: int) -> None:
    """Render the settled balls, the active piece and popping matches."""

    popping = set(view.matched)
    for r, row in enumerate(view.grid):
        for c, value in enumerate(row):
            rect = pygame.Rect(c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE, CELL_SIZE)
            pygame.draw.rect(screen, GRID_LINE, rect, 1)
            if not value:
                continue
            color = BALL_COLORS[BallColor(value)]
            if (r, c) in popping and (frame // 6) % 2:
                color = POP_COLOR
            draw_ball(screen, r, c, color)


def draw_panel(screen: pygame.Surface, font: pygame.font.Font, view: GameView) -> None:
    """Render the next-piece preview, score and level."""

    x0 = Board.width * CELL_SIZE + 20
    screen.blit(font.render("NEXT", True, TEXT_COLOR), (x0, 10))
    for i, (top, bottom) in enumerate(view.next_pieces):
        y0 = 40 + i * (2 * CELL_SIZE + 20)
        draw_ball(screen, 0, i, BALL_COLORS[top], x0, y0)
        draw_ball(screen, 1, i, BALL_COLORS[bottom], x0, y0)
    y = 40 + 2 * (2 * CELL_SIZE + 20)
    screen.blit(font.render(f"SCORE {view.score}", True, TEXT_COLOR), (x0, y))
    screen.blit(font.render(f"LEVEL {view.level}", True, TEXT_COLOR), (x0, y + 30))


def draw_overlay(screen: pygame.Surface, font: pygame.font.Font, title: str, sub: str) -> None:
    """Dim the well and print a two-line message over it."""

    width = Board.width * CELL_SIZE
    height = Board.height * CELL_SIZE
    shade = pygame.Surface((width, height), pygame.SRCALPHA)
    shade.fill((0, 0, 0, 180))
    screen.blit(shade, (0, 0))
    for i, text in enumerate((title, sub)):
        label = font.render(text, True, TEXT_COLOR)
        screen.blit(label, label.get_rect(center=(width // 2, height // 2 - 20 + i * 40)))


def handle_key(event: pygame.event.Event, controller: GameController) -> None:
    """Translate a keyboard event into a controller command."""

    if event.key == pygame.K_SPACE:
        if not controller.running:
            controller.start()
        else:
            controller.hard_drop()
    elif event.key in (pygame.K_p, pygame.K_ESCAPE):
        controller.toggle_pause()
    elif event.key == pygame.K_LEFT:
        controller.move_left()
    elif event.key == pygame.K_RIGHT:
        controller.move_right()
    elif event.key == pygame.K_DOWN:
        controller.soft_drop()
    elif event.key == pygame.K_UP:
        controller.rotate()


class GameRunner:
    """Manage the window and the game loop."""

    def __init__(self, controller: Optional[GameController] = None) -> None:
        self.controller = controller or GameController()
        self._running = False
        self._task: asyncio.Task | None = None
        self._screen: pygame.Surface | None = None
        self._font: pygame.font.Font | None = None
        self._frame = 0

    @property
    def running(self) -> bool:
        return self._running

    def _draw(self) -> None:
        if self._screen is None or self._font is None:
            return
        view = self.controller.view()
        self._screen.fill(BACKGROUND)
        draw_board(self._screen, view, self._frame)
        draw_panel(self._screen, self._font, view)
        if view.game_over:
            draw_overlay(
                self._screen, self._font, "GAME OVER", f"Score: {view.final_score}  SPACE to retry"
            )
        elif not view.running:
            draw_overlay(self._screen, self._font, TITLE, "SPACE to start")
        elif view.paused:
            draw_overlay(self._screen, self._font, "PAUSED", "P to resume")
        pygame.display.flip()

    def _frame_step(self, ts: int) -> None:
        try:
            self.controller.update(ts)
            self._draw()
        except Exception:  # pragma: no cover - defensive guard
            # Keep the window alive: log the failure and start a fresh game.
            LOGGER.exception("Crash detected, restarting")
            self.controller.start()

    async def _run_loop(self) -> None:
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_CANVAS_ELEMENT_ID", "#canvas")
        pygame.init()
        width = Board.width * CELL_SIZE + PANEL_WIDTH
        height = Board.height * CELL_SIZE
        self._screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(TITLE)
        pygame.key.set_repeat(KEY_REPEAT_DELAY, KEY_REPEAT_INTERVAL)
        self._font = pygame.font.Font(None, 32)
        clock = pygame.time.Clock()

        self._running = True
        LOGGER.info("Window opened")
        while self._running:
            clock.tick(FPS)
            self._frame += 1
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    handle_key(event, self.controller)
            self._frame_step(pygame.time.get_ticks())
            # Yield so the cascade resolution task can progress
            await asyncio.sleep(0)

        if self.controller.running:
            self.controller.stop()
        pygame.quit()
        LOGGER.info("Window closed")

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.info("Game already running")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g., plain Python); run synchronously
            asyncio.run(self._run_loop())
            return
        self._task = loop.create_task(self._run_loop())

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: window not open")
            return
        self._running = False


# Module-level runner instance for convenience
runner = GameRunner()


def main() -> None:
    """Open the game window and block until it is closed."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    runner.start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
