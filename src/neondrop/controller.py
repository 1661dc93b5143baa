"""State machine driving a Neon Drop session.

The controller is fed from two places: a frame scheduler that calls
:meth:`GameController.update` with a monotonic timestamp, and discrete player
commands (move, rotate, drop, pause).  Both run on the same asyncio event loop.

Locking a piece starts :meth:`GameController.resolve_matches`, a coroutine
that clears groups, applies gravity and repeats until the board is stable.
Its pacing delays are ``await`` points, so the host loop keeps drawing frames
while the matched balls pop.  During resolution the drop timer is frozen and
movement commands are ignored.  Pausing only stops the drop timer; a
resolution already in progress runs to completion.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Coroutine, List, Optional, Tuple

from .game_state import GameState
from .piece import BallColor, Cell, ColorPair, Piece
from .utils import render_grid


LOGGER = logging.getLogger(__name__)

DelayFn = Callable[[float], Awaitable[None]]

# Column shifts tried, relative to the original column, when a rotation is
# blocked: one to the left, then one to the right.
WALL_KICKS = (-1, 1)


async def sleep_ms(ms: float) -> None:
    """Default delay primitive: suspend for ``ms`` milliseconds."""

    await asyncio.sleep(ms / 1000.0)


class Phase(str, Enum):
    """Lifecycle phases of the controller."""

    IDLE = "idle"
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameView:
    """Read-only snapshot of everything a renderer needs for one frame."""

    grid: List[List[int]]
    active: List[Tuple[int, int, BallColor]]
    score: int
    level: int
    next_pieces: List[ColorPair]
    running: bool
    paused: bool
    game_over: bool
    final_score: Optional[int]
    matched: List[Cell]


@dataclass
class GameController:
    state: GameState = field(default_factory=GameState)
    delay: DelayFn = sleep_ms
    phase: Phase = Phase.IDLE
    paused: bool = False
    last_ts: float = 0.0
    drop_accum: float = 0.0
    final_score: Optional[int] = None
    matched: List[Cell] = field(default_factory=list)
    pending: Optional[asyncio.Task] = None

    # Status ------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.phase not in (Phase.IDLE, Phase.GAME_OVER)

    @property
    def processing(self) -> bool:
        """``True`` while a locked piece is being resolved."""

        return self.phase in (Phase.LOCKING, Phase.RESOLVING)

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def active(self) -> Optional[Piece]:
        return self.state.active

    def view(self) -> GameView:
        """Return a snapshot of the session for renderers."""

        active = self.state.active
        return GameView(
            grid=render_grid(self.state.board, active),
            active=active.balls() if active is not None else [],
            score=self.state.score,
            level=self.state.level,
            next_pieces=self.state.next_pieces(2),
            running=self.running,
            paused=self.paused,
            game_over=self.game_over,
            final_score=self.final_score,
            matched=list(self.matched),
        )

    # Lifecycle ---------------------------------------------------------
    def start(self) -> None:
        """Start a new game, abandoning any session in progress."""

        self._cancel_pending()
        self.state.reset_game()
        self.paused = False
        self.last_ts = 0
        self.drop_accum = 0
        self.final_score = None
        self.matched = []
        LOGGER.info("Game started")
        self.spawn_piece()

    def stop(self) -> None:
        if not self.running:
            LOGGER.info("Stop ignored: not running")
            return
        self._cancel_pending()
        self.state.active = None
        self.matched = []
        self.paused = False
        self.phase = Phase.IDLE
        LOGGER.info("Game stopped")

    def toggle_pause(self) -> None:
        """Pause or resume the drop timer.

        Resuming forgets the last frame timestamp and the accumulated drop
        time so the time spent paused never counts towards the next drop.
        """

        if not self.running:
            LOGGER.info("Pause ignored: not running")
            return
        self.paused = not self.paused
        if not self.paused:
            self.last_ts = 0
            self.drop_accum = 0
        LOGGER.info("Paused" if self.paused else "Resumed")

    def _cancel_pending(self) -> None:
        if self.pending is not None and not self.pending.done():
            self.pending.cancel()
        self.pending = None

    def _game_over(self) -> None:
        self.phase = Phase.GAME_OVER
        self.state.active = None
        self.final_score = self.state.score
        LOGGER.info("Game over. Score: %d", self.state.score)

    # Piece flow --------------------------------------------------------
    def _fits(self, piece: Piece) -> bool:
        return self.state.board.is_valid_position(piece.row, piece.col, piece.orientation)

    def _accepts_input(self) -> bool:
        return (
            self.running
            and not self.paused
            and not self.processing
            and self.state.active is not None
        )

    def spawn_piece(self) -> None:
        """Bring the next queued pair into play or end the game."""

        self.phase = Phase.SPAWNING
        piece = self.state.spawn_piece()
        if not self._fits(piece):
            self._game_over()
            return
        self.phase = Phase.FALLING

    def update(self, ts: float) -> None:
        """Advance the drop timer to frame timestamp ``ts`` (milliseconds)."""

        if not self.running or self.paused:
            return
        dt = 0.0 if self.last_ts == 0 else ts - self.last_ts
        self.last_ts = ts
        if self.processing:
            return
        self.drop_accum += dt
        if self.drop_accum >= self.state.drop_interval:
            self.soft_drop()

    def move(self, direction: int) -> None:
        """Shift the active piece sideways, reverting if blocked."""

        if not self._accepts_input():
            return
        piece = self.state.active
        piece.move(direction, 0)
        if not self._fits(piece):
            piece.move(-direction, 0)

    def move_left(self) -> None:
        self.move(-1)

    def move_right(self) -> None:
        self.move(1)

    def rotate(self) -> None:
        """Rotate clockwise, kicking off a wall or stack when needed."""

        if not self._accepts_input():
            return
        piece = self.state.active
        col, orientation = piece.col, piece.orientation
        piece.rotate_clockwise()
        if self._fits(piece):
            return
        for kick in WALL_KICKS:
            piece.col = col + kick
            if self._fits(piece):
                return
        piece.col, piece.orientation = col, orientation

    def soft_drop(self) -> None:
        """Move the piece down one row, locking it if it cannot move."""

        if not self._accepts_input():
            return
        piece = self.state.active
        piece.move(0, 1)
        if not self._fits(piece):
            piece.move(0, -1)
            self.lock_piece()
        self.drop_accum = 0

    def hard_drop(self) -> None:
        """Drop the piece as far as it goes and lock it immediately."""

        if not self._accepts_input():
            return
        piece = self.state.active
        while self.state.board.is_valid_position(piece.row + 1, piece.col, piece.orientation):
            piece.move(0, 1)
        self.lock_piece()

    def lock_piece(self) -> None:
        """Commit the active piece and start resolving the board."""

        piece = self.state.active
        if piece is None:
            return
        if any(row < 0 for row, _ in piece.positions()):
            # A ball still above the well has nowhere to go: the stack topped out.
            self._game_over()
            return
        self.phase = Phase.LOCKING
        self.state.board.add_piece(piece)
        self.state.piece_locked()
        self.phase = Phase.RESOLVING
        self._schedule(self.resolve_matches())

    def _schedule(self, coro: Coroutine[object, object, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g. plain synchronous use); resolve in place.
            asyncio.run(coro)
            return
        self.pending = loop.create_task(coro)
        self.pending.add_done_callback(self._resolution_done)

    def _resolution_done(self, task: asyncio.Task) -> None:
        """Recover from a resolution task that died with an exception."""

        if task.cancelled() or task.exception() is None:
            return
        LOGGER.error("Crash detected during resolution, restarting", exc_info=task.exception())
        if self.pending is task:
            self.pending = None
            self.start()

    async def resolve_matches(self) -> None:
        """Clear matches and let the board settle until nothing matches.

        Every iteration with a match is one chain step.  Matched cells are
        published in :attr:`matched` for the removal animation before the
        first delay.  Once the board is stable the next piece spawns.
        """

        board = self.state.board
        config = self.state.config
        while True:
            matches = board.find_matches()
            if not matches:
                break
            self.state.chain += 1
            self.matched = matches
            await self.delay(config.match_delay_ms)
            cleared = board.remove_matches(matches)
            self.matched = []
            delta = self.state.add_score(cleared, self.state.chain)
            LOGGER.debug(
                "Chain %d: cleared %d ball(s) for %d point(s)",
                self.state.chain,
                cleared,
                delta,
            )
            board.apply_gravity()
            await self.delay(config.chain_delay_ms)
        self.pending = None
        self.spawn_piece()

    async def wait_resolved(self) -> None:
        """Wait for a scheduled resolution to finish, if one is running."""

        task = self.pending
        if task is not None:
            await task


__all__ = ["GameController", "GameView", "Phase", "WALL_KICKS", "sleep_ms"]
