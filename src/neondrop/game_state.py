"""High level game state container."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional
import logging
import random

from .board import Board
from .config import DEFAULT_CONFIG, GameConfig
from .piece import BALL_COLORS, ColorPair, Piece
from .utils import drop_interval_ms, level_for_score, score_delta


LOGGER = logging.getLogger(__name__)


@dataclass
class GameState:
    """Mutable state for a Neon Drop session.

    The controller owns one instance and is the only code that mutates it.
    """

    config: GameConfig = DEFAULT_CONFIG
    board: Board = field(default_factory=Board)
    rng: random.Random = field(default_factory=random.Random)
    active: Optional[Piece] = None
    queue: Deque[ColorPair] = field(default_factory=deque)
    score: int = 0
    level: int = 1
    drop_interval: int = DEFAULT_CONFIG.base_drop_ms
    chain: int = 0
    pieces: int = 0

    def __post_init__(self) -> None:
        self.board.min_group = self.config.min_group
        self.drop_interval = drop_interval_ms(self.level, self.config)

    def _random_pair(self) -> ColorPair:
        """Return two independently drawn colours."""

        return (self.rng.choice(BALL_COLORS), self.rng.choice(BALL_COLORS))

    def refill_queue(self) -> None:
        """Top the upcoming-piece queue up to ``config.queue_size`` entries."""

        while len(self.queue) < self.config.queue_size:
            self.queue.append(self._random_pair())

    def next_pieces(self, count: int = 2) -> List[ColorPair]:
        """Return the colours of the next ``count`` queued pieces."""

        return list(self.queue)[:count]

    def spawn_piece(self) -> Piece:
        """Dequeue the next colour pair and make it the active piece.

        The queue is refilled before and after dequeuing so the preview always
        has entries to show.  Whether the spawn position is free is left to
        the caller.
        """

        self.refill_queue()
        colors = self.queue.popleft()
        self.refill_queue()
        self.active = Piece.spawn(colors)
        return self.active

    def piece_locked(self) -> None:
        """Record that the active piece was committed to the board."""

        self.active = None
        self.chain = 0
        self.pieces += 1

    def add_score(self, cleared: int, chain: int) -> int:
        """Add points for a cascade step and update level and speed.

        Returns the number of points awarded.
        """

        delta = score_delta(cleared, chain, self.level, self.config)
        self.score += delta
        new_level = level_for_score(self.score, self.config)
        if new_level > self.level:
            self.level = new_level
            self.drop_interval = drop_interval_ms(self.level, self.config)
            LOGGER.info("Level %d reached, drop interval %dms", self.level, self.drop_interval)
        return delta

    def reset_game(self) -> None:
        """Reset the entire game state for a new game."""

        self.board.clear()
        self.score = 0
        self.level = 1
        self.drop_interval = drop_interval_ms(self.level, self.config)
        self.chain = 0
        self.pieces = 0
        self.active = None
        self.queue.clear()
        self.refill_queue()
