"""Utility helpers for the Neon Drop engine."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .config import DEFAULT_CONFIG, GameConfig
from .piece import Piece


def drop_interval_ms(level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Return the automatic drop interval in milliseconds for ``level``.

    The interval shrinks linearly with the level and never goes below
    ``config.min_drop_ms``.
    """

    return max(config.min_drop_ms, config.base_drop_ms - (level - 1) * config.drop_step_ms)


def level_for_score(score: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Return the level earned by ``score``, capped at ``config.max_level``."""

    return min(score // config.points_per_level + 1, config.max_level)


def chain_bonus(chain: int) -> int:
    """Return the score multiplier for the ``chain``-th cascade step."""

    return 1 if chain <= 1 else 2 ** (chain - 1)


def score_delta(
    cleared: int, chain: int, level: int, config: GameConfig = DEFAULT_CONFIG
) -> int:
    """Return the points awarded for clearing ``cleared`` balls.

    ``cleared * points_per_ball`` is multiplied by the chain bonus and the
    current level.
    """

    return int(cleared * config.points_per_ball * chain_bonus(chain) * level)


def render_grid(board: Board, active: Optional[Piece] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active piece overlaid.

    This is a convenience for renderers that want a single 2D array to draw
    without mutating the underlying board state.  Balls of the active piece
    that are still above the well are left out.
    """

    grid = [[int(v) for v in row] for row in board.grid]
    if active is not None:
        for r, c, color in active.balls():
            if board.in_bounds(r, c):
                grid[r][c] = int(color)
    return grid
