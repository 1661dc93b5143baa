"""Neon Drop: a falling-pair colour matching puzzle engine."""

from .board import Board
from .config import DEFAULT_CONFIG, GameConfig
from .controller import GameController, GameView, Phase
from .game_state import GameState
from .piece import BALL_COLORS, BallColor, Orientation, Piece, piece_cells
from .utils import drop_interval_ms, level_for_score, render_grid, score_delta

__all__ = [
    "Board",
    "BallColor",
    "BALL_COLORS",
    "DEFAULT_CONFIG",
    "GameConfig",
    "GameController",
    "GameState",
    "GameView",
    "Orientation",
    "Phase",
    "Piece",
    "drop_interval_ms",
    "level_for_score",
    "piece_cells",
    "render_grid",
    "score_delta",
]
