"""Headless demo for the Neon Drop engine.

Run with: `python -m neondrop --pieces 40 --seed 7`

Random placements are played with hard drops until the requested number of
pieces is used or the game ends, then the final well is printed as text.
Useful as a smoke test of the full lock/cascade/spawn cycle without a window.
"""

from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional, Sequence

from .config import GameConfig
from .controller import GameController
from .game_state import GameState

LOGGER = logging.getLogger(__name__)

SYMBOLS = ".RGBY"


def format_grid(grid: List[List[int]]) -> str:
    return "\n".join("".join(SYMBOLS[cell] for cell in row) for row in grid)


def play_random(controller: GameController, pieces: int, rng: random.Random) -> int:
    """Drop up to ``pieces`` pieces at random columns and orientations.

    Full columns are never targeted.  Returns the number of pieces actually
    placed.
    """

    board = controller.state.board
    placed = 0
    while placed < pieces and controller.running:
        open_cols = [c for c, h in enumerate(board.column_heights()) if h < board.height]
        if not open_cols:
            break
        for _ in range(rng.randrange(4)):
            controller.rotate()
        shift = rng.choice(open_cols) - controller.active.col
        step = 1 if shift > 0 else -1
        for _ in range(abs(shift)):
            controller.move(step)
        controller.hard_drop()
        placed += 1
    return placed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Neon Drop headlessly with random moves.")
    parser.add_argument("--pieces", type=int, default=30, help="number of pieces to drop")
    parser.add_argument("--seed", type=int, default=None, help="seed for colours and moves")
    parser.add_argument("--verbose", action="store_true", help="log every cascade step")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(args.seed)
    # No animation to wait for, so the cascade runs without pauses.
    config = GameConfig(match_delay_ms=0, chain_delay_ms=0)
    controller = GameController(state=GameState(config=config, rng=random.Random(args.seed)))
    controller.start()
    placed = play_random(controller, args.pieces, rng)
    LOGGER.info("Placed %d piece(s)", placed)

    view = controller.view()
    print(format_grid(view.grid))
    status = "game over" if view.game_over else "running"
    print(f"Score: {view.score}  Level: {view.level}  ({status})")


if __name__ == "__main__":
    main()
