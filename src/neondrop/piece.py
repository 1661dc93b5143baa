"""Ball colours and the falling two-ball piece.

A piece is a pivot cell plus a second cell one step away.  The orientation
selects the offset of each ball from the pivot through
:data:`ORIENTATION_OFFSETS` rather than through branching logic, so every
orientation is described in exactly one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

# Dimensions of the well.
COLS = 6
ROWS = 12

EMPTY = 0

Cell = Tuple[int, int]  # (row, col)
Offset = Tuple[int, int]  # (drow, dcol)


class BallColor(IntEnum):
    """The four ball colours.  ``0`` is reserved for an empty cell."""

    RED = 1
    GREEN = 2
    BLUE = 3
    YELLOW = 4


BALL_COLORS: Tuple[BallColor, ...] = tuple(BallColor)

ColorPair = Tuple[BallColor, BallColor]


class Orientation(IntEnum):
    """Rotation state of a piece, in clockwise order."""

    VERTICAL = 0
    HORIZONTAL = 1
    VERTICAL_FLIPPED = 2
    HORIZONTAL_FLIPPED = 3


# Offsets of the ball carrying ``colors[0]`` and of the ball carrying
# ``colors[1]``.  The flipped states reuse the geometry of their plain
# counterpart with the colours swapped between the two cells.
ORIENTATION_OFFSETS: Dict[Orientation, Tuple[Offset, Offset]] = {
    Orientation.VERTICAL: ((0, 0), (1, 0)),
    Orientation.HORIZONTAL: ((0, 0), (0, 1)),
    Orientation.VERTICAL_FLIPPED: ((1, 0), (0, 0)),
    Orientation.HORIZONTAL_FLIPPED: ((0, 1), (0, 0)),
}

if set(ORIENTATION_OFFSETS) != set(Orientation):  # pragma: no cover - import guard
    raise RuntimeError("ORIENTATION_OFFSETS must cover every orientation")

# Pivot of a freshly spawned piece: centre-left column, one row above the well.
SPAWN_COL = COLS // 2 - 1
SPAWN_ROW = -1


def piece_cells(row: int, col: int, orientation: int) -> List[Cell]:
    """Return the two cells of a piece with its pivot at ``(row, col)``.

    The cells are listed in colour order: the first holds ``colors[0]`` and
    the second ``colors[1]``.  ``orientation`` is wrapped so any integer is
    accepted.
    """

    first, second = ORIENTATION_OFFSETS[Orientation(orientation % len(Orientation))]
    return [(row + first[0], col + first[1]), (row + second[0], col + second[1])]


@dataclass
class Piece:
    """The falling pair of balls controlled by the player."""

    colors: ColorPair
    row: int = SPAWN_ROW
    col: int = SPAWN_COL
    orientation: Orientation = Orientation.VERTICAL

    @classmethod
    def spawn(cls, colors: ColorPair) -> "Piece":
        """Return a piece at the spawn pivot in the vertical orientation."""

        return cls(colors=colors)

    def positions(self) -> List[Cell]:
        """Return the global ``(row, col)`` cells of both balls."""

        return piece_cells(self.row, self.col, self.orientation)

    def balls(self) -> List[Tuple[int, int, BallColor]]:
        """Return ``(row, col, color)`` for both balls."""

        return [
            (row, col, color)
            for (row, col), color in zip(self.positions(), self.colors)
        ]

    def rotate_clockwise(self) -> None:
        """Advance to the next orientation without any collision check."""

        self.orientation = Orientation((self.orientation + 1) % len(Orientation))

    def move(self, dx: int, dy: int) -> None:
        """Shift the pivot by ``dx`` columns and ``dy`` rows."""

        self.col += dx
        self.row += dy


def positions(piece: Piece) -> List[Cell]:
    """Functional alias for :meth:`Piece.positions`."""

    return piece.positions()


__all__ = [
    "COLS",
    "ROWS",
    "EMPTY",
    "Cell",
    "BallColor",
    "BALL_COLORS",
    "ColorPair",
    "Orientation",
    "ORIENTATION_OFFSETS",
    "SPAWN_COL",
    "SPAWN_ROW",
    "piece_cells",
    "positions",
    "Piece",
]
