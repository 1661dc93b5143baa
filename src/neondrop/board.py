"""Board representation for the Neon Drop well."""

from __future__ import annotations

from collections import deque
from typing import Iterable, List

import numpy as np
from numpy.typing import NDArray

from .piece import COLS, EMPTY, ROWS, Cell, Piece, piece_cells


Grid = NDArray[np.uint8]

# 4-directional neighbourhood used by the flood fill.
NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((ROWS, COLS), dtype=np.uint8)


class Board:
    """The well of settled balls.

    ``grid[row, col]`` holds ``0`` for an empty cell or a
    :class:`~neondrop.piece.BallColor` value.  Row ``0`` is the top of the
    well; pieces may hang above it at negative rows before they enter.
    """

    width: int = COLS
    height: int = ROWS

    def __init__(self, min_group: int = 4) -> None:
        self.grid: Grid = create_empty_grid()
        self.min_group = min_group

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def clear(self) -> None:
        """Empty every cell."""

        self.grid.fill(EMPTY)

    def is_valid_position(self, row: int, col: int, orientation: int) -> bool:
        """Return ``True`` if a piece with this pivot and orientation fits.

        Cells above the well (negative rows) are always acceptable so that a
        piece can spawn partly hidden.  Columns must stay inside the well and
        rows must not pass the floor.  The board is never modified.
        """

        for r, c in piece_cells(row, col, orientation):
            if c < 0 or c >= self.width or r >= self.height:
                return False
            if r >= 0 and self.grid[r, c] != EMPTY:
                return False
        return True

    def add_piece(self, piece: Piece) -> None:
        """Settle ``piece`` into the grid under gravity.

        The lower ball is written first so that, for a vertical piece, the
        upper ball comes to rest directly on top of it.  Balls that never
        entered the well (negative row) are dropped.  The caller is
        responsible for the piece being in a legal position.
        """

        balls = sorted(piece.balls(), key=lambda ball: ball[0], reverse=True)
        for row, col, color in balls:
            if row < 0:
                continue
            landing = row
            while landing + 1 < self.height and self.grid[landing + 1, col] == EMPTY:
                landing += 1
            self.set_cell(landing, col, int(color))

    def _flood_fill(self, row: int, col: int, visited: NDArray[np.bool_]) -> List[Cell]:
        """Collect the 4-connected same-colour group containing ``(row, col)``."""

        color = self.grid[row, col]
        queue = deque([(row, col)])
        visited[row, col] = True
        group: List[Cell] = []
        while queue:
            r, c = queue.popleft()
            group.append((r, c))
            for dr, dc in NEIGHBOURS:
                nr, nc = r + dr, c + dc
                if (
                    self.in_bounds(nr, nc)
                    and not visited[nr, nc]
                    and self.grid[nr, nc] == color
                ):
                    visited[nr, nc] = True
                    queue.append((nr, nc))
        return group

    def find_matches(self) -> List[Cell]:
        """Return every cell belonging to a group of ``min_group`` or more.

        All qualifying groups found in one scan are returned together so that
        simultaneous clears resolve in the same cascade step.
        """

        visited = np.zeros(self.grid.shape, dtype=bool)
        matches: List[Cell] = []
        for row in range(self.height):
            for col in range(self.width):
                if self.grid[row, col] == EMPTY or visited[row, col]:
                    continue
                group = self._flood_fill(row, col, visited)
                if len(group) >= self.min_group:
                    matches.extend(group)
        return matches

    def remove_matches(self, cells: Iterable[Cell]) -> int:
        """Empty ``cells`` and return how many were cleared."""

        count = 0
        for row, col in cells:
            self.set_cell(row, col, EMPTY)
            count += 1
        return count

    def apply_gravity(self) -> bool:
        """Drop every ball to the lowest free cell of its column.

        Each empty cell, scanned bottom to top, pulls down the nearest ball
        above it.  A filled cell is never revisited so a single sweep leaves
        the column without gaps.  Returns ``True`` if any ball moved.
        """

        moved = False
        for col in range(self.width):
            for row in range(self.height - 1, -1, -1):
                if self.grid[row, col] != EMPTY:
                    continue
                for above in range(row - 1, -1, -1):
                    if self.grid[above, col] != EMPTY:
                        self.grid[row, col] = self.grid[above, col]
                        self.grid[above, col] = EMPTY
                        moved = True
                        break
        return moved

    def column_heights(self) -> List[int]:
        """Return the number of stacked balls in each column."""

        filled = self.grid != EMPTY
        return [int(n) for n in np.count_nonzero(filled, axis=0)]
