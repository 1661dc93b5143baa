import pytest

from neondrop.piece import (
    ORIENTATION_OFFSETS,
    SPAWN_COL,
    SPAWN_ROW,
    BallColor,
    Orientation,
    Piece,
    piece_cells,
    positions,
)


def test_offset_table_covers_every_orientation():
    assert set(ORIENTATION_OFFSETS) == set(Orientation)


@pytest.mark.parametrize("orientation", list(Orientation))
def test_cells_are_always_adjacent(orientation):
    (r1, c1), (r2, c2) = piece_cells(4, 2, orientation)
    assert abs(r1 - r2) + abs(c1 - c2) == 1


def test_positions_follow_colour_order():
    piece = Piece((BallColor.RED, BallColor.BLUE), row=3, col=2)
    assert piece.positions() == [(3, 2), (4, 2)]
    piece.orientation = Orientation.HORIZONTAL
    assert piece.positions() == [(3, 2), (3, 3)]
    piece.orientation = Orientation.VERTICAL_FLIPPED
    assert piece.positions() == [(4, 2), (3, 2)]
    piece.orientation = Orientation.HORIZONTAL_FLIPPED
    assert positions(piece) == [(3, 3), (3, 2)]


def test_balls_keep_colours_attached_to_their_index():
    piece = Piece((BallColor.RED, BallColor.BLUE), row=0, col=0,
                  orientation=Orientation.VERTICAL_FLIPPED)
    assert piece.balls() == [(1, 0, BallColor.RED), (0, 0, BallColor.BLUE)]


def test_rotate_clockwise_wraps_around():
    piece = Piece((BallColor.GREEN, BallColor.GREEN))
    seen = []
    for _ in range(4):
        piece.rotate_clockwise()
        seen.append(piece.orientation)
    assert seen == [
        Orientation.HORIZONTAL,
        Orientation.VERTICAL_FLIPPED,
        Orientation.HORIZONTAL_FLIPPED,
        Orientation.VERTICAL,
    ]


def test_spawn_uses_fixed_pivot():
    piece = Piece.spawn((BallColor.YELLOW, BallColor.RED))
    assert (piece.row, piece.col) == (SPAWN_ROW, SPAWN_COL) == (-1, 2)
    assert piece.orientation is Orientation.VERTICAL


def test_move_shifts_pivot():
    piece = Piece.spawn((BallColor.YELLOW, BallColor.RED))
    piece.move(1, 2)
    assert (piece.row, piece.col) == (1, 3)
