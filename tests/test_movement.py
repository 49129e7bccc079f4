"""Tests for move validation and application.

Critical scenarios tested:
- Rejections in priority order (no piece, not yours, out of bounds, occupied, cannot rotate)
- Steps in all eight directions
- Rotations of one-sided and two-sided mirrors
- The input board is never modified
"""

import pytest

from laser_chess.schemas.game_engine import (
    Block,
    Board,
    Chirality,
    Octant,
    OneSide,
    Orientation,
    Piece,
    TwoSide,
)
from laser_chess.services.game.engine import (
    InvalidMove,
    apply_move,
    validate_move,
)

from .conftest import P1, P2, at, create_board, rotate, step

# Every edge square paired with every direction that leaves the board
OFF_BOARD_STEPS = [
    (x, y, direction)
    for y in range(8)
    for x in range(8)
    for direction in Octant
    if not (0 <= x + direction.vector[0] < 8 and 0 <= y + direction.vector[1] < 8)
]


class TestRejections:
    """Test that illegal moves are rejected with the right reason."""

    def test_no_piece_at_from(self, empty_board: Board):
        """Moving from an empty square should fail."""
        result = apply_move(empty_board, step(3, 3, Octant.NORTH), P1)

        assert not result.success
        assert result.error is InvalidMove.NO_PIECE_AT_FROM
        assert result.board is None

    def test_not_your_piece(self):
        """A player cannot move the opponent's piece."""
        board = create_board({(3, 3): Piece.block(P2)})

        result = apply_move(board, step(3, 3, Octant.NORTH), P1)

        assert not result.success
        assert result.error is InvalidMove.NOT_YOUR_PIECE

    def test_ownership_checked_before_bounds(self):
        """An opponent's piece on the edge reports ownership, not bounds."""
        board = create_board({(0, 0): Piece.block(P2)})

        result = apply_move(board, step(0, 0, Octant.SOUTH), P1)

        assert result.error is InvalidMove.NOT_YOUR_PIECE

    def test_off_board_steps_cover_every_edge(self):
        """28 edge squares: corners leave in 5 directions, other edge squares in 3."""
        assert len({(x, y) for x, y, _ in OFF_BOARD_STEPS}) == 28
        assert len(OFF_BOARD_STEPS) == 4 * 5 + 24 * 3

    @pytest.mark.parametrize("x,y,direction", OFF_BOARD_STEPS)
    def test_out_of_bounds(self, x: int, y: int, direction: Octant):
        """Steps off any edge or corner should fail."""
        board = create_board({(x, y): Piece.block(P1)})

        result = apply_move(board, step(x, y, direction), P1)

        assert not result.success
        assert result.error is InvalidMove.OUT_OF_BOUNDS

    def test_destination_occupied_by_own_piece(self):
        board = create_board({(3, 3): Piece.block(P1), (3, 4): Piece.block(P1)})

        result = apply_move(board, step(3, 3, Octant.NORTH), P1)

        assert result.error is InvalidMove.DESTINATION_OCCUPIED

    def test_destination_occupied_by_opponent(self):
        """There are no captures: an enemy piece blocks the step too."""
        board = create_board({(3, 3): Piece.block(P1), (4, 4): Piece.king(P2)})

        result = apply_move(board, step(3, 3, Octant.NORTH_EAST), P1)

        assert result.error is InvalidMove.DESTINATION_OCCUPIED

    def test_king_cannot_rotate(self):
        board = create_board({(3, 7): Piece.king(P1)})

        result = apply_move(board, rotate(3, 7), P1)

        assert result.error is InvalidMove.CANNOT_ROTATE

    @pytest.mark.parametrize("stacked", [True, False])
    def test_block_cannot_rotate(self, stacked: bool):
        board = create_board({(2, 2): Piece.block(P1, stacked=stacked)})

        result = apply_move(board, rotate(2, 2, Chirality.COUNTER_CLOCKWISE), P1)

        assert result.error is InvalidMove.CANNOT_ROTATE

    def test_error_code_and_message(self, empty_board: Board):
        """Rejections expose a stable code and a readable message."""
        result = apply_move(empty_board, step(0, 0, Octant.NORTH), P1)

        assert result.error_code == "NO_PIECE_AT_FROM"
        assert result.error_message == "No piece at 'from' position"

    def test_validate_move_accepts_legal_step(self):
        board = create_board({(3, 3): Piece.block(P1)})

        validation = validate_move(board, step(3, 3, Octant.WEST), P1)

        assert validation.is_valid
        assert validation.error is None


class TestSteps:
    """Test piece relocation."""

    @pytest.mark.parametrize(
        "direction,expected",
        [
            (Octant.NORTH, (3, 4)),
            (Octant.NORTH_EAST, (4, 4)),
            (Octant.EAST, (4, 3)),
            (Octant.SOUTH_EAST, (4, 2)),
            (Octant.SOUTH, (3, 2)),
            (Octant.SOUTH_WEST, (2, 2)),
            (Octant.WEST, (2, 3)),
            (Octant.NORTH_WEST, (2, 4)),
        ],
    )
    def test_step_in_every_direction(self, direction: Octant, expected: tuple[int, int]):
        """North is +y and East is +x."""
        piece = Piece.mirror(P1, Orientation.NE)
        board = create_board({(3, 3): piece})

        result = apply_move(board, step(3, 3, direction), P1)

        assert result.success
        assert result.board.get(at(3, 3)) is None
        assert result.board.get(at(*expected)) == piece

    def test_king_can_step(self):
        board = create_board({(3, 7): Piece.king(P1)})

        result = apply_move(board, step(3, 7, Octant.SOUTH), P1)

        assert result.success
        assert result.board.get(at(3, 6)) == Piece.king(P1)

    def test_step_keeps_stacked_block(self):
        board = create_board({(5, 5): Piece.block(P2, stacked=True)})

        result = apply_move(board, step(5, 5, Octant.EAST), P2)

        moved = result.board.get(at(6, 5))
        assert isinstance(moved.kind, Block)
        assert moved.kind.stacked
        assert moved.allegiance == P2

    def test_only_moved_piece_changes(self):
        board = create_board({(1, 1): Piece.block(P1), (6, 6): Piece.block(P2)})

        result = apply_move(board, step(1, 1, Octant.NORTH), P1)

        assert len(result.board.pieces()) == 2
        assert result.board.get(at(6, 6)) == Piece.block(P2)


class TestRotations:
    """Test mirror rotations."""

    @pytest.mark.parametrize(
        "start,chirality,expected",
        [
            (Orientation.NE, Chirality.CLOCKWISE, Orientation.SE),
            (Orientation.SE, Chirality.CLOCKWISE, Orientation.SW),
            (Orientation.SW, Chirality.CLOCKWISE, Orientation.NW),
            (Orientation.NW, Chirality.CLOCKWISE, Orientation.NE),
            (Orientation.NE, Chirality.COUNTER_CLOCKWISE, Orientation.NW),
            (Orientation.NW, Chirality.COUNTER_CLOCKWISE, Orientation.SW),
            (Orientation.SW, Chirality.COUNTER_CLOCKWISE, Orientation.SE),
            (Orientation.SE, Chirality.COUNTER_CLOCKWISE, Orientation.NE),
        ],
    )
    def test_rotate_one_sided(self, start: Orientation, chirality: Chirality, expected: Orientation):
        board = create_board({(4, 4): Piece.mirror(P1, start)})

        result = apply_move(board, rotate(4, 4, chirality), P1)

        assert result.success
        kind = result.board.get(at(4, 4)).kind
        assert isinstance(kind, OneSide)
        assert kind.orientation is expected

    def test_rotate_two_sided(self):
        board = create_board({(4, 4): Piece.two_sided(P2, Orientation.NW)})

        result = apply_move(board, rotate(4, 4, Chirality.CLOCKWISE), P2)

        kind = result.board.get(at(4, 4)).kind
        assert isinstance(kind, TwoSide)
        assert kind.orientation is Orientation.NE

    @pytest.mark.parametrize("chirality", list(Chirality))
    def test_four_rotations_return_to_start(self, chirality: Chirality):
        board = create_board({(2, 5): Piece.mirror(P1, Orientation.SW)})

        for _ in range(4):
            result = apply_move(board, rotate(2, 5, chirality), P1)
            assert result.success
            board = result.board

        assert board.get(at(2, 5)) == Piece.mirror(P1, Orientation.SW)

    def test_opposite_rotations_cancel(self):
        board = create_board({(2, 5): Piece.mirror(P1, Orientation.NE)})

        board = apply_move(board, rotate(2, 5, Chirality.CLOCKWISE), P1).board
        board = apply_move(board, rotate(2, 5, Chirality.COUNTER_CLOCKWISE), P1).board

        assert board.get(at(2, 5)) == Piece.mirror(P1, Orientation.NE)


class TestAtomicity:
    """The board passed in is left untouched."""

    def test_successful_step_does_not_mutate_input(self):
        board = create_board({(3, 3): Piece.block(P1)})
        snapshot = board.model_copy(deep=True)

        result = apply_move(board, step(3, 3, Octant.NORTH), P1)

        assert result.success
        assert board == snapshot

    def test_successful_rotation_does_not_mutate_input(self):
        board = create_board({(3, 3): Piece.mirror(P1, Orientation.NE)})
        snapshot = board.model_copy(deep=True)

        apply_move(board, rotate(3, 3), P1)

        assert board == snapshot

    def test_rejected_move_does_not_mutate_input(self):
        board = create_board({(3, 3): Piece.block(P1), (3, 4): Piece.block(P2)})
        snapshot = board.model_copy(deep=True)

        result = apply_move(board, step(3, 3, Octant.NORTH), P1)

        assert not result.success
        assert board == snapshot
