"""Piece relocation and rotation."""

import logging

from laser_chess.schemas.game_engine import (
    Board,
    Move,
    OneSide,
    Player,
    Rotate,
    Step,
    TwoSide,
)

from .geometry import step_octant
from .validation import ProcessResult, validate_move

logger = logging.getLogger(__name__)


def apply_move(board: Board, move: Move, player: Player) -> ProcessResult:
    """Validate and apply a step or rotation.

    The given board is never modified. On success the result carries a new
    board; on failure it carries only the InvalidMove reason.
    """
    validation = validate_move(board, move, player)
    if not validation.is_valid:
        return ProcessResult.failure(validation.error)

    new_board = board.model_copy(deep=True)
    piece = new_board.get(move.from_)

    if isinstance(move.kind, Step):
        destination = step_octant(move.from_, move.kind.direction)
        new_board.place(destination, piece)
        new_board.place(move.from_, None)
        logger.debug(
            "Piece %s moved (%d,%d) -> (%d,%d)",
            piece.kind.type,
            move.from_.x,
            move.from_.y,
            destination.x,
            destination.y,
        )

    elif isinstance(move.kind, Rotate):
        kind = piece.kind
        if isinstance(kind, (OneSide, TwoSide)):
            kind = kind.model_copy(update={"orientation": kind.orientation.rotate(move.kind.chirality)})
        new_board.place(move.from_, piece.model_copy(update={"kind": kind}))
        logger.debug(
            "Piece %s at (%d,%d) rotated %s",
            piece.kind.type,
            move.from_.x,
            move.from_.y,
            move.kind.chirality.value,
        )

    return ProcessResult.ok(new_board)
