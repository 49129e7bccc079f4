"""Validation layer for moves and the ProcessResult pattern.

Separates validation from processing logic:
- validate_move() checks if a move is legal on the current board
- ProcessResult replaces exceptions for control flow
"""

import logging
from dataclasses import dataclass
from enum import Enum

from laser_chess.schemas.game_engine import (
    Block,
    Board,
    King,
    LaserOutcome,
    Move,
    Player,
    Rotate,
    Step,
)

from .geometry import step_octant

logger = logging.getLogger(__name__)


class InvalidMove(str, Enum):
    """Reasons a move is rejected. No board is changed on any of these."""

    NO_PIECE_AT_FROM = "NO_PIECE_AT_FROM"
    NOT_YOUR_PIECE = "NOT_YOUR_PIECE"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    DESTINATION_OCCUPIED = "DESTINATION_OCCUPIED"
    CANNOT_ROTATE = "CANNOT_ROTATE"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    InvalidMove.NO_PIECE_AT_FROM: "No piece at 'from' position",
    InvalidMove.NOT_YOUR_PIECE: "The piece at 'from' does not belong to you",
    InvalidMove.OUT_OF_BOUNDS: "Move goes out of bounds",
    InvalidMove.DESTINATION_OCCUPIED: "The destination cell is already occupied",
    InvalidMove.CANNOT_ROTATE: "This piece cannot be rotated",
}


@dataclass
class ProcessResult:
    """Result of processing a move.

    Replaces exceptions for control flow, providing explicit success/failure
    with error codes suitable for client localization.
    """

    board: Board | None = None
    laser: LaserOutcome | None = None
    success: bool = True
    error: InvalidMove | None = None
    game_over: bool = False

    @property
    def error_code(self) -> str | None:
        return self.error.value if self.error else None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None

    @classmethod
    def ok(
        cls,
        board: Board,
        laser: LaserOutcome | None = None,
        game_over: bool = False,
    ) -> "ProcessResult":
        """Create a successful result with the new board."""
        return cls(board=board, laser=laser, success=True, game_over=game_over)

    @classmethod
    def failure(cls, error: InvalidMove) -> "ProcessResult":
        """Create a failure result. Failures never carry a board."""
        return cls(board=None, laser=None, success=False, error=error)


@dataclass
class ValidationResult:
    """Result of validating a move before applying it."""

    is_valid: bool = True
    error: InvalidMove | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, error: InvalidMove) -> "ValidationResult":
        return cls(is_valid=False, error=error)


def validate_move(board: Board, move: Move, player: Player) -> ValidationResult:
    """Validate a move before applying it.

    Checks, in order (first failure wins):
    - There is a piece on the 'from' square
    - The piece belongs to the moving player
    - A step stays on the board and lands on an empty square
    - A rotation targets a mirror piece

    Args:
        board: Current board.
        move: The move to validate.
        player: The player attempting the move.

    Returns:
        ValidationResult indicating success or the first violated rule.
    """
    logger.debug(
        "Validating move: from=(%d,%d), kind=%s, player=%d",
        move.from_.x,
        move.from_.y,
        move.kind.kind,
        player.index,
    )

    piece = board.get(move.from_)
    if piece is None:
        logger.warning("Validation failed: NO_PIECE_AT_FROM at (%d,%d)", move.from_.x, move.from_.y)
        return ValidationResult.invalid(InvalidMove.NO_PIECE_AT_FROM)

    if piece.allegiance != player:
        logger.warning(
            "Validation failed: NOT_YOUR_PIECE, owner=%d, attempted=%d",
            piece.allegiance.index,
            player.index,
        )
        return ValidationResult.invalid(InvalidMove.NOT_YOUR_PIECE)

    if isinstance(move.kind, Step):
        destination = step_octant(move.from_, move.kind.direction)
        if destination is None:
            logger.warning("Validation failed: OUT_OF_BOUNDS, direction=%s", move.kind.direction.value)
            return ValidationResult.invalid(InvalidMove.OUT_OF_BOUNDS)
        if board.get(destination) is not None:
            logger.warning(
                "Validation failed: DESTINATION_OCCUPIED at (%d,%d)",
                destination.x,
                destination.y,
            )
            return ValidationResult.invalid(InvalidMove.DESTINATION_OCCUPIED)

    elif isinstance(move.kind, Rotate):
        if isinstance(piece.kind, (King, Block)):
            logger.warning("Validation failed: CANNOT_ROTATE, piece=%s", piece.kind.type)
            return ValidationResult.invalid(InvalidMove.CANNOT_ROTATE)

    logger.debug("Move validated successfully")
    return ValidationResult.ok()
