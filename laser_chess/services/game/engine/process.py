"""Main entry point for turn processing.

This module provides the primary interface for playing a turn:
- process_move(): validates and applies a move, then fires the mover's laser
- is_game_over() / get_winner(): terminal-state queries
"""

import logging

from laser_chess.schemas.game_engine import Board, Move, Player

from .laser import apply_laser_hit, laser_origin, trace_laser
from .movement import apply_move
from .validation import ProcessResult

logger = logging.getLogger(__name__)


def process_move(board: Board, move: Move, player: Player) -> ProcessResult:
    """Play one full turn and return the result.

    It:
    1. Validates and applies the move (rejections stop here)
    2. Fires the mover's laser and applies the terminal hit
    3. Reports whether the game is over

    Args:
        board: Current board. Never modified.
        move: The move to play.
        player: The player making the move.

    Returns:
        ProcessResult containing:
        - success: Whether the move was accepted
        - board: The board after the move and the laser (if accepted)
        - laser: The beam's path and terminal hit (if accepted)
        - game_over: Whether a king was removed
        - error/error_code/error_message: Rejection details (if rejected)

    Example:
        >>> result = process_move(board, move, Player.PLAYER_1)
        >>> if result.success:
        ...     board = result.board
        ... else:
        ...     send_error(result.error_code, result.error_message)
    """
    logger.info(
        "Processing move: player=%d, from=(%d,%d), kind=%s",
        player.index,
        move.from_.x,
        move.from_.y,
        move.kind.kind,
    )

    moved = apply_move(board, move, player)
    if not moved.success:
        logger.warning(
            "Move rejected: code=%s, message=%s, player=%d",
            moved.error_code,
            moved.error_message,
            player.index,
        )
        return moved

    laser = trace_laser(moved.board, laser_origin(player))
    new_board = apply_laser_hit(moved.board, laser.hit)
    game_over = is_game_over(new_board)

    logger.info(
        "Move processed: player=%d, laser_squares=%d, hit=%s, game_over=%s",
        player.index,
        len(laser.path),
        laser.hit.outcome.value if laser.hit else None,
        game_over,
    )
    return ProcessResult.ok(new_board, laser, game_over=game_over)


def is_game_over(board: Board) -> bool:
    """True once fewer than two kings remain on the board."""
    return len(board.kings()) < 2


def get_winner(board: Board) -> Player | None:
    """The owner of the only king left, if exactly one remains.

    Returns:
        The winning Player, or None while both kings (or neither) remain.
    """
    kings = board.kings()
    logger.debug("Win check: kings_remaining=%d", len(kings))
    if len(kings) == 1:
        winner = kings[0].allegiance
        logger.info("Winner detected: player=%d", winner.index)
        return winner
    return None
