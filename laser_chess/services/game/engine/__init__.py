"""Game engine module - pure functional board simulation.

This module provides the core game engine with:
- Move validation and application (steps and rotations)
- Laser tracing, reflection and resolution
- ProcessResult pattern for error handling
- Terminal-state detection

Usage:
    from laser_chess.services.game.engine import process_move

    result = process_move(board, move, Player.PLAYER_1)

    if result.success:
        board = result.board
        laser = result.laser  # path and terminal hit, for clients
    else:
        # Handle rejection
        print(f"Error: {result.error_code} - {result.error_message}")
"""

# Geometry
from .geometry import chebyshev_distance, in_bounds, step_heading, step_octant

# Laser
from .laser import (
    MAX_LASER_STEPS,
    HitOutcome,
    Impact,
    Laser,
    LaserHit,
    LaserLoopError,
    LaserOutcome,
    apply_laser_hit,
    cast_laser,
    laser_origin,
    reflect,
    resolve_turn,
    trace_laser,
)

# Moves
from .movement import apply_move

# Main processing
from .process import get_winner, is_game_over, process_move

# Result types
from .validation import InvalidMove, ProcessResult, ValidationResult, validate_move

__all__ = [
    # Geometry
    "chebyshev_distance",
    "in_bounds",
    "step_heading",
    "step_octant",
    # Laser
    "MAX_LASER_STEPS",
    "HitOutcome",
    "Impact",
    "Laser",
    "LaserHit",
    "LaserLoopError",
    "LaserOutcome",
    "apply_laser_hit",
    "cast_laser",
    "laser_origin",
    "reflect",
    "resolve_turn",
    "trace_laser",
    # Processing
    "apply_move",
    "process_move",
    "is_game_over",
    "get_winner",
    # Validation
    "InvalidMove",
    "ProcessResult",
    "ValidationResult",
    "validate_move",
]
