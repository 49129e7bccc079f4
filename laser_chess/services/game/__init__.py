"""Game service module.

Provides:
- Board initialization (start_game.py)
- Game engine processing (engine/)
- Human-readable notation (notation.py)
"""

# Re-export from engine for convenience
from .engine import (
    InvalidMove,
    ProcessResult,
    apply_move,
    get_winner,
    is_game_over,
    process_move,
    resolve_turn,
)
from .notation import NotationError, parse_move_input, render_board
from .start_game import initialize_board, validate_layout

__all__ = [
    # Initialization
    "initialize_board",
    "validate_layout",
    # Engine
    "InvalidMove",
    "ProcessResult",
    "apply_move",
    "process_move",
    "resolve_turn",
    "is_game_over",
    "get_winner",
    # Notation
    "NotationError",
    "parse_move_input",
    "render_board",
]
