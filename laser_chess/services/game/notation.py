"""Human-readable notation for squares, moves and boards.

Files A-H map to x 0-7. Ranks are counted from the bottom of the printed
board, so rank 8 is y=0 and rank 1 is y=7.
"""

from laser_chess.schemas.game_engine import (
    BOARD_SIZE,
    Block,
    Board,
    Chirality,
    Coord,
    Move,
    Octant,
    Piece,
    Player,
    Rotate,
    Step,
)

from .engine.geometry import chebyshev_distance

FILES = "ABCDEFGH"
RANKS = "".join(str(rank) for rank in range(1, BOARD_SIZE + 1))

_GLYPHS = {
    ("king", False, Player.PLAYER_1): "♔",
    ("king", False, Player.PLAYER_2): "♚",
    ("block", False, Player.PLAYER_1): "□",
    ("block", False, Player.PLAYER_2): "■",
    ("block", True, Player.PLAYER_1): "⧠",
    ("block", True, Player.PLAYER_2): "⧛",
    ("one_side", False, Player.PLAYER_1): "◢",
    ("one_side", False, Player.PLAYER_2): "◥",
    ("two_side", False, Player.PLAYER_1): "◊",
    ("two_side", False, Player.PLAYER_2): "♦",
}


class NotationError(ValueError):
    """Raised when move input cannot be parsed."""


def parse_coordinate(text: str) -> Coord | None:
    """Parse a square such as 'E1'. Returns None on bad input."""
    text = text.strip()
    if len(text) != 2:
        return None

    file_char, rank_char = text[0].upper(), text[1]
    if file_char not in FILES or rank_char not in RANKS:
        return None

    return Coord(x=FILES.index(file_char), y=BOARD_SIZE - int(rank_char))


def format_coordinate(coord: Coord) -> str:
    return f"{FILES[coord.x]}{BOARD_SIZE - coord.y}"


def parse_move_input(text: str) -> Move:
    """Parse 'E1 E2' (step to an adjacent square) or 'E1 L' / 'E1 R' (rotate).

    Raises:
        NotationError: If the input is not a valid move description.
    """
    parts = text.split()
    if len(parts) != 2:
        raise NotationError("Invalid format. Use: E1 E2 (move) or E1 L/R (rotate)")

    origin = parse_coordinate(parts[0])
    if origin is None:
        raise NotationError(f"Invalid square: {parts[0]}")

    target = parts[1].upper()
    if target == "L":
        return Move(from_=origin, kind=Rotate(chirality=Chirality.COUNTER_CLOCKWISE))
    if target == "R":
        return Move(from_=origin, kind=Rotate(chirality=Chirality.CLOCKWISE))

    destination = parse_coordinate(target)
    if destination is None:
        raise NotationError(f"Invalid destination: {parts[1]}")
    if chebyshev_distance(origin, destination) != 1:
        raise NotationError("Invalid move: destination must be adjacent to source")

    direction = Octant.from_vector(destination.x - origin.x, destination.y - origin.y)
    return Move(from_=origin, kind=Step(direction=direction))


def describe_move(move: Move) -> str:
    """Short summary of a move, e.g. "E1 → (moved north)"."""
    origin = format_coordinate(move.from_)
    if isinstance(move.kind, Step):
        return f"{origin} → (moved {move.kind.direction.value.replace('_', ' ')})"
    if move.kind.chirality is Chirality.CLOCKWISE:
        return f"{origin} ↻ (rotated clockwise)"
    return f"{origin} ↺ (rotated counter-clockwise)"


def piece_glyph(piece: Piece) -> str:
    kind = piece.kind
    stacked = isinstance(kind, Block) and kind.stacked
    return _GLYPHS[(kind.type, stacked, piece.allegiance)]


def render_board(board: Board) -> str:
    """Render the board as text, rank 8 at the top."""
    lines = ["    " + " ".join(FILES)]
    for y, row in enumerate(board.cells):
        cells = " ".join("." if piece is None else piece_glyph(piece) for piece in row)
        lines.append(f" {BOARD_SIZE - y}  {cells}")
    return "\n".join(lines)

