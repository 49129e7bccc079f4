from laser_chess.schemas.game_engine import (
    BOARD_SIZE,
    Board,
    Coord,
    King,
    Piece,
    PlacedPiece,
    Player,
)

PLAYER_1_KING = Coord(x=3, y=BOARD_SIZE - 1)
PLAYER_2_KING = Coord(x=4, y=0)


def validate_layout(layout: list[PlacedPiece]) -> None:
    """Validate a starting layout before building a board from it."""
    reserved = {PLAYER_1_KING, PLAYER_2_KING}
    squares: set[Coord] = set()

    for entry in layout:
        if isinstance(entry.kind, King):
            raise ValueError("Kings are placed automatically and cannot appear in a layout.")
        if entry.position in reserved:
            raise ValueError(f"Square ({entry.position.x},{entry.position.y}) is reserved for a king.")
        if entry.position in squares:
            raise ValueError(f"Duplicate square in layout: ({entry.position.x},{entry.position.y})")
        squares.add(entry.position)

    # The mirrored copy must not land on a square the layout already uses
    for entry in layout:
        mirrored = entry.position.mirrored()
        if mirrored in squares or mirrored in reserved:
            raise ValueError(
                f"Square ({entry.position.x},{entry.position.y}) collides with its mirrored "
                f"square ({mirrored.x},{mirrored.y})."
            )


def initialize_board(layout: list[PlacedPiece] | None = None) -> Board:
    """
    Validate a layout and return a starting Board.

    Args:
        layout: Extra pieces given from Player 1's side. Each one is also
                placed for Player 2 on the point-mirrored square.

    Returns:
        A Board with both kings and the mirrored layout.

    Raises:
        ValueError: If the layout is invalid.
    """
    layout = layout or []
    validate_layout(layout)

    board = Board()
    board.place(PLAYER_1_KING, Piece.king(Player.PLAYER_1))
    board.place(PLAYER_2_KING, Piece.king(Player.PLAYER_2))

    for entry in layout:
        piece = Piece(kind=entry.kind, allegiance=Player.PLAYER_1)
        board.place(entry.position, piece)
        board.place(entry.position.mirrored(), piece.opposing())

    return board
