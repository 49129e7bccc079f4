"""Shared fixtures for game engine and session tests."""

import asyncio

import pytest

from laser_chess.schemas.game_engine import (
    Board,
    Chirality,
    Coord,
    Move,
    Octant,
    Orientation,
    Piece,
    Player,
    Rotate,
    Step,
)
from laser_chess.schemas.ws import WSCloseCode
from laser_chess.services.websocket.connection import PlayerConnection, SessionClosed

P1 = Player.PLAYER_1
P2 = Player.PLAYER_2

# Standard king squares
P1_KING = Coord(x=3, y=7)
P2_KING = Coord(x=4, y=0)


def at(x: int, y: int) -> Coord:
    """Shorthand for a square."""
    return Coord(x=x, y=y)


def create_board(pieces: dict[tuple[int, int], Piece] | None = None) -> Board:
    """Helper to create a board from {(x, y): piece}."""
    board = Board()
    for (x, y), piece in (pieces or {}).items():
        board.place(at(x, y), piece)
    return board


def create_kings_board(pieces: dict[tuple[int, int], Piece] | None = None) -> Board:
    """Board with both kings on their starting squares plus extra pieces."""
    board = create_board(pieces)
    board.place(P1_KING, Piece.king(P1))
    board.place(P2_KING, Piece.king(P2))
    return board


def step(x: int, y: int, direction: Octant) -> Move:
    return Move(from_=at(x, y), kind=Step(direction=direction))


def rotate(x: int, y: int, chirality: Chirality = Chirality.CLOCKWISE) -> Move:
    return Move(from_=at(x, y), kind=Rotate(chirality=chirality))


@pytest.fixture
def empty_board() -> Board:
    return Board()


@pytest.fixture
def kings_board() -> Board:
    """Player 1's king at (3,7), Player 2's king at (4,0), nothing else."""
    return create_kings_board()


@pytest.fixture
def winning_board() -> Board:
    """Player 1 can kill Player 2's king by stepping the mirror at (7,1) south.

    From (7,0) the mirror turns Player 1's north-bound laser west along
    row 0, straight into the king at (4,0).
    """
    return create_kings_board({(7, 1): Piece.mirror(P1, Orientation.SW)})


class FakeConnection(PlayerConnection):
    """In-memory PlayerConnection.

    Frames queued with push() are handed out in order; pushing None makes
    the next receive behave like a disconnect.
    """

    def __init__(self, name: str = "player"):
        super().__init__(name)
        self.inbox: asyncio.Queue[str | None] = asyncio.Queue()
        self.sent: list[dict] = []
        self.closed_with: int | None = None
        self.is_open = True

    def push(self, *frames: str | None) -> None:
        for frame in frames:
            self.inbox.put_nowait(frame)

    def sent_types(self) -> list[str]:
        return [message["type"] for message in self.sent]

    @property
    def connected(self) -> bool:
        return self.is_open

    async def send_json(self, data: dict) -> None:
        if not self.is_open:
            raise SessionClosed("closed")
        self.sent.append(data)

    async def receive_text(self) -> str:
        if not self.is_open:
            raise SessionClosed("closed")
        frame = await self.inbox.get()
        if frame is None:
            self.is_open = False
            raise SessionClosed("disconnected")
        return frame

    async def close(self, code: int = WSCloseCode.NORMAL) -> None:
        self.is_open = False
        self.closed_with = code
