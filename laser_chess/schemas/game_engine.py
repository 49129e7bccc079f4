from enum import Enum, IntEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOARD_SIZE = 8


# Players
class Player(IntEnum):
    PLAYER_1 = 0
    PLAYER_2 = 1

    @property
    def index(self) -> int:
        return int(self.value)

    @classmethod
    def from_index(cls, index: int) -> "Player | None":
        try:
            return cls(index)
        except ValueError:
            return None

    def opponent(self) -> "Player":
        return Player.PLAYER_2 if self is Player.PLAYER_1 else Player.PLAYER_1


class Chirality(str, Enum):
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"


# Laser headings (North is +y, East is +x)
class Heading(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def vector(self) -> tuple[int, int]:
        return _HEADING_VECTORS[self]


_HEADING_VECTORS = {
    Heading.NORTH: (0, 1),
    Heading.EAST: (1, 0),
    Heading.SOUTH: (0, -1),
    Heading.WEST: (-1, 0),
}


# Single-step move directions
class Octant(str, Enum):
    NORTH = "north"
    NORTH_EAST = "north_east"
    EAST = "east"
    SOUTH_EAST = "south_east"
    SOUTH = "south"
    SOUTH_WEST = "south_west"
    WEST = "west"
    NORTH_WEST = "north_west"

    @property
    def vector(self) -> tuple[int, int]:
        return _OCTANT_VECTORS[self]

    @classmethod
    def from_vector(cls, dx: int, dy: int) -> "Octant | None":
        for octant, vector in _OCTANT_VECTORS.items():
            if vector == (dx, dy):
                return octant
        return None


_OCTANT_VECTORS = {
    Octant.NORTH: (0, 1),
    Octant.NORTH_EAST: (1, 1),
    Octant.EAST: (1, 0),
    Octant.SOUTH_EAST: (1, -1),
    Octant.SOUTH: (0, -1),
    Octant.SOUTH_WEST: (-1, -1),
    Octant.WEST: (-1, 0),
    Octant.NORTH_WEST: (-1, 1),
}


# Diagonal facing of a mirror piece
class Orientation(str, Enum):
    NE = "NE"
    NW = "NW"
    SE = "SE"
    SW = "SW"

    def rotate(self, chirality: Chirality) -> "Orientation":
        """Turn the facing 90 degrees."""
        return _ROTATIONS[(self, chirality)]

    def mirrored(self) -> "Orientation":
        """Point reflection, used when a layout is copied to the other side."""
        return _MIRRORED[self]


_ROTATIONS = {
    (Orientation.NE, Chirality.CLOCKWISE): Orientation.SE,
    (Orientation.NE, Chirality.COUNTER_CLOCKWISE): Orientation.NW,
    (Orientation.NW, Chirality.CLOCKWISE): Orientation.NE,
    (Orientation.NW, Chirality.COUNTER_CLOCKWISE): Orientation.SW,
    (Orientation.SE, Chirality.CLOCKWISE): Orientation.SW,
    (Orientation.SE, Chirality.COUNTER_CLOCKWISE): Orientation.NE,
    (Orientation.SW, Chirality.CLOCKWISE): Orientation.NW,
    (Orientation.SW, Chirality.COUNTER_CLOCKWISE): Orientation.SE,
}

_MIRRORED = {
    Orientation.NE: Orientation.SW,
    Orientation.NW: Orientation.SE,
    Orientation.SE: Orientation.NW,
    Orientation.SW: Orientation.NE,
}


class Coord(BaseModel):
    """A square on the board, serialized as {"x": .., "y": ..}."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(..., ge=0, lt=BOARD_SIZE)
    y: int = Field(..., ge=0, lt=BOARD_SIZE)

    def mirrored(self) -> "Coord":
        return Coord(x=BOARD_SIZE - 1 - self.x, y=BOARD_SIZE - 1 - self.y)


# Piece kinds
class King(BaseModel):
    type: Literal["king"] = "king"


class Block(BaseModel):
    type: Literal["block"] = "block"
    stacked: bool = True


class OneSide(BaseModel):
    type: Literal["one_side"] = "one_side"
    orientation: Orientation


class TwoSide(BaseModel):
    type: Literal["two_side"] = "two_side"
    orientation: Orientation


PieceKind = Annotated[
    King | Block | OneSide | TwoSide,
    Field(discriminator="type"),
]


class Piece(BaseModel):
    kind: PieceKind
    allegiance: Player

    @classmethod
    def king(cls, allegiance: Player) -> "Piece":
        return cls(kind=King(), allegiance=allegiance)

    @classmethod
    def block(cls, allegiance: Player, stacked: bool = True) -> "Piece":
        return cls(kind=Block(stacked=stacked), allegiance=allegiance)

    @classmethod
    def mirror(cls, allegiance: Player, orientation: Orientation) -> "Piece":
        return cls(kind=OneSide(orientation=orientation), allegiance=allegiance)

    @classmethod
    def two_sided(cls, allegiance: Player, orientation: Orientation) -> "Piece":
        return cls(kind=TwoSide(orientation=orientation), allegiance=allegiance)

    @property
    def is_king(self) -> bool:
        return isinstance(self.kind, King)

    def opposing(self) -> "Piece":
        """The same piece as seen from the other side of the board."""
        kind = self.kind
        if isinstance(kind, (OneSide, TwoSide)):
            kind = kind.model_copy(update={"orientation": kind.orientation.mirrored()})
        return Piece(kind=kind, allegiance=self.allegiance.opponent())


def _empty_cells() -> list[list[Piece | None]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


class Board(BaseModel):
    """Core board state - an 8x8 grid of optional pieces, indexed cells[y][x]."""

    cells: list[list[Piece | None]] = Field(default_factory=_empty_cells)

    @field_validator("cells")
    @classmethod
    def validate_dimensions(cls, v: list[list[Piece | None]]) -> list[list[Piece | None]]:
        if len(v) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in v):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")
        return v

    def get(self, coord: Coord) -> Piece | None:
        return self.cells[coord.y][coord.x]

    def place(self, coord: Coord, piece: Piece | None) -> None:
        self.cells[coord.y][coord.x] = piece

    def pieces(self) -> list[tuple[Coord, Piece]]:
        """All occupied squares, row by row."""
        return [
            (Coord(x=x, y=y), piece)
            for y, row in enumerate(self.cells)
            for x, piece in enumerate(row)
            if piece is not None
        ]

    def kings(self) -> list[Piece]:
        return [piece for _, piece in self.pieces() if piece.is_king]


# Moves
class Step(BaseModel):
    """Move the piece one square."""

    kind: Literal["step"] = "step"
    direction: Octant


class Rotate(BaseModel):
    """Turn a mirror piece in place."""

    kind: Literal["rotate"] = "rotate"
    chirality: Chirality


MoveKind = Annotated[Step | Rotate, Field(discriminator="kind")]


class Move(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Coord = Field(..., alias="from")
    kind: MoveKind


# Starting layout entries, given from Player 1's side
class PlacedPiece(BaseModel):
    position: Coord
    kind: PieceKind


# Laser results, sent to clients after every accepted move
class HitOutcome(str, Enum):
    ABSORBED = "absorbed"
    DOWNGRADED = "downgraded"
    DESTROYED = "destroyed"


class LaserHit(BaseModel):
    """The terminal strike of a laser."""

    position: Coord
    piece: Piece
    outcome: HitOutcome
    replacement: Piece | None = None


class LaserOutcome(BaseModel):
    """Everything a beam did: the squares it entered and what it finally hit."""

    origin: Coord
    heading: Heading
    path: list[Coord] = Field(default_factory=list)
    hit: LaserHit | None = None
