"""Laser firing, reflection and resolution.

The beam is walked with an explicit loop: cast straight until something is
in the way, reflect off a mirror face, advance one square, repeat. The walk
ends when the beam leaves the board or strikes a piece that does not reflect
it. Only that final strike can change the board, and only on one square.
"""

import logging
from dataclasses import dataclass

from laser_chess.schemas.game_engine import (
    BOARD_SIZE,
    Block,
    Board,
    Coord,
    Heading,
    HitOutcome,
    King,
    LaserHit,
    LaserOutcome,
    OneSide,
    Orientation,
    Piece,
    Player,
    TwoSide,
)

from .geometry import step_heading

logger = logging.getLogger(__name__)

# Each (square, heading) pair can be visited at most once on a beam that
# starts at the board edge, so this bound is never reached.
MAX_LASER_STEPS = BOARD_SIZE * BOARD_SIZE * len(Heading)


class LaserLoopError(RuntimeError):
    """Raised if a beam walks more than MAX_LASER_STEPS squares."""


@dataclass(frozen=True)
class Laser:
    """Where a laser is: a square plus the heading it travels in."""

    position: Coord
    heading: Heading

    def advance(self) -> "Laser | None":
        position = step_heading(self.position, self.heading)
        if position is None:
            return None
        return Laser(position=position, heading=self.heading)


@dataclass(frozen=True)
class Impact:
    """A non-reflecting strike: what happens to the piece that was hit."""

    outcome: HitOutcome
    replacement: Piece | None


# Incoming heading -> outgoing heading, per mirror face
_ONE_SIDE_REFLECTIONS: dict[Orientation, dict[Heading, Heading]] = {
    Orientation.NE: {Heading.SOUTH: Heading.EAST, Heading.WEST: Heading.NORTH},
    Orientation.NW: {Heading.SOUTH: Heading.WEST, Heading.EAST: Heading.NORTH},
    Orientation.SE: {Heading.NORTH: Heading.EAST, Heading.WEST: Heading.SOUTH},
    Orientation.SW: {Heading.NORTH: Heading.WEST, Heading.EAST: Heading.SOUTH},
}

_SLASH = {
    Heading.SOUTH: Heading.EAST,
    Heading.WEST: Heading.NORTH,
    Heading.NORTH: Heading.WEST,
    Heading.EAST: Heading.SOUTH,
}
_BACKSLASH = {
    Heading.SOUTH: Heading.WEST,
    Heading.EAST: Heading.NORTH,
    Heading.NORTH: Heading.EAST,
    Heading.WEST: Heading.SOUTH,
}
_TWO_SIDE_REFLECTIONS: dict[Orientation, dict[Heading, Heading]] = {
    Orientation.NE: _SLASH,
    Orientation.SW: _SLASH,
    Orientation.NW: _BACKSLASH,
    Orientation.SE: _BACKSLASH,
}


def reflect(piece: Piece, heading: Heading) -> Heading | Impact:
    """Reflect a laser off a piece.

    Returns the new heading if the laser met a reflective face, or an Impact
    describing the piece's fate otherwise. Mirrors are never destroyed: a
    strike on a non-reflective edge absorbs the beam and leaves them as-is.
    """
    kind = piece.kind
    if isinstance(kind, OneSide):
        new_heading = _ONE_SIDE_REFLECTIONS[kind.orientation].get(heading)
        if new_heading is None:
            return Impact(HitOutcome.ABSORBED, piece)
        return new_heading
    if isinstance(kind, TwoSide):
        return _TWO_SIDE_REFLECTIONS[kind.orientation][heading]
    if isinstance(kind, Block):
        if kind.stacked:
            return Impact(
                HitOutcome.DOWNGRADED,
                piece.model_copy(update={"kind": Block(stacked=False)}),
            )
        return Impact(HitOutcome.DESTROYED, None)
    if isinstance(kind, King):
        return Impact(HitOutcome.DESTROYED, None)
    raise TypeError(f"Unknown piece kind: {kind!r}")


def laser_origin(player: Player) -> Laser:
    """Fixed firing square and heading for each player."""
    if player is Player.PLAYER_1:
        return Laser(position=Coord(x=BOARD_SIZE - 1, y=0), heading=Heading.NORTH)
    return Laser(position=Coord(x=0, y=BOARD_SIZE - 1), heading=Heading.SOUTH)


class _StepCounter:
    def __init__(self) -> None:
        self.steps = 0

    def tick(self) -> None:
        self.steps += 1
        if self.steps > MAX_LASER_STEPS:
            raise LaserLoopError(f"Laser exceeded {MAX_LASER_STEPS} steps")


def cast_laser(
    board: Board,
    laser: Laser,
    path: list[Coord] | None = None,
    counter: _StepCounter | None = None,
) -> tuple[Laser, Piece] | None:
    """Raycast in a straight line from the laser's current square.

    The starting square itself is tested first. Returns the laser at the
    first occupied square together with the piece there, or None if the
    beam leaves the board. Entered squares are appended to ``path``.
    """
    counter = counter or _StepCounter()
    current: Laser | None = laser
    while current is not None:
        if path is not None:
            path.append(current.position)
        piece = board.get(current.position)
        if piece is not None:
            return current, piece
        current = current.advance()
        counter.tick()
    return None


def trace_laser(board: Board, laser: Laser) -> LaserOutcome:
    """Bounce a laser off mirrors until it leaves the board or hits something.

    Does not modify the board; see apply_laser_hit().
    """
    outcome = LaserOutcome(origin=laser.position, heading=laser.heading)
    counter = _StepCounter()
    current: Laser | None = laser

    while current is not None:
        cast = cast_laser(board, current, outcome.path, counter)
        if cast is None:
            break
        at, piece = cast
        result = reflect(piece, at.heading)
        if isinstance(result, Heading):
            logger.debug(
                "Laser reflected at (%d,%d): %s -> %s",
                at.position.x,
                at.position.y,
                at.heading.value,
                result.value,
            )
            current = Laser(position=at.position, heading=result).advance()
            counter.tick()
            continue

        outcome.hit = LaserHit(
            position=at.position,
            piece=piece,
            outcome=result.outcome,
            replacement=result.replacement,
        )
        logger.debug(
            "Laser hit %s at (%d,%d): %s",
            piece.kind.type,
            at.position.x,
            at.position.y,
            result.outcome.value,
        )
        return outcome

    logger.debug("Laser left the board after %d squares", len(outcome.path))
    return outcome


def apply_laser_hit(board: Board, hit: LaserHit | None) -> Board:
    """Return a copy of the board with the terminal strike applied."""
    new_board = board.model_copy(deep=True)
    if hit is not None and hit.outcome is not HitOutcome.ABSORBED:
        new_board.place(hit.position, hit.replacement)
    return new_board


def resolve_turn(board: Board, player: Player) -> Board:
    """Fire the player's laser and return the resulting board."""
    outcome = trace_laser(board, laser_origin(player))
    return apply_laser_hit(board, outcome.hit)
