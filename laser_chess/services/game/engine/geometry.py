"""Board geometry helpers.

Every step either lands on a square inside the 8x8 grid or returns None;
nothing here wraps around or clamps.
"""

from laser_chess.schemas.game_engine import BOARD_SIZE, Coord, Heading, Octant


def in_bounds(x: int, y: int) -> bool:
    """Check whether raw integer coordinates lie on the board."""
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def offset(coord: Coord, dx: int, dy: int) -> Coord | None:
    """Shift a coordinate, or return None if the result leaves the board."""
    x, y = coord.x + dx, coord.y + dy
    if not in_bounds(x, y):
        return None
    return Coord(x=x, y=y)


def step_octant(coord: Coord, direction: Octant) -> Coord | None:
    """One piece step in any of the eight directions."""
    return offset(coord, *direction.vector)


def step_heading(coord: Coord, heading: Heading) -> Coord | None:
    """One laser step along an orthogonal heading."""
    return offset(coord, *heading.vector)


def chebyshev_distance(a: Coord, b: Coord) -> int:
    return max(abs(a.x - b.x), abs(a.y - b.y))
