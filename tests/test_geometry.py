"""Tests for board geometry and direction helpers.

Critical scenarios tested:
- Bounds checks never wrap or clamp
- Direction vectors (North is +y, East is +x)
- Point mirroring of squares, orientations and pieces
"""

import pytest

from laser_chess.schemas.game_engine import Heading, Octant, Orientation, Piece, Player
from laser_chess.services.game.engine import chebyshev_distance, in_bounds, step_heading, step_octant

from .conftest import P1, P2, at


class TestBounds:
    @pytest.mark.parametrize("x,y", [(0, 0), (7, 7), (3, 4)])
    def test_on_board(self, x: int, y: int):
        assert in_bounds(x, y)

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (8, 0), (0, 8)])
    def test_off_board(self, x: int, y: int):
        assert not in_bounds(x, y)

    def test_step_off_edge_returns_none(self):
        assert step_octant(at(0, 7), Octant.NORTH_WEST) is None
        assert step_heading(at(7, 3), Heading.EAST) is None

    def test_heading_vectors(self):
        assert step_heading(at(3, 3), Heading.NORTH) == at(3, 4)
        assert step_heading(at(3, 3), Heading.SOUTH) == at(3, 2)
        assert step_heading(at(3, 3), Heading.EAST) == at(4, 3)
        assert step_heading(at(3, 3), Heading.WEST) == at(2, 3)

    def test_chebyshev_distance(self):
        assert chebyshev_distance(at(0, 0), at(1, 1)) == 1
        assert chebyshev_distance(at(0, 0), at(2, 1)) == 2
        assert chebyshev_distance(at(5, 5), at(5, 5)) == 0

    def test_octant_from_vector(self):
        for octant in Octant:
            assert Octant.from_vector(*octant.vector) is octant
        assert Octant.from_vector(0, 0) is None
        assert Octant.from_vector(2, 0) is None


class TestMirroring:
    def test_coord_mirror(self):
        assert at(0, 0).mirrored() == at(7, 7)
        assert at(3, 7).mirrored() == at(4, 0)

    @pytest.mark.parametrize(
        "orientation,expected",
        [
            (Orientation.NE, Orientation.SW),
            (Orientation.SW, Orientation.NE),
            (Orientation.NW, Orientation.SE),
            (Orientation.SE, Orientation.NW),
        ],
    )
    def test_orientation_mirror(self, orientation: Orientation, expected: Orientation):
        assert orientation.mirrored() is expected

    def test_opposing_piece(self):
        assert Piece.mirror(P1, Orientation.NW).opposing() == Piece.mirror(P2, Orientation.SE)
        assert Piece.block(P2, stacked=False).opposing() == Piece.block(P1, stacked=False)

    def test_player_helpers(self):
        assert P1.opponent() is P2
        assert P2.opponent() is P1
        assert Player.from_index(1) is P2
        assert Player.from_index(2) is None
