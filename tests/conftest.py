import random

import pytest

from classic.board import Board
from classic.piece import Piece, PieceType, Player, Position


class FixedRandom(random.Random):
    """random() always returns the same value; makes measurements predictable."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def fixed_rng():
    return FixedRandom


@pytest.fixture
def kings_only() -> Board:
    """Empty board with just the two kings on e1 / e8."""
    board = Board(setup=False)
    board.place_piece(Position.parse("e1"), Piece(Player.WHITE, PieceType.KING))
    board.place_piece(Position.parse("e8"), Piece(Player.BLACK, PieceType.KING))
    return board
