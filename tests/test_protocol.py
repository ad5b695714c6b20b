"""
Tests for move requests, responses and board info encoding.
"""

import pytest

from app.game import Game
from app.protocol import MoveRequest, board_info, submit_request
from classic.errors import MoveParseError
from classic.moves import AgreeToTieMove, CapitulateMove, CastleMove, CastleSide, OrdinaryMove, QuantumMove
from classic.piece import Piece, PieceType, Player, Position

W, B = Player.WHITE, Player.BLACK


def sq(name: str) -> Position:
    return Position.parse(name)


@pytest.fixture
def game() -> Game:
    return Game(seed=5)


class TestParse:

    def test_ordinary(self, game) -> None:
        move = MoveRequest("ordinary", source="e2", target="e4").parse(game)
        assert move == OrdinaryMove(Piece(W, PieceType.PAWN), sq("e2"), sq("e4"))

    def test_quantum_with_middle(self, game) -> None:
        move = MoveRequest("quantum", source="G1", middle="f3", target="h4").parse(game)
        assert move == QuantumMove(Piece(W, PieceType.KNIGHT), sq("g1"), sq("h4"), sq("f3"))

    def test_quantum_without_middle(self, game) -> None:
        move = MoveRequest("quantum", source="b1", middle="", target="c3").parse(game)
        assert move.middle is None

    def test_player_moves(self, game) -> None:
        assert MoveRequest("capitulate").parse(game) == CapitulateMove(W)
        assert MoveRequest("agree_to_tie").parse(game) == AgreeToTieMove(W)
        assert MoveRequest("castle_left").parse(game) == CastleMove(W, CastleSide.LEFT)
        assert MoveRequest("castle_right").parse(game) == CastleMove(W, CastleSide.RIGHT)

    @pytest.mark.parametrize("request_", [
        MoveRequest("teleport", source="e2", target="e4"),
        MoveRequest("ordinary", source="e2"),
        MoveRequest("ordinary", source="e9", target="e4"),
        MoveRequest("ordinary", source="e4", target="e5"),
        MoveRequest("quantum", source="e2", middle="zz", target="e4"),
    ])
    def test_malformed(self, game, request_) -> None:
        with pytest.raises(MoveParseError):
            request_.parse(game)


class TestSubmit:

    def test_success(self, game) -> None:
        response = submit_request(game, MoveRequest("quantum", source="e2", target="e4"))
        assert response.success
        assert response.message == ""
        assert game.active_player is B

    def test_parse_failure_is_reported(self, game) -> None:
        response = submit_request(game, MoveRequest("ordinary", source="e4", target="e5"))
        assert not response.success
        assert response.message == "No piece found at e4"

    def test_process_failure_is_reported(self, game) -> None:
        response = submit_request(game, MoveRequest("ordinary", source="e7", target="e5"))
        assert not response.success
        assert response.message == "Waiting for another player's move"
        assert game.active_player is W


class TestBoardInfo:

    def test_starting_position(self, game) -> None:
        info = board_info(game)
        assert info["game_state"] == "game_still_going"
        assert info["active_player"] == "white"
        assert len(info["squares"]) == 32
        assert info["squares"]["e1"] == {"player": "white", "piece": "king", "probability": 1.0}
        assert "e4" not in info["squares"]

    def test_split_piece_probabilities(self, game) -> None:
        submit_request(game, MoveRequest("quantum", source="e2", target="e4"))
        info = board_info(game)
        assert info["active_player"] == "black"
        assert info["squares"]["e2"]["probability"] == 0.5
        assert info["squares"]["e4"]["probability"] == 0.5
