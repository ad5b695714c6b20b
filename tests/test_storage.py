"""
Tests for the persistence document.
"""

import chess
import pytest

from app.game import Game
from app.storage import dump_game, dumps, load_game, loads
from classic.errors import StateDecodeError
from classic.moves import CapitulateMove, OrdinaryMove, QuantumMove
from classic.piece import Piece, PieceType, Player, Position, Status

W, B = Player.WHITE, Player.BLACK


def sq(name: str) -> Position:
    return Position.parse(name)


@pytest.fixture
def played() -> Game:
    game = Game(seed=9)
    game.submit(QuantumMove(Piece(W, PieceType.PAWN), sq("e2"), sq("e4")))
    game.submit(OrdinaryMove(Piece(B, PieceType.PAWN), sq("e7"), sq("e5")))
    game.submit(QuantumMove(Piece(W, PieceType.KNIGHT), sq("g1"), sq("f3")))
    return game


class TestDump:

    def test_starting_document(self) -> None:
        doc = dump_game(Game())
        assert doc["game_state"] == "game_still_going"
        assert doc["active_player"] == "white"
        assert doc["harmonics"] == [{
            "harmonic_state": "game_still_going",
            "degeneracy": 1,
            "chessboard": chess.STARTING_BOARD_FEN,
        }]


class TestRoundTrip:

    def test_harmonics_survive_exactly(self, played) -> None:
        restored = load_game(dump_game(played))
        assert restored.active_player is played.active_player
        assert restored.status is played.status
        assert len(restored.board.harmonics) == len(played.board.harmonics)
        for a, b in zip(restored.board.harmonics, played.board.harmonics):
            assert a.board == b.board
            assert a.weight == b.weight
        assert dump_game(restored) == dump_game(played)

    def test_json(self, played) -> None:
        assert dump_game(loads(dumps(played))) == dump_game(played)

    def test_finished_game(self) -> None:
        game = Game()
        game.submit(CapitulateMove(W))
        restored = loads(dumps(game))
        assert restored.status is Status.BLACK_WINS
        assert restored.is_game_over()

    def test_restored_game_keeps_playing(self, played) -> None:
        restored = load_game(dump_game(played), seed=1)
        restored.submit(OrdinaryMove(Piece(B, PieceType.PAWN), sq("d7"), sq("d6")))
        assert restored.active_player is W


class TestMalformed:

    @pytest.mark.parametrize("mutate", [
        lambda d: d.pop("game_state"),
        lambda d: d.update(active_player="purple"),
        lambda d: d.update(harmonics=[]),
        lambda d: d["harmonics"][0].update(degeneracy=0),
        lambda d: d["harmonics"][0].update(degeneracy="1"),
        lambda d: d["harmonics"][0].update(chessboard="8/8/8"),
        lambda d: d["harmonics"][0].update(chessboard=None),
        lambda d: d["harmonics"][0].update(chessboard=1),
        lambda d: d["harmonics"][0].update(harmonic_state="paused"),
    ])
    def test_rejected(self, mutate) -> None:
        doc = dump_game(Game())
        mutate(doc)
        with pytest.raises(StateDecodeError):
            load_game(doc)

    def test_not_json(self) -> None:
        with pytest.raises(StateDecodeError):
            loads("{not json")
        with pytest.raises(StateDecodeError):
            loads("[1, 2]")


class TestNotCanonical:

    @pytest.fixture
    def doc(self, played):
        return dump_game(played)

    def test_weights_not_in_lowest_terms(self, doc) -> None:
        for entry in doc["harmonics"]:
            entry["degeneracy"] *= 2
        with pytest.raises(StateDecodeError, match="lowest terms"):
            load_game(doc)

    def test_single_harmonic_with_degeneracy_two(self) -> None:
        doc = dump_game(Game())
        doc["harmonics"][0]["degeneracy"] = 2
        with pytest.raises(StateDecodeError):
            load_game(doc)

    def test_duplicate_boards(self) -> None:
        doc = dump_game(Game())
        doc["harmonics"].append(dict(doc["harmonics"][0], degeneracy=2))
        with pytest.raises(StateDecodeError, match="Duplicate"):
            load_game(doc)

    def test_same_squares_different_state_is_allowed(self) -> None:
        doc = dump_game(Game())
        doc["harmonics"].append(dict(doc["harmonics"][0], harmonic_state="tie"))
        restored = load_game(doc)
        assert restored.board.harmonic_count == 2
