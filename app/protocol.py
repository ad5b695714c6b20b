# app/protocol.py
"""
Request/response shapes for a front-end (web, console, bot) talking to a Game.

Squares travel as text ("e2"); pieces are resolved through the quantum
board, so a move always names the piece the board believes is there.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from classic.errors import MoveParseError, MoveProcessError
from classic.moves import AgreeToTieMove, CapitulateMove, CastleMove, CastleSide, Move, OrdinaryMove, QuantumMove
from classic.piece import ALL_POSITIONS, Position

from .game import Game

MOVE_TYPES = ("ordinary", "quantum", "capitulate", "agree_to_tie", "castle_left", "castle_right")


def parse_position(text: Optional[str], field: str) -> Position:
    if not text:
        raise MoveParseError(f"Missing {field} square")
    try:
        return Position.parse(text)
    except ValueError:
        raise MoveParseError(f"Invalid {field} square: {text!r}") from None


@dataclass
class MoveRequest:
    move_type: str
    source: Optional[str] = None
    middle: Optional[str] = None
    target: Optional[str] = None

    def parse(self, game: Game) -> Move:
        if self.move_type in ("ordinary", "quantum"):
            source = parse_position(self.source, "source")
            target = parse_position(self.target, "target")
            piece = game.board.get_quantum_piece(source).piece
            if piece is None:
                raise MoveParseError(f"No piece found at {source}")
            if self.move_type == "ordinary":
                return OrdinaryMove(piece, source, target)
            middle = parse_position(self.middle, "middle") if self.middle else None
            return QuantumMove(piece, source, target, middle)

        if self.move_type == "capitulate":
            return CapitulateMove(game.active_player)
        if self.move_type == "agree_to_tie":
            return AgreeToTieMove(game.active_player)
        if self.move_type == "castle_left":
            return CastleMove(game.active_player, CastleSide.LEFT)
        if self.move_type == "castle_right":
            return CastleMove(game.active_player, CastleSide.RIGHT)
        raise MoveParseError(f"Unsupported move type: {self.move_type}")


@dataclass
class MoveResponse:
    success: bool
    message: str = ""


def submit_request(game: Game, request: MoveRequest) -> MoveResponse:
    """
    Parse + submit. Request problems come back as a failed response;
    invariant violations are not caught here.
    """
    try:
        game.submit(request.parse(game))
    except (MoveParseError, MoveProcessError) as e:
        return MoveResponse(False, str(e))
    return MoveResponse(True)


def board_info(game: Game) -> Dict:
    """Snapshot for renderers: game state, active player and every possibly occupied square."""
    squares = {}
    for pos in ALL_POSITIONS:
        piece, prob = game.board.get_quantum_piece(pos)
        if piece is None:
            continue
        squares[pos.name] = {
            "player": piece.player.value,
            "piece": piece.piece_type.value,
            "probability": prob,
        }
    return {
        "game_state": game.status.value,
        "active_player": game.active_player.value,
        "squares": squares,
    }
