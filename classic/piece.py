# classic/piece.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import chess  # python-chess

from .errors import InvariantViolation


class Player(Enum):
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Player":
        return Player.BLACK if self is Player.WHITE else Player.WHITE

    @property
    def color(self) -> chess.Color:
        return chess.WHITE if self is Player.WHITE else chess.BLACK

    @staticmethod
    def from_color(color: chess.Color) -> "Player":
        return Player.WHITE if color == chess.WHITE else Player.BLACK


class PieceType(Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"

    @property
    def chess_type(self) -> chess.PieceType:
        return _TO_CHESS_TYPE[self]

    @staticmethod
    def from_chess_type(piece_type: chess.PieceType) -> "PieceType":
        return _FROM_CHESS_TYPE[piece_type]


_TO_CHESS_TYPE = {
    PieceType.PAWN: chess.PAWN,
    PieceType.KNIGHT: chess.KNIGHT,
    PieceType.BISHOP: chess.BISHOP,
    PieceType.ROOK: chess.ROOK,
    PieceType.QUEEN: chess.QUEEN,
    PieceType.KING: chess.KING,
}
_FROM_CHESS_TYPE = {v: k for k, v in _TO_CHESS_TYPE.items()}


class Status(Enum):
    IN_PROGRESS = "game_still_going"
    WHITE_WINS = "white_victory"
    BLACK_WINS = "black_victory"
    TIE = "tie"

    @property
    def is_terminal(self) -> bool:
        return self is not Status.IN_PROGRESS

    @staticmethod
    def victory_of(player: Player) -> "Status":
        return Status.WHITE_WINS if player is Player.WHITE else Status.BLACK_WINS


@dataclass(frozen=True)
class Piece:
    """Classical piece: owner + kind. Equal iff both match."""
    player: Player
    piece_type: PieceType

    @property
    def code(self) -> int:
        # 1..12, used by Board.key(); 0 is reserved for an empty square
        return 1 + _PLAYER_ORDER[self.player] * 6 + _TYPE_ORDER[self.piece_type]

    def to_chess(self) -> chess.Piece:
        return chess.Piece(self.piece_type.chess_type, self.player.color)

    @staticmethod
    def from_chess(piece: chess.Piece) -> "Piece":
        return Piece(Player.from_color(piece.color), PieceType.from_chess_type(piece.piece_type))

    def symbol(self) -> str:
        """FEN letter: 'P' white pawn, 'k' black king, ..."""
        return self.to_chess().symbol()

    @staticmethod
    def from_symbol(symbol: str) -> "Piece":
        return Piece.from_chess(chess.Piece.from_symbol(symbol))

    def __str__(self) -> str:
        return f"{self.player.value} {self.piece_type.value}"


_PLAYER_ORDER = {Player.WHITE: 0, Player.BLACK: 1}
_TYPE_ORDER = {t: i for i, t in enumerate(PieceType)}


@dataclass(frozen=True)
class Position:
    """Square index y*8 + x (python-chess square numbering: a1=0, h8=63)."""
    index: int

    def __post_init__(self):
        InvariantViolation.check(
            isinstance(self.index, int) and 0 <= self.index < 64,
            f"Chessboard index is out of bounds: {self.index}",
        )

    @staticmethod
    def from_coords(x: int, y: int) -> "Position":
        InvariantViolation.check(
            0 <= x < 8 and 0 <= y < 8,
            f"Chessboard coordinates are out of bounds: ({x}, {y})",
        )
        return Position(chess.square(x, y))

    @staticmethod
    def parse(name: str) -> "Position":
        """'e4' -> Position. Raises ValueError on malformed names."""
        return Position(chess.parse_square(name.strip().lower()))

    @property
    def x(self) -> int:
        return chess.square_file(self.index)

    @property
    def y(self) -> int:
        return chess.square_rank(self.index)

    @property
    def name(self) -> str:
        return chess.square_name(self.index)

    def __str__(self) -> str:
        return self.name


ALL_POSITIONS = tuple(Position(i) for i in range(64))
