# classic/board.py
from __future__ import annotations

from typing import List, Optional, Tuple

import chess  # python-chess

from .errors import InvariantViolation
from .moves import CastleMove, CastleSide, OrdinaryMove, QuantumMove
from .piece import ALL_POSITIONS, Piece, PieceType, Player, Position, Status
from .rules import Rules


def home_rank(player: Player) -> int:
    return 0 if player is Player.WHITE else 7


class Board:
    """
    One classical chessboard: 64 optional pieces + game status.

    Callers mutate it only through apply_* (after the matching check_*)
    and register_*; place_piece is for setup and decoding.
    """
    def __init__(self, setup: bool = True, status: Status = Status.IN_PROGRESS):
        self.squares: List[Optional[Piece]] = [None] * 64
        self.status = status

        if setup:
            self._init_setup()

    def _init_setup(self):
        order = [PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
                 PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK]
        for x, kind in enumerate(order):
            self.place_piece(Position.from_coords(x, 0), Piece(Player.WHITE, kind))
            self.place_piece(Position.from_coords(x, 1), Piece(Player.WHITE, PieceType.PAWN))
            self.place_piece(Position.from_coords(x, 6), Piece(Player.BLACK, PieceType.PAWN))
            self.place_piece(Position.from_coords(x, 7), Piece(Player.BLACK, kind))

    # --- basic helpers ---
    def place_piece(self, pos: Position, piece: Optional[Piece]) -> None:
        self.squares[pos.index] = piece

    def get_piece(self, pos: Position) -> Optional[Piece]:
        return self.squares[pos.index]

    def move_piece(self, start: Position, end: Position) -> None:
        """Move without any rule checks (internal)."""
        self.squares[end.index] = self.squares[start.index]
        self.squares[start.index] = None

    def copy(self) -> "Board":
        new_board = Board(setup=False, status=self.status)
        new_board.squares = list(self.squares)
        return new_board

    def key(self) -> Tuple[int, ...]:
        """Content key for sorting: status then one small int per square."""
        codes = tuple(0 if p is None else p.code for p in self.squares)
        return (_STATUS_ORDER[self.status],) + codes

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.status is other.status and self.squares == other.squares

    __hash__ = None

    # --- python-chess interop ---
    def to_chess(self) -> chess.BaseBoard:
        b = chess.BaseBoard.empty()
        for pos in ALL_POSITIONS:
            p = self.get_piece(pos)
            if p is not None:
                b.set_piece_at(pos.index, p.to_chess())
        return b

    def board_fen(self) -> str:
        return self.to_chess().board_fen()

    @staticmethod
    def from_board_fen(fen: str, status: Status = Status.IN_PROGRESS) -> "Board":
        """Raises ValueError for a malformed piece placement."""
        src = chess.BaseBoard(fen)
        board = Board(setup=False, status=status)
        for sq, p in src.piece_map().items():
            board.squares[sq] = Piece.from_chess(p)
        return board

    def __repr__(self) -> str:
        return f"Board({self.board_fen()!r}, {self.status.name})"

    # --- ordinary moves ---
    def check_ordinary_applicable(self, move: OrdinaryMove) -> bool:
        if move.source == move.target:
            return False
        if self.get_piece(move.source) != move.piece:
            return False

        target = self.get_piece(move.target)
        capture = target is not None
        if capture and target.player is move.player:
            return False

        return Rules.check_intermediate_squares(self, move.piece, move.source, move.target, capture)

    def apply_ordinary(self, move: OrdinaryMove) -> None:
        InvariantViolation.check(self.check_ordinary_applicable(move),
                                 f"Attempted applying inapplicable ordinary move {move}")
        self.move_piece(move.source, move.target)
        self._promote(move.target)
        self._update_status()

    # --- quantum moves ---
    def check_quantum_applicable(self, move: QuantumMove) -> bool:
        if move.source == move.target:
            return False
        if self.get_piece(move.source) != move.piece:
            return False
        # no quantum capture
        if self.get_piece(move.target) is not None:
            return False

        if move.middle is not None:
            if self.get_piece(move.middle) is not None:
                return False
            return (Rules.check_intermediate_squares(self, move.piece, move.source, move.middle, False) and
                    Rules.check_intermediate_squares(self, move.piece, move.middle, move.target, False))
        return Rules.check_intermediate_squares(self, move.piece, move.source, move.target, False)

    def apply_quantum(self, move: QuantumMove) -> None:
        InvariantViolation.check(self.check_quantum_applicable(move),
                                 f"Attempted applying inapplicable quantum move {move}")
        self.move_piece(move.source, move.target)
        self._promote(move.target)

    # --- castling ---
    def check_castle_applicable(self, move: CastleMove) -> bool:
        c = home_rank(move.player)
        king = Piece(move.player, PieceType.KING)
        rook = Piece(move.player, PieceType.ROOK)

        def at(x):
            return self.get_piece(Position.from_coords(x, c))

        if move.side is CastleSide.LEFT:
            return at(0) == rook and at(1) is None and at(2) is None and at(3) is None and at(4) == king
        if move.side is CastleSide.RIGHT:
            return at(4) == king and at(5) is None and at(6) is None and at(7) == rook
        raise InvariantViolation(f"Unsupported castle side: {move.side}")

    def apply_castle(self, move: CastleMove) -> None:
        InvariantViolation.check(self.check_castle_applicable(move),
                                 f"Attempted applying inapplicable castle move {move}")
        c = home_rank(move.player)
        king = Piece(move.player, PieceType.KING)
        rook = Piece(move.player, PieceType.ROOK)

        if move.side is CastleSide.LEFT:
            layout = {0: None, 1: None, 2: king, 3: rook, 4: None}
        else:
            layout = {4: None, 5: rook, 6: king, 7: None}
        for x, piece in layout.items():
            self.place_piece(Position.from_coords(x, c), piece)

    # --- game status ---
    def register_victory(self, player: Player) -> None:
        if self.status is Status.IN_PROGRESS:
            self.status = Status.victory_of(player)

    def register_tie(self) -> None:
        if self.status is Status.IN_PROGRESS:
            self.status = Status.TIE

    def _promote(self, pos: Position) -> None:
        p = self.get_piece(pos)
        if p is not None and p.piece_type is PieceType.PAWN and pos.y in (0, 7):
            self.place_piece(pos, Piece(p.player, PieceType.QUEEN))

    def _update_status(self) -> None:
        if self.status is not Status.IN_PROGRESS:
            return
        kings = {p.player for p in self.squares if p is not None and p.piece_type is PieceType.KING}
        if not kings:
            self.status = Status.TIE
        elif Player.WHITE not in kings:
            self.status = Status.BLACK_WINS
        elif Player.BLACK not in kings:
            self.status = Status.WHITE_WINS


_STATUS_ORDER = {s: i for i, s in enumerate(Status)}
