# classic/rules.py
"""
Piece shape and path rules on a single classical board.
"""
from .errors import InvariantViolation
from .piece import Piece, PieceType, Player, Position


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


class Rules:
    @staticmethod
    def path_is_clear(board_obj, source: Position, target: Position) -> bool:
        """All squares strictly between source and target (straight or diagonal) are empty."""
        dx = target.x - source.x
        dy = target.y - source.y
        sx, sy = _sign(dx), _sign(dy)
        steps = max(abs(dx), abs(dy))
        for i in range(1, steps):
            if board_obj.get_piece(Position.from_coords(source.x + i * sx, source.y + i * sy)) is not None:
                return False
        return True

    @staticmethod
    def check_intermediate_squares(board_obj, piece: Piece, source: Position, target: Position, capture: bool) -> bool:
        dx = target.x - source.x
        dy = target.y - source.y
        adx, ady = abs(dx), abs(dy)
        if adx == 0 and ady == 0:
            return False

        kind = piece.piece_type

        # Logic pawn
        if kind is PieceType.PAWN:
            direction = 1 if piece.player is Player.WHITE else -1
            start_row = 1 if piece.player is Player.WHITE else 6

            if capture:
                return adx == 1 and dy == direction
            if dx != 0:
                return False
            if dy == direction:
                return True
            # Forward 2 from the home rank, jumping over an empty square only
            if source.y == start_row and dy == 2 * direction:
                return Rules.path_is_clear(board_obj, source, target)
            return False

        # Logic knight
        if kind is PieceType.KNIGHT:
            return (adx, ady) in ((1, 2), (2, 1))

        # Logic sliding pieces (B, R, Q)
        if kind in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN):
            diagonal = adx == ady
            straight = dx == 0 or dy == 0
            if kind is PieceType.BISHOP and not diagonal:
                return False
            if kind is PieceType.ROOK and not straight:
                return False
            if kind is PieceType.QUEEN and not (diagonal or straight):
                return False
            return Rules.path_is_clear(board_obj, source, target)

        # Logic king
        if kind is PieceType.KING:
            return adx <= 1 and ady <= 1

        raise InvariantViolation(f"Unsupported piece type: {kind}")
