# classic/moves.py
"""
Move requests. A closed set of immutable variants; every one exposes the
acting `player`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .piece import Piece, Player, Position


class CastleSide(Enum):
    LEFT = "left"    # towards file a
    RIGHT = "right"  # towards file h


@dataclass(frozen=True)
class CapitulateMove:
    player: Player

    def __str__(self) -> str:
        return f"{self.player.value}: CAPITULATE"


@dataclass(frozen=True)
class AgreeToTieMove:
    player: Player

    def __str__(self) -> str:
        return f"{self.player.value}: TIE"


@dataclass(frozen=True)
class OrdinaryMove:
    piece: Piece
    source: Position
    target: Position

    @property
    def player(self) -> Player:
        return self.piece.player

    def __str__(self) -> str:
        return f"{self.piece.symbol()}: {self.source}->{self.target}"


@dataclass(frozen=True)
class QuantumMove:
    """Single hop when `middle` is None, double hop through `middle` otherwise."""
    piece: Piece
    source: Position
    target: Position
    middle: Optional[Position] = None

    @property
    def player(self) -> Player:
        return self.piece.player

    def __str__(self) -> str:
        if self.middle is None:
            return f"{self.piece.symbol()}: QUANTUM {self.source}->{self.target}"
        return f"{self.piece.symbol()}: QUANTUM {self.source}->{self.middle}->{self.target}"


@dataclass(frozen=True)
class CastleMove:
    player: Player
    side: CastleSide

    def __str__(self) -> str:
        return f"{self.player.value}: CASTLE {self.side.value}"


Move = Union[CapitulateMove, AgreeToTieMove, OrdinaryMove, QuantumMove, CastleMove]
