# quantum/quantum_board.py
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from classic.board import Board
from classic.errors import InvariantViolation
from classic.moves import CastleMove, OrdinaryMove, QuantumMove
from classic.piece import ALL_POSITIONS, Piece, Player, Position, Status

from .measurement import choose, decide

logger = logging.getLogger(__name__)

# Harmonic count at which the whole superposition is measured at once.
MAX_HARMONICS = 1024


@dataclass
class Harmonic:
    board: Board
    weight: int  # relative degeneracy; probability = weight / total weight

    def clone(self) -> "Harmonic":
        return Harmonic(self.board.copy(), self.weight)


class QuantumPiece(NamedTuple):
    """What a square shows: the piece that may be there and how likely it is."""
    piece: Optional[Piece]
    probability: float


class QuantumBoard:
    """
    Superposition of classical boards with integer weights.

    - Legality comes from classic.Board, evaluated on every harmonic separately.
    - Ordinary / castle moves advance each harmonic where they are legal.
    - Quantum moves branch: "moved" and "stayed" populations with equal weight.
    - After every move a square holding different pieces in different
      harmonics is measured (collapsed) at random in proportion to weight.
    - Identical harmonics are merged, weights are kept in lowest terms.
    """

    def __init__(
        self,
        harmonics: Optional[Iterable[Harmonic]] = None,
        status: Status = Status.IN_PROGRESS,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        max_harmonics: int = MAX_HARMONICS,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_harmonics = int(max_harmonics)
        self._status = status

        if harmonics is None:
            harmonics = [Harmonic(Board(setup=True), 1)]
        self._harmonics: List[Harmonic] = list(harmonics)
        InvariantViolation.check(len(self._harmonics) > 0, "Empty quantum superposition found")
        InvariantViolation.check(all(h.weight > 0 for h in self._harmonics),
                                 "Harmonic weights must be positive")

    @classmethod
    def starting(cls, **kwargs) -> "QuantumBoard":
        return cls([Harmonic(Board(setup=True), 1)], Status.IN_PROGRESS, **kwargs)

    # Query API
    @property
    def status(self) -> Status:
        return self._status

    @property
    def harmonics(self) -> Tuple[Harmonic, ...]:
        """Copies of the harmonics; changing them leaves the superposition alone."""
        return tuple(h.clone() for h in self._harmonics)

    @property
    def harmonic_count(self) -> int:
        return len(self._harmonics)

    @property
    def total_weight(self) -> int:
        return sum(h.weight for h in self._harmonics)

    def get_quantum_piece(self, pos: Position) -> QuantumPiece:
        """
        Returns the piece possibly occupying `pos` together with the probability
        of occupation; (None, 1.0) for a square that is empty everywhere.
        A square may never hold two different pieces across harmonics.
        """
        piece: Optional[Piece] = None
        occupied = 0
        total = 0
        for h in self._harmonics:
            total += h.weight
            p = h.board.get_piece(pos)
            if p is None:
                continue
            if piece is not None and p != piece:
                raise InvariantViolation(
                    f"Inconsistent quantum chessboard: square {pos} is in the superposition of pieces")
            piece = p
            occupied += h.weight

        if piece is None:
            return QuantumPiece(None, 1.0)
        return QuantumPiece(piece, occupied / total)

    # Legality
    def _any_in_progress(self, pred: Callable[[Board], bool]) -> bool:
        return any(h.board.status is Status.IN_PROGRESS and pred(h.board) for h in self._harmonics)

    def check_ordinary_applicable(self, move: OrdinaryMove) -> bool:
        return self._any_in_progress(lambda b: b.check_ordinary_applicable(move))

    def check_quantum_applicable(self, move: QuantumMove) -> bool:
        return self._any_in_progress(lambda b: b.check_quantum_applicable(move))

    def check_castle_applicable(self, move: CastleMove) -> bool:
        return self._any_in_progress(lambda b: b.check_castle_applicable(move))

    # Moves
    def _advance(self, check: Callable[[Board], bool], apply: Callable[[Board], None]) -> bool:
        applied = False
        for h in self._harmonics:
            if check(h.board):
                apply(h.board)
                applied = True
        return applied

    def apply_ordinary(self, move: OrdinaryMove) -> None:
        applied = self._advance(lambda b: b.check_ordinary_applicable(move),
                                lambda b: b.apply_ordinary(move))
        InvariantViolation.check(applied, f"Ordinary move {move} couldn't be applied on any harmonic")
        self._post_step_cleanup()

    def apply_castle(self, move: CastleMove) -> None:
        applied = self._advance(lambda b: b.check_castle_applicable(move),
                                lambda b: b.apply_castle(move))
        InvariantViolation.check(applied, f"Castle move {move} couldn't be applied on any harmonic")
        self._post_step_cleanup()

    def apply_quantum(self, move: QuantumMove) -> None:
        applied = self._superpose(move)
        InvariantViolation.check(applied, f"Quantum move {move} couldn't be applied on any harmonic")
        self._post_step_cleanup()

    def _superpose(self, move: QuantumMove) -> bool:
        """
        Branch every harmonic where the move is legal into (stayed, moved), both
        with the original weight; double the weight of every other harmonic.
        Total weight doubles exactly.
        """
        applied = False
        out: List[Harmonic] = []
        for h in self._harmonics:
            if h.board.check_quantum_applicable(move):
                moved = h.clone()
                moved.board.apply_quantum(move)
                out.append(h)
                out.append(moved)
                applied = True
            else:
                h.weight *= 2
                out.append(h)
        self._harmonics = out
        return applied

    def register_victory(self, player: Player) -> None:
        for h in self._harmonics:
            h.board.register_victory(player)
        self._regroup()
        self._renormalize()
        self._update_status()

    def register_tie(self) -> None:
        for h in self._harmonics:
            h.board.register_tie()
        self._regroup()
        self._renormalize()
        self._update_status()

    # Pipeline
    def _post_step_cleanup(self) -> None:
        self._remove_vanishing()
        self._perform_measurements()
        self._spontaneous_measurement()
        self._regroup()
        self._renormalize()
        self._update_status()

    def _filter_by(self, keep: Callable[[Harmonic], bool]) -> None:
        kept = [h for h in self._harmonics if keep(h)]
        InvariantViolation.check(len(kept) > 0, "Filtered into empty quantum superposition")
        self._harmonics = kept
        self._renormalize()

    def _remove_vanishing(self) -> None:
        self._filter_by(lambda h: h.weight > 0)

    def _renormalize(self) -> None:
        gcd = reduce(math.gcd, (h.weight for h in self._harmonics), 0)
        InvariantViolation.check(gcd > 0, "Quantum superposition has no weight")
        for h in self._harmonics:
            h.weight //= gcd

    def _measure_square(self, pos: Position) -> None:
        masses: Dict[Piece, int] = {}
        for h in self._harmonics:
            p = h.board.get_piece(pos)
            if p is not None:
                masses[p] = masses.get(p, 0) + h.weight

        if len(masses) <= 1:
            # nothing to collapse
            return

        chosen = choose(self.rng, masses.items())
        logger.debug("Measured %s at %s out of %d candidates", chosen, pos, len(masses))
        self._filter_by(lambda h: h.board.get_piece(pos) in (None, chosen))

    def _perform_measurements(self) -> None:
        for pos in ALL_POSITIONS:
            self._measure_square(pos)

    def _spontaneous_measurement(self) -> None:
        if len(self._harmonics) < self.max_harmonics:
            return
        chosen = choose(self.rng, ((h, h.weight) for h in self._harmonics))
        logger.debug("Spontaneous measurement: %d harmonics collapsed into one", len(self._harmonics))
        self._harmonics = [chosen]
        self._renormalize()

    def _regroup(self) -> None:
        self._remove_vanishing()

        ordered = sorted(self._harmonics, key=lambda h: h.board.key())
        merged: List[Harmonic] = [ordered[0]]
        for h in ordered[1:]:
            if h.board == merged[-1].board:
                merged[-1].weight += h.weight
            else:
                merged.append(h)

        merged.sort(key=lambda h: h.weight, reverse=True)
        self._harmonics = merged

    def _update_status(self) -> None:
        if self._status is not Status.IN_PROGRESS:
            return
        if not all(h.board.status.is_terminal for h in self._harmonics):
            return

        mass = {s: 0 for s in (Status.WHITE_WINS, Status.BLACK_WINS, Status.TIE)}
        for h in self._harmonics:
            mass[h.board.status] += h.weight

        total = sum(mass.values())
        if decide(self.rng, mass[Status.TIE], total):
            self._status = Status.TIE
        elif decide(self.rng, mass[Status.WHITE_WINS], total - mass[Status.TIE]):
            self._status = Status.WHITE_WINS
        else:
            self._status = Status.BLACK_WINS
        logger.info("Game outcome observed: %s", self._status.value)
