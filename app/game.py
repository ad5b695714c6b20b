# app/game.py
import logging
import random
from typing import List, Optional

from classic.errors import InvariantViolation, MoveProcessError
from classic.moves import AgreeToTieMove, CapitulateMove, CastleMove, Move, OrdinaryMove, QuantumMove
from classic.piece import Player, Status
from quantum.quantum_board import QuantumBoard

from .config import Config

logger = logging.getLogger(__name__)


class Game:
    """
    Turn engine: whose move it is + dispatch of submitted moves to the
    quantum board. Not thread-safe; serialize submit() per game.
    """
    def __init__(
        self,
        board: Optional[QuantumBoard] = None,
        active_player: Player = Player(Config.FIRST_PLAYER),
        *,
        seed: Optional[int] = Config.SEED,
        rng: Optional[random.Random] = None,
        max_harmonics: int = Config.MAX_HARMONICS,
    ):
        if board is None:
            board = QuantumBoard.starting(rng=rng, seed=seed, max_harmonics=max_harmonics)
        self.board = board
        self._active_player = active_player
        self.move_log: List[str] = []

    @property
    def active_player(self) -> Player:
        return self._active_player

    @property
    def status(self) -> Status:
        return self.board.status

    def is_game_over(self) -> bool:
        return self.board.status.is_terminal

    def submit(self, move: Move) -> None:
        """
        Apply one move for the active player.
        Raises MoveProcessError (state untouched) when the move is refused.
        """
        if self.is_game_over():
            raise MoveProcessError("The game is already over")
        if move.player is not self._active_player:
            raise MoveProcessError("Waiting for another player's move")

        if isinstance(move, CapitulateMove):
            self.board.register_victory(self._active_player.opponent())
        elif isinstance(move, AgreeToTieMove):
            self.board.register_tie()
        elif isinstance(move, OrdinaryMove):
            if not self.board.check_ordinary_applicable(move):
                raise MoveProcessError("Move is inapplicable on all harmonics")
            self.board.apply_ordinary(move)
            self._active_player = self._active_player.opponent()
        elif isinstance(move, QuantumMove):
            if not self.board.check_quantum_applicable(move):
                raise MoveProcessError("Quantum move is inapplicable on all harmonics")
            self.board.apply_quantum(move)
            self._active_player = self._active_player.opponent()
        elif isinstance(move, CastleMove):
            if not self.board.check_castle_applicable(move):
                raise MoveProcessError("Castle is inapplicable on all harmonics")
            self.board.apply_castle(move)
            self._active_player = self._active_player.opponent()
        else:
            raise InvariantViolation(f"Unsupported move type: {type(move).__name__}")

        self.move_log.append(str(move))
        logger.info("Accepted %s; %d harmonic(s)", move, self.board.harmonic_count)

        if self.is_game_over():
            self.move_log.append(f"GAME OVER: {self.status.value}")
