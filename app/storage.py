# app/storage.py
"""
Game <-> plain document (JSON-ready dict).

{
  "game_state": "game_still_going",
  "active_player": "white",
  "harmonics": [
    {"harmonic_state": "game_still_going", "degeneracy": 1,
     "chessboard": "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"},
    ...
  ]
}

"chessboard" is the FEN piece-placement field of the harmonic's 64 squares.
Harmonic order is preserved, so a round trip reproduces the game exactly.
"""
from __future__ import annotations

import json
import math
import random
from functools import reduce
from typing import Any, Dict, Optional

from classic.board import Board
from classic.errors import InvariantViolation, StateDecodeError
from classic.piece import Player, Status
from quantum.quantum_board import Harmonic, QuantumBoard

from .config import Config
from .game import Game


def dump_game(game: Game) -> Dict[str, Any]:
    return {
        "game_state": game.status.value,
        "active_player": game.active_player.value,
        "harmonics": [
            {
                "harmonic_state": h.board.status.value,
                "degeneracy": h.weight,
                "chessboard": h.board.board_fen(),
            }
            for h in game.board.harmonics
        ],
    }


def load_game(
    document: Dict[str, Any],
    *,
    seed: Optional[int] = Config.SEED,
    rng: Optional[random.Random] = None,
    max_harmonics: int = Config.MAX_HARMONICS,
) -> Game:
    try:
        game_state = Status(document["game_state"])
        active_player = Player(document["active_player"])

        harmonics = []
        for entry in document["harmonics"]:
            weight = entry["degeneracy"]
            if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
                raise StateDecodeError(f"Invalid degeneracy: {weight!r}")
            fen = entry["chessboard"]
            if not isinstance(fen, str):
                raise StateDecodeError(f"Invalid chessboard: {fen!r}")
            board = Board.from_board_fen(fen, Status(entry["harmonic_state"]))
            harmonics.append(Harmonic(board, weight))
    except (KeyError, TypeError, ValueError) as e:
        raise StateDecodeError(f"Malformed game document: {e}") from e

    _check_canonical(harmonics)

    try:
        board = QuantumBoard(harmonics, game_state, rng=rng, seed=seed, max_harmonics=max_harmonics)
    except InvariantViolation as e:
        raise StateDecodeError(str(e)) from e
    return Game(board, active_player)


def _check_canonical(harmonics) -> None:
    # A dumped game holds distinct boards with weights in lowest terms.
    keys = [h.board.key() for h in harmonics]
    if len(set(keys)) != len(keys):
        raise StateDecodeError("Duplicate harmonics in game document")
    if harmonics and reduce(math.gcd, (h.weight for h in harmonics), 0) != 1:
        raise StateDecodeError("Harmonic degeneracies are not in lowest terms")


def dumps(game: Game) -> str:
    return json.dumps(dump_game(game))


def loads(text: str, **kwargs) -> Game:
    try:
        document = json.loads(text)
    except ValueError as e:
        raise StateDecodeError(f"Invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise StateDecodeError("Game document must be a JSON object")
    return load_game(document, **kwargs)
