# app/config.py
import os

from quantum.quantum_board import MAX_HARMONICS


class Config:
    # Superposition settings
    # Harmonic count that triggers a spontaneous (whole-board) measurement
    MAX_HARMONICS = int(os.environ.get("QCHESS_MAX_HARMONICS", MAX_HARMONICS))

    # Randomness; None -> fresh OS entropy for every game
    SEED = None

    # Game settings
    FIRST_PLAYER = "white"
