# classic/errors.py
"""
Error hierarchy.

- InvariantViolation: the engine broke its own rules (never caught and continued).
- MoveProcessError / MoveParseError / StateDecodeError: request problems,
  reported back to the caller; state is left untouched.
"""


class QuantumChessError(Exception):
    pass


class InvariantViolation(QuantumChessError):
    @staticmethod
    def check(expr, message: str) -> None:
        if not expr:
            raise InvariantViolation(message)


class MoveProcessError(QuantumChessError):
    pass


class MoveParseError(QuantumChessError):
    pass


class StateDecodeError(QuantumChessError):
    pass
