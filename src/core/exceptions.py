"""
Custom exceptions shared by all layers.

Rule violations (an illegal move) are NOT exceptions: the engine reports them as values.
Everything below signals either a programming error upstream or input that cannot be interpreted at all.
"""


class GameError(Exception):
    """Top level exception for anything raised by this application."""


# --- Board model (invariant violations: fail fast) ---
class BoardModelError(GameError):
    pass


class UnknownBoardError(BoardModelError):
    pass


class CoordinateOutOfRangeError(BoardModelError):
    pass


# --- Parsing / state ---
class InvalidNotationError(GameError):
    pass


class GameStateError(GameError):
    pass


class PieceNotFoundError(GameError):
    pass


# --- Boundaries ---
class InvalidRequestError(GameError):
    pass


class RepositoryError(GameError):
    pass
