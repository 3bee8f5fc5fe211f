from __future__ import annotations

from hive_engine.engine.models import Action


class GameEngineError(Exception):
    """Base class for engine errors."""
    pass


class InvalidActionError(GameEngineError):
    """Action is not valid in current state."""

    def __init__(self, message: str, action: Action | None = None):
        self.message = message
        self.action = action
        super().__init__(message)


class IllegalMoveError(GameEngineError):
    """Destination is not in the legal destination set of the selection."""

    def __init__(self, message: str, destination: object | None = None):
        self.message = message
        self.destination = destination
        super().__init__(message)


class GameNotActiveError(GameEngineError):
    """Action submitted to a game that has already ended."""
    pass


class InvariantViolationError(GameEngineError):
    """Board, frontier or stack bookkeeping is inconsistent.

    Never raised by a correct engine; signals a programming error.
    """
    pass
