"""Exceptions raised while resolving shots."""

from __future__ import annotations


class GameError(Exception):
    """Base class for recoverable game errors."""


class GameAlreadyOverError(GameError, RuntimeError):
    """A shot was fired after the ship had been destroyed."""

    def __init__(self, message: str = "game is already over") -> None:
        super().__init__(message)


class OutOfBoundsError(GameError, ValueError):
    """A shot targeted a cell outside the board."""

    def __init__(self, row: int, col: int, size: int) -> None:
        super().__init__(f"out of range: ({row}, {col}) is not on a {size}x{size} board")
        self.row = row
        self.col = col
        self.size = size


class MalformedInputError(GameError, ValueError):
    """Shot coordinates could not be parsed from user input."""
