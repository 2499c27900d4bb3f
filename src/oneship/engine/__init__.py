"""Ship, board and shot resolution."""

from .board import Board, CellMarker
from .errors import GameAlreadyOverError, GameError, MalformedInputError, OutOfBoundsError
from .game import Game, GamePhase, GameSnapshot, ShotResult
from .ship import Coordinate, Ship, ShipKind

__all__ = [
    "Board",
    "CellMarker",
    "Coordinate",
    "Game",
    "GameAlreadyOverError",
    "GameError",
    "GamePhase",
    "GameSnapshot",
    "MalformedInputError",
    "OutOfBoundsError",
    "Ship",
    "ShipKind",
    "ShotResult",
]
