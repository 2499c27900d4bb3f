"""Single-ship game controller and shot resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from oneship.telemetry import get_meter, get_tracer

from .board import Board, CellMarker
from .errors import GameAlreadyOverError, OutOfBoundsError
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("oneship.engine.game")
meter = get_meter("oneship.engine.game")

SHOT_COUNTER = meter.create_counter(
    "oneship_engine_shots",
    unit="1",
    description="Accepted shots resolved by Game",
)


class GamePhase(Enum):
    """Lifecycle of a game. OVER is terminal."""

    ACTIVE = "active"
    OVER = "over"


@dataclass(frozen=True)
class ShotResult:
    """Outcome of one accepted shot."""

    hit: bool
    destroyed: bool


@dataclass(frozen=True)
class GameSnapshot:
    """Serializable view of the game after a shot."""

    shots: int
    board: str
    over: bool


class Game:
    """Owns the board and the ship and applies shots to them."""

    def __init__(self, board_size: int, ship: Ship) -> None:
        self.board = Board(size=board_size)
        self.ship = ship
        self.phase: GamePhase = GamePhase.ACTIVE
        self.shots = 0

    @property
    def over(self) -> bool:
        return self.phase is GamePhase.OVER

    def take_shot(self, row: int, col: int) -> ShotResult:
        """Fire at ``(row, col)`` and resolve the shot against the ship.

        Raises ``GameAlreadyOverError`` once the ship is destroyed and
        ``OutOfBoundsError`` for cells off the board; neither counts as a shot.
        Cells that already carry a marker keep it on a miss.
        """
        with tracer.start_as_current_span("game.take_shot") as span:
            span.set_attribute("shot.row", row)
            span.set_attribute("shot.col", col)
            if self.over:
                logger.warning(
                    "shot_rejected_game_over",
                    extra={"row": row, "col": col, "shots": self.shots},
                )
                raise GameAlreadyOverError()
            if not self.board.in_bounds(row, col):
                logger.warning(
                    "shot_rejected_out_of_bounds",
                    extra={"row": row, "col": col, "size": self.board.size},
                )
                raise OutOfBoundsError(row, col, self.board.size)

            self.shots += 1

            if (row, col) == (self.ship.row, self.ship.col) and self.ship.alive():
                destroyed = self.ship.take_hit()
                if destroyed:
                    self.board.cells[row][col] = CellMarker.DESTROYED
                    self.phase = GamePhase.OVER
                    logger.info(
                        "ship_destroyed",
                        extra={"row": row, "col": col, "shots": self.shots},
                    )
                else:
                    self.board.cells[row][col] = CellMarker.HIT
                    logger.info(
                        "shot_hit",
                        extra={"row": row, "col": col, "hitpoints": self.ship.hitpoints},
                    )
                result = ShotResult(hit=True, destroyed=destroyed)
            else:
                if self.board.cells[row][col] is CellMarker.EMPTY:
                    self.board.cells[row][col] = CellMarker.MISS
                logger.info("shot_miss", extra={"row": row, "col": col})
                result = ShotResult(hit=False, destroyed=False)

            outcome = _outcome_label(result)
            span.set_attribute("shot.outcome", outcome)
            SHOT_COUNTER.add(1, attributes={"outcome": outcome})
            return result

    def snapshot(self) -> GameSnapshot:
        """Return an immutable view of the current game."""
        return GameSnapshot(shots=self.shots, board=self.board.render(), over=self.over)


def _outcome_label(result: ShotResult) -> str:
    if result.destroyed:
        return "destroyed"
    if result.hit:
        return "hit"
    return "miss"
