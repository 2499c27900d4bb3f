"""Game with telemetry hooks around every shot."""

from __future__ import annotations

import time

from oneship.engine.errors import GameError
from oneship.engine.game import Game, ShotResult
from oneship.engine.ship import Ship
from oneship.telemetry import (
    get_logger,
    get_tracer,
    record_game_histogram,
    record_game_metric,
)


class InstrumentedGame(Game):
    """Wraps Game with tracing, metrics, and logging."""

    def __init__(self, board_size: int, ship: Ship) -> None:
        super().__init__(board_size, ship)
        self._logger = get_logger("oneship.engine")
        self._tracer = get_tracer("oneship.engine")
        self._started_at = time.perf_counter()
        self._logger.info(
            "Game started size=%d ship=%s hitpoints=%d",
            board_size,
            ship.kind.value,
            ship.hitpoints,
        )

    def take_shot(self, row: int, col: int) -> ShotResult:
        with self._tracer.start_as_current_span("oneship.engine.take_shot") as span:
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)
            span.set_attribute("ship.kind", self.ship.kind.value)

            try:
                result = super().take_shot(row, col)
            except GameError as exc:
                record_game_metric(
                    "oneship_rejected_shots_total",
                    1,
                    {"reason": type(exc).__name__},
                )
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.warning("Rejected shot at (%d,%d): %s", row, col, exc)
                raise

            span.set_attribute("hit", result.hit)
            span.set_attribute("destroyed", result.destroyed)
            span.set_attribute("shots", self.shots)

            record_game_metric("oneship_shots_total", 1, {"ship_kind": self.ship.kind.value})
            record_game_metric(
                "oneship_shots_by_result_total",
                1,
                {"result": "hit" if result.hit else "miss"},
            )
            self._logger.info(
                "take_shot coord=(%d,%d) hit=%s destroyed=%s",
                row,
                col,
                result.hit,
                result.destroyed,
            )

            if result.destroyed:
                self._finish_game()
            return result

    def _finish_game(self) -> None:
        duration = time.perf_counter() - self._started_at
        record_game_metric("oneship_game_completed_total", 1, {"ship_kind": self.ship.kind.value})
        record_game_histogram(
            "oneship_game_shots_to_win", self.shots, {"board_size": self.board.size}
        )
        record_game_histogram(
            "oneship_game_duration_seconds", duration, {"ship_kind": self.ship.kind.value}
        )
        with self._tracer.start_as_current_span("oneship.engine.game_complete") as span:
            span.set_attribute("shots", self.shots)
            span.set_attribute("duration_ms", duration * 1000)
        self._logger.info("Game finished. shots=%d duration_s=%.3f", self.shots, duration)
