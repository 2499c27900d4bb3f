"""Game configuration and construction of the single game instance."""

from __future__ import annotations

import logging
import os
import random
from typing import Any

from pydantic import BaseModel, Field

from oneship.engine.game import Game
from oneship.engine.instrumented_game import InstrumentedGame
from oneship.engine.ship import Ship

logger = logging.getLogger(__name__)

_ENV_PREFIX = "ONESHIP_"


class GameSettings(BaseModel):
    """Runtime options for one game process."""

    size: int = Field(default=5, ge=1)
    # Values of zero or below select a basic ship.
    armor: int = 0
    seed: int | None = None
    http: bool = False
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    @classmethod
    def from_env(cls, **overrides: Any) -> GameSettings:
        """Read ``ONESHIP_*`` variables; non-None overrides win over them."""
        data: dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
            if value is not None and value.strip():
                data[name] = value.strip()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)

    @property
    def armored(self) -> bool:
        return self.armor > 0


def place_ship(settings: GameSettings, rng: random.Random) -> Ship:
    """Put the ship on a uniformly random cell of the board."""
    row = rng.randrange(settings.size)
    col = rng.randrange(settings.size)
    if settings.armored:
        ship = Ship.armored(row, col, settings.armor)
    else:
        ship = Ship.basic(row, col)
    logger.debug(
        "ship_placed",
        extra={"row": row, "col": col, "kind": ship.kind.value, "hitpoints": ship.hitpoints},
    )
    return ship


def build_game(settings: GameSettings) -> Game:
    """Create the game this process will serve for its whole lifetime."""
    rng = random.Random(settings.seed)
    return InstrumentedGame(settings.size, place_ship(settings, rng))
