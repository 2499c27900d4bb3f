"""Ship domain model for the single-ship engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int


class ShipKind(Enum):
    """Supported ship variants."""

    BASIC = "basic"
    ARMORED = "armored"


@dataclass
class Ship:
    """The hidden target: a fixed position and a remaining hitpoint counter.

    Both variants share this class. A basic ship starts with one hitpoint, an
    armored ship with as many hitpoints as it has armor. An armored ship built
    with zero armor is already dead and can never be hit.
    """

    kind: ShipKind
    position: Coordinate
    hitpoints: int

    def __post_init__(self) -> None:
        if self.hitpoints < 0:
            raise ValueError("Ship hitpoints cannot be negative.")

    @classmethod
    def basic(cls, row: int, col: int) -> Ship:
        return cls(ShipKind.BASIC, Coordinate(row, col), 1)

    @classmethod
    def armored(cls, row: int, col: int, armor: int) -> Ship:
        return cls(ShipKind.ARMORED, Coordinate(row, col), armor)

    @property
    def row(self) -> int:
        return self.position.row

    @property
    def col(self) -> int:
        return self.position.col

    def alive(self) -> bool:
        """Return True while the ship has hitpoints left."""
        return self.hitpoints > 0

    def take_hit(self) -> bool:
        """Remove one hitpoint and report whether the ship is now destroyed.

        Hitting a ship that is already at zero changes nothing and still
        reports it as destroyed.
        """
        if self.hitpoints <= 0:
            return True
        self.hitpoints -= 1
        return self.hitpoints <= 0
