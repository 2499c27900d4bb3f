"""Fixed-size grid of cell markers reflecting shot history."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CellMarker(Enum):
    """What the shooter sees on a cell."""

    EMPTY = "."
    MISS = "o"
    HIT = "H"
    DESTROYED = "X"


@dataclass
class Board:
    """A size x size grid of markers.

    The board holds rendering state only. Shot resolution lives in ``Game``,
    which writes into ``cells`` directly.
    """

    size: int = 5
    cells: list[list[CellMarker]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("Board size must be at least 1.")
        self.cells = [[CellMarker.EMPTY] * self.size for _ in range(self.size)]

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= row < self.size and 0 <= col < self.size

    def marker_at(self, row: int, col: int) -> CellMarker:
        return self.cells[row][col]

    def render(self) -> str:
        """Flatten the grid row-major, every marker followed by a space.

        Rows are not delimited; clients recover the grid from the board size.
        """
        return "".join(f"{marker.value} " for row in self.cells for marker in row)
