"""Blocking console loop for playing a single game from a terminal."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from oneship.engine.errors import GameError, MalformedInputError
from oneship.engine.game import Game, ShotResult
from oneship.parsing import parse_int

logger = logging.getLogger(__name__)


class ShotReader:
    """Reads whitespace-separated (row, col) pairs from a text stream.

    A pair may span several lines. When a token is not an integer the rest of
    its line is dropped so the next prompt starts clean.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pending: list[str] = []

    def _next_token(self) -> str | None:
        while not self._pending:
            line = self._stream.readline()
            if not line:
                return None
            self._pending = line.split()
        return self._pending.pop(0)

    def read(self) -> tuple[int, int] | None:
        """Return the next pair, or None at end of input."""
        row_token = self._next_token()
        if row_token is None:
            return None
        col_token = self._next_token()
        if col_token is None:
            return None
        try:
            return parse_int(row_token), parse_int(col_token)
        except MalformedInputError:
            self._pending.clear()
            raise


def describe(result: ShotResult) -> str:
    if result.destroyed:
        return "Ship destroyed"
    if result.hit:
        return "Hit, but ship is alive"
    return "Miss"


def run_console(game: Game, stdin: TextIO | None = None, stdout: TextIO | None = None) -> bool:
    """Play until the ship is destroyed or input runs out.

    Returns True when the game finished.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    reader = ShotReader(stdin)

    while not game.over:
        stdout.write(game.board.render() + "\n")
        stdout.flush()
        try:
            shot = reader.read()
            if shot is None:
                logger.info("console_input_closed", extra={"shots": game.shots})
                return False
            result = game.take_shot(*shot)
        except GameError as exc:
            stdout.write(f"error: {exc}\n")
            continue
        stdout.write(describe(result) + "\n")

    stdout.write("Final board: \n")
    stdout.write(game.board.render() + "\n")
    stdout.flush()
    return True
