"""Parsing of shot coordinates typed by a user or sent over HTTP."""

from __future__ import annotations

import re

from oneship.engine.errors import MalformedInputError

_INTEGER = re.compile(r"[+-]?[0-9]+")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_int(raw: str) -> int:
    """Parse a decimal integer: optional sign, ASCII digits, nothing else.

    Values must fit a signed 64-bit integer.
    """
    if not _INTEGER.fullmatch(raw):
        raise MalformedInputError(f"expected an integer, got {raw!r}")
    try:
        value = int(raw)
    except ValueError as exc:
        raise MalformedInputError(f"integer has too many digits ({len(raw)})") from exc
    if not INT64_MIN <= value <= INT64_MAX:
        raise MalformedInputError("integer out of 64-bit range")
    return value
