"""Single-ship Battleship: one hidden ship, shot until it sinks."""

__version__ = "0.1.0"
