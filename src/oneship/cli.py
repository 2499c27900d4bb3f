"""Command-line entry point: console play or the HTTP service."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from pydantic import ValidationError

from oneship.engine.game import Game
from oneship.settings import GameSettings, build_game
from oneship.telemetry import init_console_logging, init_telemetry
from oneship.ui import run_console

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oneship", description="Sink a single hidden ship on a square board."
    )
    # Single-dash long forms are accepted alongside the usual double-dash ones.
    parser.add_argument(
        "-http", "--http", action="store_true", dest="http", help="Serve the game over HTTP."
    )
    parser.add_argument(
        "--no-http",
        action="store_false",
        dest="http",
        help="Play in the console even if ONESHIP_HTTP is set.",
    )
    parser.add_argument(
        "-armor", "--armor", type=int, default=None, help="Armor count; 0 means a basic ship."
    )
    parser.add_argument("-size", "--size", type=int, default=None, help="Board size (default 5).")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument("--host", default=None, help="HTTP bind host (default 0.0.0.0).")
    parser.add_argument("--port", type=int, default=None, help="HTTP bind port (default 8080).")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output.",
    )
    parser.set_defaults(http=None)
    return parser


def load_settings(parser: argparse.ArgumentParser, args: argparse.Namespace) -> GameSettings:
    try:
        return GameSettings.from_env(
            size=args.size,
            armor=args.armor,
            seed=args.seed,
            http=args.http,
            host=args.host,
            port=args.port,
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        parser.error(problems)


def serve(game: Game, settings: GameSettings) -> None:
    import uvicorn

    from oneship.api import create_app

    logger.info("http_serving", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(create_app(game), host=settings.host, port=settings.port)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_console_logging(args.log_level)
    init_telemetry()

    settings = load_settings(parser, args)
    game = build_game(settings)

    if settings.http:
        serve(game, settings)
        return 0
    return 0 if run_console(game) else 1


if __name__ == "__main__":
    raise SystemExit(main())
