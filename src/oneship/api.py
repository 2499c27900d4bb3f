"""HTTP interface: one shared game, one shot per request."""

from __future__ import annotations

import logging
import threading
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from oneship.engine.errors import GameError, MalformedInputError
from oneship.engine.game import Game
from oneship.parsing import parse_int

logger = logging.getLogger(__name__)

router = APIRouter()


class ShotResponse(BaseModel):
    hit: bool
    destroyed: bool
    shots: int
    board: str
    over: bool


class GameHolder:
    """The process-wide game plus the lock that serializes access to it.

    Sync handlers run in a threadpool, so a shot and the snapshot reported
    with it must happen under the same lock.
    """

    def __init__(self, game: Game) -> None:
        self.game = game
        self.lock = threading.Lock()


def get_holder(request: Request) -> GameHolder:
    return request.app.state.holder


def _coordinates(r: str | None, c: str | None) -> tuple[int, int]:
    if not r or not c:
        raise MalformedInputError("Need r and c")
    try:
        return parse_int(r), parse_int(c)
    except MalformedInputError as exc:
        raise MalformedInputError("r and c must be numbers") from exc


@router.get("/shot", response_model=ShotResponse)
def shot(
    holder: Annotated[GameHolder, Depends(get_holder)],
    r: str | None = None,
    c: str | None = None,
) -> ShotResponse:
    """Fire one shot at ``(r, c)`` and report the outcome with the new state."""
    row, col = _coordinates(r, c)
    with holder.lock:
        result = holder.game.take_shot(row, col)
        snapshot = holder.game.snapshot()
    return ShotResponse(
        hit=result.hit,
        destroyed=result.destroyed,
        shots=snapshot.shots,
        board=snapshot.board,
        over=snapshot.over,
    )


@router.get("/board", response_class=PlainTextResponse)
def board(holder: Annotated[GameHolder, Depends(get_holder)]) -> str:
    with holder.lock:
        return holder.game.board.render()


async def _game_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.info("shot_request_rejected", extra={"path": request.url.path, "reason": str(exc)})
    return PlainTextResponse(str(exc), status_code=400)


def create_app(game: Game) -> FastAPI:
    """Build the application serving ``game`` until the process exits."""
    app = FastAPI(title="oneship")
    app.state.holder = GameHolder(game)
    app.include_router(router)
    app.add_exception_handler(GameError, _game_error_handler)
    return app
