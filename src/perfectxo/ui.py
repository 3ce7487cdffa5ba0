"""FastAPI JSON surface the browser UI drives for PerfectXO."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from .config import EngineSettings
from .controller import GameController
from .game import GameError


class StartGameRequest(BaseModel):
    """Request payload for starting a game with the user's chosen symbol."""

    symbol: str = Field(description="Symbol the user plays: X or O")


class MoveRequest(BaseModel):
    """Request payload for a user click on the board."""

    index: int = Field(ge=0, le=8)


class PreferencesRequest(BaseModel):
    """Request payload for settings the UI may change between games."""

    model_config = ConfigDict(populate_by_name=True)

    user_plays_first: bool = Field(alias="userPlaysFirst")


def _controller(request: Request) -> GameController:
    return request.app.state.controller


def _run(action: Callable[..., object], *args: object) -> None:
    try:
        action(*args)
    except GameError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def create_app(
    settings: Optional[EngineSettings] = None,
    controller: Optional[GameController] = None,
) -> FastAPI:
    """Build an app that owns a single GameController."""

    app = FastAPI(
        title="PerfectXO", description="Tic-tac-toe against a perfect minimax opponent"
    )
    app.state.controller = controller or GameController(
        settings or EngineSettings.from_env()
    )

    # Endpoints are async so the scheduler's timers land on the server loop

    @app.get("/api/game")
    async def get_game(request: Request) -> Dict[str, object]:
        return _controller(request).snapshot()

    @app.post("/api/game")
    async def start_game(payload: StartGameRequest, request: Request) -> Dict[str, object]:
        controller = _controller(request)
        _run(controller.start_game, payload.symbol)
        return controller.snapshot()

    @app.post("/api/game/move")
    async def make_move(payload: MoveRequest, request: Request) -> Dict[str, object]:
        controller = _controller(request)
        _run(controller.handle_user_move, payload.index)
        return controller.snapshot()

    @app.post("/api/game/reset")
    async def reset_game(request: Request) -> Dict[str, object]:
        controller = _controller(request)
        controller.reset_game()
        return controller.snapshot()

    @app.put("/api/preferences")
    async def update_preferences(
        payload: PreferencesRequest, request: Request
    ) -> Dict[str, object]:
        controller = _controller(request)
        controller.user_plays_first = payload.user_plays_first
        return controller.snapshot()

    return app


app = create_app()
