"""PerfectXO package exposing game rules, the minimax engine and the web application."""

from .ai import MinimaxEngine
from .config import EngineSettings
from .controller import GameController
from .game import Cell, GamePhase, GameResult, GameState, TurnState
from .scheduler import TurnScheduler
from .ui import app, create_app

__all__ = [
    "Cell",
    "EngineSettings",
    "GameController",
    "GamePhase",
    "GameResult",
    "GameState",
    "MinimaxEngine",
    "TurnScheduler",
    "TurnState",
    "app",
    "create_app",
]
