"""Public façade the UI layer drives: start, user moves, resets."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from .ai import MinimaxEngine
from .config import EngineSettings
from .game import (
    BOARD_SIZE,
    Board,
    Cell,
    GameAlreadyOverError,
    GameInProgressError,
    GamePhase,
    GameResult,
    GameState,
    InvalidCellError,
    ONGOING,
    TurnState,
    empty_board,
    parse_symbol,
)
from .scheduler import COMPUTER_MOVE, TurnScheduler

logger = logging.getLogger(__name__)

YOU_WIN = "You Win"
YOU_LOSE = "You Lose"
TIE_MESSAGE = "It's a Tie"


def result_message(result: GameResult, user_symbol: Optional[Cell]) -> Optional[str]:
    """Display text for a finished result, ``None`` while it is ongoing."""
    if result.tie:
        return TIE_MESSAGE
    if result.winner is None or user_symbol is None:
        return None
    return YOU_WIN if result.winner == user_symbol else YOU_LOSE


class GameController:
    """Owns one game's state and timers; the only object the UI talks to.

    Operations that can start a timer must run inside an event loop (or with a
    scheduler given an explicit loop); without one they raise ``RuntimeError``
    before touching any state.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        engine: Optional[MinimaxEngine] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[TurnScheduler] = None,
    ) -> None:
        self.scheduler = scheduler or TurnScheduler(
            settings or EngineSettings(), engine=engine, rng=rng
        )
        self.phase = GamePhase.IDLE
        self.state: Optional[GameState] = None
        self.move_log: List[Dict[str, object]] = []

    # ---- preferences ----

    @property
    def settings(self) -> EngineSettings:
        return self.scheduler.settings

    @property
    def user_plays_first(self) -> bool:
        return self.settings.user_plays_first

    @user_plays_first.setter
    def user_plays_first(self, value: bool) -> None:
        self.scheduler.settings = self.settings.model_copy(
            update={"computer_moves_first": not value}
        )

    # ---- observed state ----

    @property
    def board(self) -> Board:
        return list(self.state.board) if self.state else empty_board()

    @property
    def turn(self) -> Optional[TurnState]:
        return self.state.turn if self.state else None

    @property
    def user_symbol(self) -> Optional[Cell]:
        return self.state.user_symbol if self.state else None

    @property
    def computer_symbol(self) -> Optional[Cell]:
        return self.state.computer_symbol if self.state else None

    @property
    def result(self) -> GameResult:
        return self.state.result if self.state else ONGOING

    @property
    def message(self) -> Optional[str]:
        return result_message(self.result, self.user_symbol)

    @property
    def computer_pending(self) -> bool:
        return self.scheduler.is_pending(COMPUTER_MOVE)

    def snapshot(self) -> Dict[str, object]:
        result = self.result
        if result.winner is not None:
            result_value: Optional[str] = result.winner.value
        else:
            result_value = "tie" if result.tie else None
        state: Dict[str, object] = {
            "board": [c.value if c != Cell.EMPTY else "" for c in self.board],
            "phase": self.phase.value,
            "turn": self.turn.value if self.turn else None,
            "userSymbol": self.user_symbol.value if self.user_symbol else None,
            "computerSymbol": (
                self.computer_symbol.value if self.computer_symbol else None
            ),
            "result": result_value,
            "message": self.message,
            "userPlaysFirst": self.user_plays_first,
            "computerPending": self.computer_pending,
            "moveLog": list(self.move_log),
        }
        if self.move_log:
            state["lastMove"] = self.move_log[-1]
        return state

    # ---- operations ----

    def start_game(self, symbol: object) -> None:
        user_symbol = parse_symbol(symbol)
        if self.phase is GamePhase.PLAYING:
            raise GameInProgressError("A game is already in progress")
        self.scheduler.event_loop()
        self._begin(user_symbol)

    def handle_user_move(self, index: int) -> bool:
        """Play the user's move; returns False when the click is ignored."""
        if not 0 <= index < BOARD_SIZE:
            raise InvalidCellError(f"Cell index {index} is outside the board")
        state = self.state
        if (
            self.phase is not GamePhase.PLAYING
            or state is None
            or state.turn is not TurnState.AWAITING_USER
            or state.board[index] != Cell.EMPTY
        ):
            logger.debug("Ignoring user click on %d", index)
            return False

        self.scheduler.event_loop()
        self._play(state, index, state.user_symbol, "user")
        return True

    def reset_game(self) -> None:
        """Clear the board; keeps the symbols and starts a rematch if any."""
        user_symbol = self.user_symbol
        if user_symbol is None:
            self._clear()
            return
        self.scheduler.event_loop()
        logger.info("Rematch with user as %s", user_symbol.value)
        self._begin(user_symbol)

    # ---- transitions ----

    def _begin(self, user_symbol: Cell) -> None:
        self.scheduler.cancel_all()
        self.move_log = []
        self.state = GameState.new(
            user_symbol,
            computer_first=self.scheduler.opening_turn() is TurnState.AWAITING_COMPUTER,
        )
        self.phase = GamePhase.PLAYING
        logger.info(
            "Game started: user %s, computer %s, %s moves first",
            user_symbol.value,
            self.state.computer_symbol.value,
            self.state.turn.value,
        )
        if self.state.turn is TurnState.AWAITING_COMPUTER:
            self.scheduler.schedule_computer_move(self._computer_turn)

    def _play(self, state: GameState, index: int, symbol: Cell, player: str) -> None:
        state.apply_move(index, symbol)
        self.move_log.append({"player": player, "symbol": symbol.value, "index": index})
        logger.debug("%s played %s at %d", player, symbol.value, index)

        if not state.result.ongoing:
            self._finish(state)
        elif state.turn is TurnState.AWAITING_COMPUTER:
            self.scheduler.schedule_computer_move(self._computer_turn)

    def _computer_turn(self) -> None:
        state = self.state
        if (
            self.phase is not GamePhase.PLAYING
            or state is None
            or state.turn is not TurnState.AWAITING_COMPUTER
        ):
            return
        index = self.scheduler.choose_computer_move(
            state.board, state.computer_symbol, state.user_symbol
        )
        if index is None:
            raise GameAlreadyOverError("No move available for the computer")
        self._play(state, index, state.computer_symbol, "computer")

    def _finish(self, state: GameState) -> None:
        self.phase = GamePhase.FINISHED
        logger.info("Game finished: %s (%s)", state.result, self.message)
        self.scheduler.schedule_reset(self._full_reset)

    def _full_reset(self) -> None:
        if self.phase is not GamePhase.FINISHED:
            return
        self._clear()
        logger.info("Returned to idle")

    def _clear(self) -> None:
        self.scheduler.cancel_all()
        self.state = None
        self.move_log = []
        self.phase = GamePhase.IDLE
