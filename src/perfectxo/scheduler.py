"""Turn sequencing and timed continuations for PerfectXO.

Timers are asyncio handles on the running event loop, so the delays never
block the loop. Every handle is tracked and cancelled when superseded.
Without an explicit ``loop`` the scheduler needs a running event loop;
``event_loop`` raises ``RuntimeError`` otherwise.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Dict, Optional, Sequence

from .ai import MinimaxEngine
from .config import EngineSettings
from .game import Cell, TurnState, empty_cells

logger = logging.getLogger(__name__)

COMPUTER_MOVE = "computer-move"
RESET = "reset"


class TurnScheduler:
    """Decides who moves next and when the delayed continuations fire."""

    def __init__(
        self,
        settings: EngineSettings,
        engine: Optional[MinimaxEngine] = None,
        rng: Optional[random.Random] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.settings = settings
        self.engine = engine or MinimaxEngine()
        self.rng = rng or random.Random()
        self._loop = loop
        self._handles: Dict[str, asyncio.TimerHandle] = {}

    # ---- turn order ----

    def opening_turn(self) -> TurnState:
        if self.settings.computer_moves_first:
            return TurnState.AWAITING_COMPUTER
        return TurnState.AWAITING_USER

    def choose_computer_move(
        self, board: Sequence[Cell], computer_symbol: Cell, user_symbol: Cell
    ) -> Optional[int]:
        """Return the cell the computer plays, or None when no cell is free."""
        free = empty_cells(board)
        if not free:
            return None
        if self.settings.randomize_opening_move and len(free) == len(board):
            index = self.rng.choice(free)
            logger.debug("Random opening move at %d", index)
            return index
        choice = self.engine.best_move(board, computer_symbol, user_symbol, True)
        logger.debug(
            "Minimax picked %s (score %s, %d nodes)",
            choice.index,
            choice.score,
            self.engine.nodes_searched,
        )
        return choice.index

    # ---- timed continuations ----

    def schedule_computer_move(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._schedule(COMPUTER_MOVE, self.settings.move_delay, callback)

    def schedule_reset(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._schedule(RESET, self.settings.reset_delay, callback)

    def is_pending(self, name: str) -> bool:
        return name in self._handles

    @property
    def pending(self) -> int:
        return len(self._handles)

    def cancel(self, name: str) -> bool:
        handle = self._handles.pop(name, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug("Cancelled pending %s", name)
        return True

    def cancel_all(self) -> None:
        for name in list(self._handles):
            self.cancel(name)

    def event_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    # ---- helpers ----

    def _schedule(
        self, name: str, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        # A newer continuation of the same kind supersedes the old one
        self.cancel(name)
        handle = self.event_loop().call_later(delay, self._fire, name, callback)
        self._handles[name] = handle
        logger.debug("Scheduled %s in %.2fs", name, delay)
        return handle

    def _fire(self, name: str, callback: Callable[[], None]) -> None:
        self._handles.pop(name, None)
        callback()
