"""Exhaustive minimax engine for PerfectXO."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence
import math

from .game import Board, Cell, empty_cells, has_win, is_full


WIN_SCORE = 10
LOSS_SCORE = -10
TIE_SCORE = 0


@dataclass(frozen=True)
class MoveChoice:
    score: float
    # None when the searched board had no empty cell
    index: Optional[int] = None


@contextmanager
def placed(board: Board, index: int, symbol: Cell) -> Iterator[Board]:
    """Temporarily occupy ``board[index]``; the cell is emptied again on exit."""
    board[index] = symbol
    try:
        yield board
    finally:
        board[index] = Cell.EMPTY


@dataclass
class MinimaxEngine:
    """Full-depth minimax, no pruning and no caching.

    Scores are from the computer's point of view: +10 when the computer has a
    line, -10 when the user has one, 0 for a full board. Depth is not
    discounted. Among equal scores the lowest cell index wins.
    """

    nodes_searched: int = 0

    # ---- public API ----

    def best_move(
        self,
        board: Sequence[Cell],
        computer_symbol: Cell,
        user_symbol: Cell,
        maximizing: bool = True,
    ) -> MoveChoice:
        self.nodes_searched = 0
        scratch: Board = list(board)
        return self._minimax(scratch, computer_symbol, user_symbol, maximizing)

    # ---- core search ----

    def _minimax(
        self,
        board: Board,
        computer_symbol: Cell,
        user_symbol: Cell,
        maximizing: bool,
    ) -> MoveChoice:
        self.nodes_searched += 1

        if has_win(board, computer_symbol):
            return MoveChoice(WIN_SCORE)
        if has_win(board, user_symbol):
            return MoveChoice(LOSS_SCORE)
        if is_full(board):
            return MoveChoice(TIE_SCORE)

        mover = computer_symbol if maximizing else user_symbol
        best_score = -math.inf if maximizing else math.inf
        best_index: Optional[int] = None

        for index in empty_cells(board):
            with placed(board, index, mover):
                score = self._minimax(
                    board, computer_symbol, user_symbol, not maximizing
                ).score
            if maximizing:
                if score > best_score:
                    best_score, best_index = score, index
            elif score < best_score:
                best_score, best_index = score, index

        return MoveChoice(best_score, best_index)
