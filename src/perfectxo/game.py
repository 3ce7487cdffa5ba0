"""Core rules for PerfectXO: board, win detection and turn application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class Cell(str, Enum):
    EMPTY = " "
    X = "X"
    O = "O"

    @property
    def opponent(self) -> "Cell":
        if self is Cell.X:
            return Cell.O
        if self is Cell.O:
            return Cell.X
        raise ValueError("Empty cell has no opponent")


Board = List[Cell]

BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class TurnState(str, Enum):
    AWAITING_USER = "user"
    AWAITING_COMPUTER = "computer"

    def flipped(self) -> "TurnState":
        if self is TurnState.AWAITING_USER:
            return TurnState.AWAITING_COMPUTER
        return TurnState.AWAITING_USER


class GamePhase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"


# ---------- Errors ----------


class GameError(ValueError):
    """Base class for misuse of the game API."""

    kind = "GameError"


class InvalidSymbolError(GameError):
    kind = "InvalidSymbol"


class InvalidCellError(GameError):
    kind = "InvalidCell"


class CellOccupiedError(GameError):
    kind = "CellOccupied"


class GameAlreadyOverError(GameError):
    kind = "GameAlreadyOver"


class WrongTurnError(GameError):
    kind = "WrongTurn"


class GameInProgressError(GameError):
    kind = "GameInProgress"


# ---------- Results ----------


@dataclass(frozen=True)
class GameResult:
    """Outcome derived from a board: ongoing, a win for ``winner`` or a tie."""

    winner: Optional[Cell] = None
    tie: bool = False

    @property
    def ongoing(self) -> bool:
        return self.winner is None and not self.tie

    def __str__(self) -> str:
        if self.winner is not None:
            return f"Win({self.winner.value})"
        return "Tie" if self.tie else "Ongoing"


ONGOING = GameResult()
TIE = GameResult(tie=True)


def empty_board() -> Board:
    return [Cell.EMPTY] * BOARD_SIZE


def parse_symbol(symbol: object) -> Cell:
    """Coerce ``"X"``/``"O"`` (or a Cell) into a concrete symbol."""
    try:
        cell = Cell(symbol)
    except ValueError as exc:
        raise InvalidSymbolError(f"Unsupported symbol {symbol!r}; choose X or O") from exc
    if cell is Cell.EMPTY:
        raise InvalidSymbolError("Symbol must be X or O")
    return cell


# ---------- Win detection ----------


def has_win(board: Sequence[Cell], symbol: Cell) -> bool:
    for a, b, c in WINNING_LINES:
        if board[a] == symbol and board[b] == symbol and board[c] == symbol:
            return True
    return False


def is_full(board: Sequence[Cell]) -> bool:
    return all(c != Cell.EMPTY for c in board)


def evaluate(board: Sequence[Cell]) -> GameResult:
    for symbol in (Cell.X, Cell.O):
        if has_win(board, symbol):
            return GameResult(winner=symbol)
    if is_full(board):
        return TIE
    return ONGOING


def empty_cells(board: Sequence[Cell]) -> List[int]:
    return [i for i, c in enumerate(board) if c == Cell.EMPTY]


# ---------- Game state ----------


@dataclass
class GameState:
    """Board, side to move and derived result for one game.

    ``turn`` is ``None`` once the game is no longer ongoing.
    """

    user_symbol: Cell
    computer_symbol: Cell
    board: Board = field(default_factory=empty_board)
    turn: Optional[TurnState] = TurnState.AWAITING_USER
    result: GameResult = ONGOING

    @classmethod
    def new(cls, user_symbol: Cell, computer_first: bool = False) -> "GameState":
        opener = TurnState.AWAITING_COMPUTER if computer_first else TurnState.AWAITING_USER
        return cls(
            user_symbol=user_symbol,
            computer_symbol=user_symbol.opponent,
            turn=opener,
        )

    def symbol_for(self, turn: TurnState) -> Cell:
        if turn is TurnState.AWAITING_USER:
            return self.user_symbol
        return self.computer_symbol

    def apply_move(self, index: int, symbol: Cell) -> None:
        """Place ``symbol`` at ``index``, recompute the result and pass the turn."""
        if not 0 <= index < BOARD_SIZE:
            raise InvalidCellError(f"Cell index {index} is outside the board")
        if self.board[index] != Cell.EMPTY:
            raise CellOccupiedError(f"Cell {index} already occupied")
        if not self.result.ongoing:
            raise GameAlreadyOverError("Game already finished")
        if self.turn is None or self.symbol_for(self.turn) != symbol:
            raise WrongTurnError(f"It is not {Cell(symbol).value}'s turn")

        self.board[index] = symbol
        self.result = evaluate(self.board)
        self.turn = self.turn.flipped() if self.result.ongoing else None

    def is_empty(self) -> bool:
        return all(c == Cell.EMPTY for c in self.board)
