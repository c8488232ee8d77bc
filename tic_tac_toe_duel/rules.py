from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from tic_tac_toe_duel.board import Cell, PlayerSymbol

type WinCombination = tuple[int, int, int]

# Rows, then columns, then diagonals. check_winner reports the first match in this order.
WIN_COMBINATIONS: Final[tuple[WinCombination, ...]] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)
PLAYERS: Final[tuple[PlayerSymbol, PlayerSymbol]] = ("X", "O")


@dataclass(frozen=True, slots=True)
class InProgress:
    pass


@dataclass(frozen=True, slots=True)
class Won:
    player: PlayerSymbol
    combination: WinCombination


@dataclass(frozen=True, slots=True)
class Draw:
    pass


type GameOutcome = InProgress | Won | Draw


def check_winner(board: Sequence[Cell], player: PlayerSymbol) -> WinCombination | None:  # noqa: D103
    for combination in WIN_COMBINATIONS:
        a, b, c = combination
        if board[a] == player and board[b] == player and board[c] == player:
            return combination
    return None


def empty_cells(board: Sequence[Cell]) -> list[int]:  # noqa: D103
    return [index for index, cell in enumerate(board) if cell is None]


def is_draw(board: Sequence[Cell]) -> bool:  # noqa: D103
    if check_winner(board, "X") or check_winner(board, "O"):
        return False
    return not empty_cells(board)


def evaluate(board: Sequence[Cell]) -> GameOutcome:
    """Classify a position as won, drawn or still in progress."""
    for player in PLAYERS:
        combination = check_winner(board, player)
        if combination is not None:
            return Won(player, combination)
    if not empty_cells(board):
        return Draw()
    return InProgress()
