from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Final, Literal

from tic_tac_toe_duel.exception import IllegalMoveError, InvariantViolationError

BOARD_SIZE: Final = 3
CELL_COUNT: Final = BOARD_SIZE * BOARD_SIZE
CENTER: Final = 4
CORNERS: Final = (0, 2, 6, 8)

type PlayerSymbol = Literal["X", "O"]
type Cell = PlayerSymbol | None


def other_player(player: PlayerSymbol) -> PlayerSymbol:  # noqa: D103
    return "O" if player == "X" else "X"


@dataclass(frozen=True, slots=True)
class Move:
    player: PlayerSymbol
    index: int


class Board(Sequence[Cell]):
    """Immutable 3x3 grid stored row-major (index = row * 3 + col).

    X always moves first, so the number of X marks is either equal to the number
    of O marks or one more. The side to move follows from those counts.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[Cell] | None = None) -> None:
        self._cells: tuple[Cell, ...] = tuple(cells) if cells is not None else (None,) * CELL_COUNT
        self._validate()

    def _validate(self) -> None:
        if len(self._cells) != CELL_COUNT:
            msg = f"Board must have {CELL_COUNT} cells, got {len(self._cells)}"
            raise InvariantViolationError(msg)

        for cell in self._cells:
            if cell not in (None, "X", "O"):
                msg = f"Unknown cell value: {cell!r}"
                raise InvariantViolationError(msg)

        x_count = self._cells.count("X")
        o_count = self._cells.count("O")
        if x_count - o_count not in (0, 1):
            msg = f"Piece counts out of balance: X={x_count}, O={o_count}"
            raise InvariantViolationError(msg)

    @property
    def cells(self) -> tuple[Cell, ...]:  # noqa: D102
        return self._cells

    @property
    def current_player(self) -> PlayerSymbol:  # noqa: D102
        return "X" if self._cells.count("X") == self._cells.count("O") else "O"

    def is_full(self) -> bool:  # noqa: D102
        return None not in self._cells

    def apply_move(self, move: Move) -> "Board":
        """Return a new board with the move applied; this board is left untouched."""
        if not (0 <= move.index < CELL_COUNT):
            msg = f"Cell {move.index} is out of bounds"
            raise IllegalMoveError(msg)

        if self._cells[move.index] is not None:
            msg = f"Cell {move.index} is occupied"
            raise IllegalMoveError(msg)

        if move.player != self.current_player:
            msg = f"Not {move.player}'s turn"
            raise IllegalMoveError(msg)

        cells = list(self._cells)
        cells[move.index] = move.player
        return Board(cells)

    def rows(self) -> list[tuple[Cell, ...]]:  # noqa: D102
        return [self._cells[r * BOARD_SIZE : (r + 1) * BOARD_SIZE] for r in range(BOARD_SIZE)]

    def __getitem__(self, index: int) -> Cell:  # type: ignore[override]
        return self._cells[index]

    def __len__(self) -> int:
        return CELL_COUNT

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Board):
            return self._cells == other._cells
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        return f"Board({''.join(cell or '.' for cell in self._cells)})"
