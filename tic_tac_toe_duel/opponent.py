import logging
import math
import random
from collections.abc import Sequence

from tic_tac_toe_duel.board import CENTER, CORNERS, Board, Cell, PlayerSymbol, other_player
from tic_tac_toe_duel.exception import InvariantViolationError
from tic_tac_toe_duel.profile import Difficulty, OpponentProfile
from tic_tac_toe_duel.rules import InProgress, check_winner, empty_cells, evaluate

logger = logging.getLogger(__name__)

EASY_STRATEGY_RATE = 0.6
WIN_SCORE = 10


def select_move(board: Board, profile: OpponentProfile, rng: random.Random | None = None) -> int:
    """Pick a cell for the side to move on board.

    All randomness comes from rng, so a seeded generator gives a reproducible choice.
    """
    rng = rng if rng is not None else random.Random()  # noqa: S311
    if not isinstance(evaluate(board), InProgress):
        msg = f"Opponent asked to move on a finished board: {board!r}"
        logger.error(msg)
        raise InvariantViolationError(msg)

    me = board.current_player
    choices = empty_cells(board)

    if rng.random() < profile.error_rate:
        move = rng.choice(choices)
        logger.debug("%s plays a deliberate mistake at %d", profile.name, move)
        return move

    match profile.difficulty:
        case Difficulty.EASY:
            if rng.random() < EASY_STRATEGY_RATE:
                move = strategic_move(board.cells, me, rng)
            else:
                move = rng.choice(choices)
        case Difficulty.MEDIUM:
            move = strategic_move(board.cells, me, rng)
        case Difficulty.EXPERT:
            move = minimax_move(board.cells, me)

    logger.debug("%s (%s) chose cell %d", profile.name, profile.difficulty, move)
    return move


def strategic_move(cells: Sequence[Cell], me: PlayerSymbol, rng: random.Random) -> int:
    """Win if possible, else block, else center, else a corner, else anything.

    Blocking only looks at the opponent's next move.
    """
    choices = empty_cells(cells)
    human = other_player(me)

    for index in choices:
        if check_winner(_place(cells, index, me), me):
            return index

    for index in choices:
        if check_winner(_place(cells, index, human), human):
            return index

    if cells[CENTER] is None:
        return CENTER

    corners = [index for index in CORNERS if cells[index] is None]
    if corners:
        return rng.choice(corners)

    return rng.choice(choices)


def minimax_move(cells: Sequence[Cell], me: PlayerSymbol) -> int:
    """Return the cell with the best minimax score; ties go to the lowest index."""
    choices = empty_cells(cells)
    max_depth = len(choices)
    best_score = -math.inf
    best_move = choices[0]

    for index in choices:
        score = _minimax(_place(cells, index, me), me, other_player(me), 1, max_depth, -math.inf, math.inf)
        if score > best_score:
            best_score = score
            best_move = index

    return best_move


def _minimax(  # noqa: PLR0913
    cells: tuple[Cell, ...],
    me: PlayerSymbol,
    to_move: PlayerSymbol,
    depth: int,
    max_depth: int,
    alpha: float,
    beta: float,
) -> float:
    if check_winner(cells, me):
        return WIN_SCORE - depth
    if check_winner(cells, other_player(me)):
        return depth - WIN_SCORE

    choices = empty_cells(cells)
    if not choices or depth >= max_depth:
        return 0

    opponent = other_player(to_move)
    if to_move == me:
        best_score = -math.inf
        for index in choices:
            score = _minimax(_place(cells, index, to_move), me, opponent, depth + 1, max_depth, alpha, beta)
            best_score = max(best_score, score)
            alpha = max(alpha, score)
            if alpha >= beta:
                break  # Prune
        return best_score

    best_score = math.inf
    for index in choices:
        score = _minimax(_place(cells, index, to_move), me, opponent, depth + 1, max_depth, alpha, beta)
        best_score = min(best_score, score)
        beta = min(beta, score)
        if alpha >= beta:
            break  # Prune
    return best_score


def _place(cells: Sequence[Cell], index: int, player: PlayerSymbol) -> tuple[Cell, ...]:
    placed = list(cells)
    placed[index] = player
    return tuple(placed)
