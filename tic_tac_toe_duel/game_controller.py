import logging
import random
from dataclasses import dataclass, field
from enum import StrEnum

from tic_tac_toe_duel.board import Board, Move, PlayerSymbol
from tic_tac_toe_duel.events import (
    EventBus,
    GameDrawn,
    GameRestarted,
    GameWon,
    ModeChanged,
    MoveApplied,
    MoveRejected,
    OpponentThinkingStarted,
    ProfileChanged,
    ScoreChanged,
)
from tic_tac_toe_duel.exception import IllegalMoveError
from tic_tac_toe_duel.opponent import select_move
from tic_tac_toe_duel.profile import STRATEGIST, OpponentProfile
from tic_tac_toe_duel.rules import Draw, GameOutcome, InProgress, WinCombination, Won, check_winner
from tic_tac_toe_duel.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)


class GameMode(StrEnum):
    HUMAN = "human"
    COMPUTER = "computer"


@dataclass(frozen=True, slots=True)
class AwaitingMove:
    player: PlayerSymbol


@dataclass(frozen=True, slots=True)
class OpponentThinking:
    player: PlayerSymbol


@dataclass(frozen=True, slots=True)
class Finished:
    outcome: Won | Draw


type GameState = AwaitingMove | OpponentThinking | Finished


class ScoreBoard:
    def __init__(self) -> None:
        self._scores: dict[PlayerSymbol, int] = {"X": 0, "O": 0}

    def __getitem__(self, player: PlayerSymbol) -> int:
        return self._scores[player]

    def record_win(self, player: PlayerSymbol) -> None:  # noqa: D102
        self._scores[player] += 1

    def reset(self) -> None:  # noqa: D102
        self._scores = {"X": 0, "O": 0}

    def as_dict(self) -> dict[PlayerSymbol, int]:  # noqa: D102
        return dict(self._scores)


@dataclass
class GameSession:
    """Everything that a restart throws away."""

    board: Board = field(default_factory=Board)
    state: GameState = field(default_factory=lambda: AwaitingMove("X"))
    generation: int = 0
    pending: ScheduledTask | None = None


class GameController:
    """Turn sequencing, scoring and the computer opponent's schedule.

    All mutation happens on the caller's thread. The opponent's thinking delay is a
    scheduled task, so the owner must call tick() regularly for the computer to move.
    """

    def __init__(  # noqa: PLR0913
        self,
        event_bus: EventBus,
        scheduler: Scheduler | None = None,
        *,
        mode: GameMode = GameMode.HUMAN,
        profile: OpponentProfile = STRATEGIST,
        computer_symbol: PlayerSymbol = "O",
        rng: random.Random | None = None,
        auto_play: bool = True,
    ) -> None:
        self._event_bus = event_bus
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._mode = mode
        self._profile = profile
        self._computer_symbol: PlayerSymbol = computer_symbol
        self._rng = rng if rng is not None else random.Random()  # noqa: S311
        self._auto_play = auto_play
        self._session = GameSession()
        self._scores = ScoreBoard()

    # -----------------------------
    # Read-only views
    # -----------------------------

    @property
    def board(self) -> Board:  # noqa: D102
        return self._session.board

    @property
    def state(self) -> GameState:  # noqa: D102
        return self._session.state

    @property
    def outcome(self) -> GameOutcome:  # noqa: D102
        state = self._session.state
        return state.outcome if isinstance(state, Finished) else InProgress()

    @property
    def current_player(self) -> PlayerSymbol:  # noqa: D102
        return self._session.board.current_player

    @property
    def scores(self) -> dict[PlayerSymbol, int]:  # noqa: D102
        return self._scores.as_dict()

    @property
    def opponent_thinking(self) -> bool:  # noqa: D102
        return isinstance(self._session.state, OpponentThinking)

    @property
    def profile(self) -> OpponentProfile:  # noqa: D102
        return self._profile

    @property
    def mode(self) -> GameMode:  # noqa: D102
        return self._mode

    @property
    def computer_symbol(self) -> PlayerSymbol:  # noqa: D102
        return self._computer_symbol

    @property
    def winning_combination(self) -> WinCombination | None:  # noqa: D102
        outcome = self.outcome
        return outcome.combination if isinstance(outcome, Won) else None

    def has_scheduled_work(self) -> bool:
        """True while the opponent move or another scheduled task, such as a sound, is waiting to run."""
        return self._scheduler.has_pending()

    def is_computer_turn(self) -> bool:  # noqa: D102
        return self._mode == GameMode.COMPUTER and self.current_player == self._computer_symbol

    def status_message(self) -> str:  # noqa: D102
        match self._session.state:
            case Finished(Won(player, _)):
                return f"{player} wins!"
            case Finished(Draw()):
                return "It's a draw!"
            case OpponentThinking():
                return "Computer is thinking..."
            case AwaitingMove(player):
                return f"{player}'s turn"
        raise AssertionError(self._session.state)

    # -----------------------------
    # Game flow
    # -----------------------------

    def start(self) -> None:
        """Announce the current game and let the computer open if it plays X."""
        self._event_bus.publish(GameRestarted())
        self._start_opponent_turn()

    def tick(self) -> int:
        """Run due scheduled work such as a pending opponent move."""
        return self._scheduler.run_pending()

    def apply_move(self, index: int, player: PlayerSymbol) -> None:  # noqa: D102
        match self._session.state:
            case Finished():
                raise IllegalMoveError("Game over")
            case OpponentThinking():
                raise IllegalMoveError("Opponent is thinking")

        if player != self.current_player:
            msg = f"Not {player}'s turn"
            raise IllegalMoveError(msg)

        if self.is_computer_turn():
            msg = f"{player} is played by the computer"
            raise IllegalMoveError(msg)

        self._commit(Move(player, index), by_computer=False)

    def handle_cell_click(self, index: int) -> bool:
        """Apply a clicked cell for the side to move. Returns False if the click was rejected."""
        player = self.current_player
        try:
            self.apply_move(index, player)
        except IllegalMoveError as e:
            logger.debug("Rejected %s on cell %d: %s", player, index, e)
            self._event_bus.publish(MoveRejected(player, index, str(e)))
            return False
        return True

    def trigger_opponent_move(self) -> None:  # noqa: D102
        if self._mode != GameMode.COMPUTER:
            raise IllegalMoveError("No computer opponent in this mode")

        state = self._session.state
        if not isinstance(state, AwaitingMove) or state.player != self._computer_symbol:
            raise IllegalMoveError("Not the computer's turn")

        delay = self._rng.uniform(*self._profile.thinking_time)
        generation = self._session.generation
        self._session.state = OpponentThinking(state.player)
        self._session.pending = self._scheduler.call_later(delay, lambda: self._complete_opponent_move(generation))
        logger.debug("%s is thinking for %.2fs", self._profile.name, delay)
        self._event_bus.publish(OpponentThinkingStarted(state.player, delay))

    def restart(self) -> None:  # noqa: D102
        self._cancel_pending()
        session = self._session
        session.board = Board()
        session.state = AwaitingMove("X")
        session.generation += 1
        logger.info("Game restarted (generation %d)", session.generation)
        self._event_bus.publish(GameRestarted())
        self._start_opponent_turn()

    def reset_score(self) -> None:  # noqa: D102
        self._scores.reset()
        self._event_bus.publish(ScoreChanged(self._scores.as_dict()))

    def set_opponent_profile(self, profile: OpponentProfile) -> None:
        """Switch difficulty. A game against the computer restarts so the change never applies mid-game."""
        self._profile = profile
        logger.info("Opponent profile set to %s (%s)", profile.name, profile.difficulty)
        self._event_bus.publish(ProfileChanged(profile.name))
        if self._mode == GameMode.COMPUTER:
            self.restart()

    def set_mode(self, mode: GameMode) -> None:  # noqa: D102
        self._mode = mode
        logger.info("Game mode set to %s", mode)
        self._event_bus.publish(ModeChanged(mode))
        self.restart()

    # -----------------------------
    # Internals
    # -----------------------------

    def _commit(self, move: Move, *, by_computer: bool) -> None:
        session = self._session
        session.board = session.board.apply_move(move)
        logger.debug("%s played cell %d: %r", move.player, move.index, session.board)

        combination = check_winner(session.board, move.player)
        if combination is not None:
            session.state = Finished(Won(move.player, combination))
            self._scores.record_win(move.player)
        elif session.board.is_full():
            session.state = Finished(Draw())
        else:
            session.state = AwaitingMove(session.board.current_player)

        self._event_bus.publish(MoveApplied(move.player, move.index, by_computer))

        match session.state:
            case Finished(Won(player, combination)):
                logger.info("%s wins with %s", player, combination)
                self._event_bus.publish(GameWon(player, combination))
                self._event_bus.publish(ScoreChanged(self._scores.as_dict()))
            case Finished(Draw()):
                logger.info("Game drawn")
                self._event_bus.publish(GameDrawn())
            case _:
                self._start_opponent_turn()

    def _start_opponent_turn(self) -> None:
        if self._auto_play and self.is_computer_turn() and isinstance(self._session.state, AwaitingMove):
            self.trigger_opponent_move()

    def _complete_opponent_move(self, generation: int) -> None:
        session = self._session
        if generation != session.generation or not isinstance(session.state, OpponentThinking):
            logger.debug("Discarding stale opponent move from generation %d", generation)
            return

        session.pending = None
        player = session.state.player
        index = select_move(session.board, self._profile, self._rng)
        session.state = AwaitingMove(player)
        if session.board[index] is not None:
            logger.warning("Opponent picked occupied cell %d, thinking again", index)
            self._start_opponent_turn()
            return

        self._commit(Move(player, index), by_computer=True)

    def _cancel_pending(self) -> None:
        if self._session.pending is not None:
            self._session.pending.cancel()
            self._session.pending = None
