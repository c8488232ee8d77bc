from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from tic_tac_toe_duel.audio import AudioFeedback
from tic_tac_toe_duel.events import (
    Event,
    EventBus,
    GameDrawn,
    GameRestarted,
    GameWon,
    MoveApplied,
    MoveRejected,
    OpponentThinkingStarted,
    ScoreChanged,
    UiClick,
)
from tic_tac_toe_duel.game_controller import GameController, GameMode
from tic_tac_toe_duel.profile import get_profile


class Ui(ABC):
    """Base renderer: redraws on controller events and forwards player commands."""

    def __init__(self, controller: GameController, event_bus: EventBus, audio: AudioFeedback | None = None) -> None:
        self._controller = controller
        self._event_bus = event_bus
        self._audio = audio
        self._running = False

        self._subscriptions: list[tuple[type[Event], Callable[[Any], None]]] = [
            (MoveApplied, self._on_state_changed),
            (GameRestarted, self._on_state_changed),
            (OpponentThinkingStarted, self._on_opponent_thinking),
            (ScoreChanged, self._on_score_changed),
            (GameWon, self._on_game_won),
            (GameDrawn, self._on_game_drawn),
            (MoveRejected, self._on_move_rejected),
        ]
        for event_type, handler in self._subscriptions:
            self._event_bus.subscribe(event_type, handler)

    @property
    def running(self) -> bool:  # noqa: D102
        return self._running

    def run(self) -> None:  # noqa: D102
        self._running = True

    def _stop(self) -> None:
        self._running = False
        for event_type, handler in self._subscriptions:
            self._event_bus.unsubscribe(event_type, handler)

    # -----------------------------
    # Commands
    # -----------------------------

    def _apply_move(self, index: int) -> bool:
        return self._controller.handle_cell_click(index)

    def _restart(self) -> None:
        self._event_bus.publish(UiClick())
        self._controller.restart()

    def _reset_score(self) -> None:
        self._event_bus.publish(UiClick())
        self._controller.reset_score()

    def _toggle_mute(self) -> bool | None:
        if self._audio is None:
            return None
        return self._audio.toggle_mute()

    def _set_mode(self, mode: GameMode) -> None:
        self._event_bus.publish(UiClick())
        self._controller.set_mode(mode)

    def _set_difficulty(self, key: str) -> None:
        self._event_bus.publish(UiClick())
        self._controller.set_opponent_profile(get_profile(key))

    # -----------------------------
    # Event handlers
    # -----------------------------

    def _on_state_changed(self, _event: object) -> None:
        if not self._running:
            return
        self._render_board()

    def _on_opponent_thinking(self, _event: OpponentThinkingStarted) -> None:
        if not self._running:
            return
        self._render_status()

    def _on_score_changed(self, _event: ScoreChanged) -> None:
        if not self._running:
            return
        self._render_scores()

    def _on_game_won(self, event: GameWon) -> None:
        if not self._running:
            return
        self._show_end_message(f"Winner: {event.player}")

    def _on_game_drawn(self, _event: GameDrawn) -> None:
        if not self._running:
            return
        self._show_end_message("It's a draw")

    def _on_move_rejected(self, event: MoveRejected) -> None:
        if not self._running:
            return
        self._on_input_error(event.error_msg)

    @abstractmethod
    def _render_board(self) -> None:
        pass

    def _render_status(self) -> None:
        self._render_board()

    def _render_scores(self) -> None:
        self._render_board()

    @abstractmethod
    def _show_end_message(self, message: str) -> None:
        pass

    @abstractmethod
    def _on_input_error(self, message: str) -> None:
        pass
