# ruff: noqa: T201

import time
from typing import Final

from tic_tac_toe_duel.board import BOARD_SIZE, CELL_COUNT
from tic_tac_toe_duel.game_controller import GameMode
from tic_tac_toe_duel.rules import InProgress
from tic_tac_toe_duel.ui import Ui


class TerminalUi(Ui):
    POLL_INTERVAL: Final = 0.05
    HELP: Final = (
        f"Commands: 1-{CELL_COUNT} play a cell, r restart, s reset score, m mute, "
        "mode human|computer, level easy|medium|expert, help, exit"
    )

    def run(self) -> None:
        super().run()
        print(self.HELP, flush=True)
        self._controller.start()
        self._run_scheduled()
        while self._running:
            self._ask_for_command()
            self._get_input()
            self._run_scheduled()
        print("Terminal UI stopped", flush=True)

    def _ask_for_command(self) -> None:
        if isinstance(self._controller.outcome, InProgress):
            print(f"Player {self._controller.current_player}'s move (1-{CELL_COUNT}): ", end="", flush=True)
        else:
            print("Game over. Type r to play again: ", end="", flush=True)

    def _get_input(self) -> None:
        try:
            input_str = input()
        except (KeyboardInterrupt, EOFError):
            self._stop()
            return

        match input_str.strip().lower().split():
            case []:
                return
            case ["exit"]:
                self._stop()
            case ["help"]:
                print(self.HELP, flush=True)
            case ["r"]:
                self._restart()
            case ["s"]:
                self._reset_score()
            case ["m"]:
                muted = self._toggle_mute()
                print("No audio" if muted is None else ("Muted" if muted else "Unmuted"), flush=True)
            case ["mode", mode] if mode in GameMode:
                self._set_mode(GameMode(mode))
            case ["level", key]:
                try:
                    self._set_difficulty(key)
                except ValueError as e:
                    self._on_input_error(str(e))
            case [number] if number.isdigit():
                board_position = int(number)
                if not (1 <= board_position <= CELL_COUNT):
                    self._on_input_error(f"Not between 1 and {CELL_COUNT}")
                    return
                self._apply_move(board_position - 1)
            case _:
                self._on_input_error(f"Unknown command: {input_str.strip()}")

    def _run_scheduled(self) -> None:
        while self._running and self._controller.has_scheduled_work():
            self._controller.tick()
            if self._controller.has_scheduled_work():
                time.sleep(self.POLL_INTERVAL)

    def _render_board(self) -> None:
        rows = []
        for r, cells in enumerate(self._controller.board.rows()):
            start = r * BOARD_SIZE
            row = " | ".join(value or str(start + i + 1) for i, value in enumerate(cells))
            rows.append(f" {row} ")

        separator = "\n-----------\n"
        output = separator.join(rows)
        print(f"\n{output}\n", flush=True)
        self._render_scores()

    def _render_status(self) -> None:
        print(self._controller.status_message(), flush=True)

    def _render_scores(self) -> None:
        scores = self._controller.scores
        if self._controller.mode == GameMode.COMPUTER:
            opponent = f"vs {self._controller.profile.name} ({self._controller.computer_symbol})"
        else:
            opponent = "Human vs Human"
        print(f"X: {scores['X']}  O: {scores['O']}  |  {opponent}", flush=True)

    def _show_end_message(self, msg: str) -> None:
        print(f"{msg}", flush=True)

    def _on_input_error(self, message: str) -> None:
        if not self._running:
            return
        print(message, flush=True)
