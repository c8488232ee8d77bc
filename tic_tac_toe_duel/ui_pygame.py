from typing import Final

import pygame

from tic_tac_toe_duel.audio import AudioFeedback
from tic_tac_toe_duel.board import BOARD_SIZE, CELL_COUNT, Cell
from tic_tac_toe_duel.events import EventBus
from tic_tac_toe_duel.game_controller import GameController, GameMode
from tic_tac_toe_duel.rules import InProgress
from tic_tac_toe_duel.ui import Ui


class PygameUi(Ui):
    TITLE: Final = "Tic-Tac-Toe Duel"
    WINDOW_SIZE: Final = 480
    PANEL_HEIGHT: Final = 90
    CELL_SIZE: Final = WINDOW_SIZE // BOARD_SIZE
    LINE_WIDTH: Final = 4
    FPS: Final = 30

    BG_COLOR: Final = (0, 0, 0)
    LINE_COLOR: Final = (127, 127, 127)
    X_COLOR: Final = (191, 63, 63)
    O_COLOR: Final = (63, 63, 191)
    WIN_COLOR: Final = (40, 90, 40)
    TEXT_COLOR: Final = (255, 255, 255)
    HINT_COLOR: Final = (150, 150, 150)

    DIFFICULTY_KEYS: Final = {pygame.K_1: "easy", pygame.K_2: "medium", pygame.K_3: "expert"}

    def __init__(self, controller: GameController, event_bus: EventBus, audio: AudioFeedback | None = None) -> None:
        super().__init__(controller, event_bus, audio)
        self._board: list[Cell] = list(self._controller.board)
        self._end_message = ""
        self._error_message = ""

    def run(self) -> None:
        pygame.init()
        self._screen = pygame.display.set_mode((self.WINDOW_SIZE, self.WINDOW_SIZE + self.PANEL_HEIGHT))
        pygame.display.set_caption(self.TITLE)

        self._font = pygame.font.SysFont(None, 96)
        self._small_font = pygame.font.SysFont(None, 36)
        self._hint_font = pygame.font.SysFont(None, 22)

        super().run()
        self._controller.start()
        self._main_loop()

    def _main_loop(self) -> None:
        clock = pygame.time.Clock()
        while self._running:
            clock.tick(self.FPS)
            self._handle_events()
            self._controller.tick()
            self._render()
        pygame.quit()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            match event.type:
                case pygame.QUIT:
                    self._stop()
                case pygame.MOUSEBUTTONDOWN:
                    self._on_click(event.pos)
                case pygame.KEYDOWN:
                    self._on_key(event.key)

    def _on_key(self, key: int) -> None:
        match key:
            case pygame.K_ESCAPE:
                self._stop()
            case pygame.K_r:
                self._restart()
            case pygame.K_s:
                self._reset_score()
            case pygame.K_m:
                self._toggle_mute()
            case pygame.K_h:
                self._set_mode(GameMode.HUMAN)
            case pygame.K_c:
                self._set_mode(GameMode.COMPUTER)
            case _ if key in self.DIFFICULTY_KEYS:
                self._set_difficulty(self.DIFFICULTY_KEYS[key])

    def _on_click(self, pos: tuple[int, int]) -> None:
        x, y = pos
        col = x // self.CELL_SIZE
        row = y // self.CELL_SIZE
        if not (0 <= row < BOARD_SIZE) or not (0 <= col < BOARD_SIZE):
            return
        self._apply_move(row * BOARD_SIZE + col)

    def _render_board(self) -> None:
        self._board = list(self._controller.board)
        self._error_message = ""
        if isinstance(self._controller.outcome, InProgress):
            self._end_message = ""

    def _show_end_message(self, msg: str) -> None:
        self._end_message = msg

    def _on_input_error(self, message: str) -> None:
        self._error_message = message

    # -----------------------------
    # Drawing
    # -----------------------------

    def _render(self) -> None:
        caption = self.TITLE
        if self._controller.opponent_thinking:
            caption = f"{self.TITLE} - thinking..."
        pygame.display.set_caption(caption)
        self._screen.fill(self.BG_COLOR)
        self._draw_winning_cells()
        self._draw_grid()
        self._draw_marks()
        self._draw_panel()
        pygame.display.flip()

    def _cell_rect(self, index: int) -> pygame.Rect:
        row, col = divmod(index, BOARD_SIZE)
        return pygame.Rect(col * self.CELL_SIZE, row * self.CELL_SIZE, self.CELL_SIZE, self.CELL_SIZE)

    def _draw_winning_cells(self) -> None:
        for index in self._controller.winning_combination or ():
            pygame.draw.rect(self._screen, self.WIN_COLOR, self._cell_rect(index))

    def _draw_grid(self) -> None:
        for i in range(1, BOARD_SIZE):
            pygame.draw.line(
                self._screen,
                self.LINE_COLOR,
                (0, i * self.CELL_SIZE),
                (self.WINDOW_SIZE, i * self.CELL_SIZE),
                self.LINE_WIDTH,
            )
            pygame.draw.line(
                self._screen,
                self.LINE_COLOR,
                (i * self.CELL_SIZE, 0),
                (i * self.CELL_SIZE, self.WINDOW_SIZE),
                self.LINE_WIDTH,
            )
        pygame.draw.line(
            self._screen,
            self.LINE_COLOR,
            (0, self.WINDOW_SIZE),
            (self.WINDOW_SIZE, self.WINDOW_SIZE),
            self.LINE_WIDTH,
        )

    def _draw_marks(self) -> None:
        for index in range(CELL_COUNT):
            value = self._board[index]
            if value is None:
                continue
            text = self._font.render(value, True, self.X_COLOR if value == "X" else self.O_COLOR)  # noqa: FBT003
            rect = text.get_rect(center=self._cell_rect(index).center)
            self._screen.blit(text, rect)

    def _draw_panel(self) -> None:
        scores = self._controller.scores
        if self._controller.mode == GameMode.COMPUTER:
            mode = f"vs {self._controller.profile.name}"
        else:
            mode = "Human vs Human"
        status = self._end_message or self._error_message or self._controller.status_message()
        lines = [
            (self._small_font, f"X: {scores['X']}   {mode}   O: {scores['O']}", self.TEXT_COLOR),
            (self._small_font, status, self.TEXT_COLOR),
            (self._hint_font, "R restart  S reset score  M mute  H/C mode  1/2/3 level", self.HINT_COLOR),
        ]
        y = self.WINDOW_SIZE + 8
        for font, text, color in lines:
            surface = font.render(text, True, color)  # noqa: FBT003
            self._screen.blit(surface, surface.get_rect(midtop=(self.WINDOW_SIZE // 2, y)))
            y += surface.get_height() + 6
