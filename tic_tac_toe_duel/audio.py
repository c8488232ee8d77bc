import logging
import math
from array import array
from enum import StrEnum
from typing import Final

import pygame

from tic_tac_toe_duel.events import EventBus, GameDrawn, GameWon, MoveApplied, UiClick
from tic_tac_toe_duel.scheduler import Scheduler

logger = logging.getLogger(__name__)

SAMPLE_RATE: Final = 44100
START_GAIN: Final = 0.3
END_GAIN: Final = 0.01
MAX_AMPLITUDE: Final = 32767


class Waveform(StrEnum):
    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    SAWTOOTH = "sawtooth"


def synthesize(
    frequency: float,
    duration: float,
    waveform: Waveform = Waveform.SINE,
    sample_rate: int = SAMPLE_RATE,
) -> array:
    """Render a mono 16-bit tone whose gain decays exponentially from START_GAIN to END_GAIN."""
    count = max(1, int(sample_rate * duration))
    samples = array("h")
    decay = math.log(END_GAIN / START_GAIN)
    for i in range(count):
        phase = (frequency * i / sample_rate) % 1.0
        match waveform:
            case Waveform.SINE:
                value = math.sin(2 * math.pi * phase)
            case Waveform.SQUARE:
                value = 1.0 if phase < 0.5 else -1.0
            case Waveform.TRIANGLE:
                value = 4 * phase - 1 if phase < 0.5 else 3 - 4 * phase
            case Waveform.SAWTOOTH:
                value = 2 * phase - 1
        gain = START_GAIN * math.exp(decay * i / count)
        samples.append(int(value * gain * MAX_AMPLITUDE))
    return samples


class AudioFeedback:
    """Plays short tones in reaction to game events.

    Optional: when muted, or when no audio device can be opened, every sound is skipped.
    """

    def __init__(self, event_bus: EventBus, scheduler: Scheduler, *, muted: bool = False) -> None:
        self._scheduler = scheduler
        self._muted = muted
        self._channels = 1
        self._available = self._init_mixer()

        event_bus.subscribe(MoveApplied, self._on_move_applied)
        event_bus.subscribe(GameWon, self._on_game_won)
        event_bus.subscribe(GameDrawn, self._on_game_drawn)
        event_bus.subscribe(UiClick, self._on_ui_click)

    @property
    def muted(self) -> bool:  # noqa: D102
        return self._muted

    @property
    def available(self) -> bool:  # noqa: D102
        return self._available

    def toggle_mute(self) -> bool:
        """Flip the mute flag and return the new value."""
        self._muted = not self._muted
        if not self._muted:
            self.play_tone(1000, 0.05, Waveform.SQUARE)
        return self._muted

    def play_tone(self, frequency: float, duration: float, waveform: Waveform = Waveform.SINE) -> None:  # noqa: D102
        if self._muted or not self._available:
            return
        samples = synthesize(frequency, duration, waveform)
        if self._channels == 2:  # noqa: PLR2004
            stereo = array("h")
            for sample in samples:
                stereo.extend((sample, sample))
            samples = stereo
        try:
            pygame.mixer.Sound(buffer=samples.tobytes()).play()
        except pygame.error as e:
            logger.warning("Failed to play tone: %s", e)

    def _init_mixer(self) -> bool:
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            logger.warning("Audio disabled: %s", e)
            return False

        init = pygame.mixer.get_init()
        if init is None:
            logger.warning("Audio disabled: mixer did not initialize")
            return False
        _, _, channels = init
        self._channels = channels
        return True

    def _play_later(self, delay: float, frequency: float, duration: float, waveform: Waveform = Waveform.SINE) -> None:
        self._scheduler.call_later(delay, lambda: self.play_tone(frequency, duration, waveform))

    def _on_move_applied(self, event: MoveApplied) -> None:
        if event.by_computer:
            self.play_tone(600, 0.15, Waveform.TRIANGLE)
        else:
            self.play_tone(800, 0.1, Waveform.SQUARE)

    def _on_game_won(self, _event: GameWon) -> None:
        self.play_tone(523, 0.2)
        self._play_later(0.2, 659, 0.2)
        self._play_later(0.4, 784, 0.4)

    def _on_game_drawn(self, _event: GameDrawn) -> None:
        self.play_tone(400, 0.3, Waveform.SAWTOOTH)
        self._play_later(0.15, 300, 0.3, Waveform.SAWTOOTH)

    def _on_ui_click(self, _event: UiClick) -> None:
        self.play_tone(1000, 0.05, Waveform.SQUARE)
