import random

import pygame
import pytest

from tic_tac_toe_duel.audio import AudioFeedback, Waveform
from tic_tac_toe_duel.events import (
    Event,
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
    UiClick,
)
from tic_tac_toe_duel.scheduler import Scheduler

ALL_EVENTS: tuple[type[Event], ...] = (
    MoveApplied,
    MoveRejected,
    GameWon,
    GameDrawn,
    OpponentThinkingStarted,
    GameRestarted,
    ScoreChanged,
    ProfileChanged,
    ModeChanged,
    UiClick,
)


class FakeClock:
    """Manually advanced clock for the scheduler."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class EventRecorder:
    """Collects every published event in order."""

    def __init__(self, event_bus: EventBus) -> None:
        self.events: list[Event] = []
        for event_type in ALL_EVENTS:
            event_bus.subscribe(event_type, self.events.append)

    def of_type[E: Event](self, event_type: type[E]) -> list[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        self.events.clear()


class ScriptedRandom(random.Random):
    """Random source that replays fixed values and always chooses the first option."""

    def __init__(self, values: list[float]) -> None:
        super().__init__(0)
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)

    def choice[T](self, seq: "list[T]") -> T:  # type: ignore[override]
        return seq[0]


class RecordingAudio(AudioFeedback):
    """Records requested tones instead of playing them."""

    def __init__(self, event_bus: EventBus, scheduler: Scheduler, *, muted: bool = False) -> None:
        super().__init__(event_bus, scheduler, muted=muted)
        self.tones: list[tuple[float, float, Waveform]] = []

    def play_tone(self, frequency: float, duration: float, waveform: Waveform = Waveform.SINE) -> None:
        if self.muted:
            return
        self.tones.append((frequency, duration, waveform))

    def frequencies(self) -> list[float]:
        return [tone[0] for tone in self.tones]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> Scheduler:
    return Scheduler(clock)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(event_bus: EventBus) -> EventRecorder:
    return EventRecorder(event_bus)


@pytest.fixture
def no_mixer(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(**_kwargs: object) -> None:
        raise pygame.error("No audio device")

    monkeypatch.setattr(pygame.mixer, "init", fail)
