from typing import ClassVar

import pygame
import pytest
from conftest import FakeClock, RecordingAudio

from tic_tac_toe_duel.audio import MAX_AMPLITUDE, START_GAIN, AudioFeedback, Waveform, synthesize
from tic_tac_toe_duel.events import EventBus, GameDrawn, GameWon, MoveApplied, UiClick
from tic_tac_toe_duel.scheduler import Scheduler


class FakeSound:
    played: ClassVar[list[bytes]] = []

    def __init__(self, buffer: bytes) -> None:
        self._buffer = buffer

    def play(self) -> None:
        FakeSound.played.append(self._buffer)


@pytest.fixture
def stereo_mixer(monkeypatch: pytest.MonkeyPatch) -> list[bytes]:
    monkeypatch.setattr(pygame.mixer, "init", lambda **_kwargs: None)
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (44100, -16, 2))
    monkeypatch.setattr(pygame.mixer, "Sound", FakeSound)
    FakeSound.played = []
    return FakeSound.played


class TestSynthesize:
    """Tone generation."""

    def test_sample_count_follows_duration(self) -> None:
        assert len(synthesize(1000, 0.05, Waveform.SQUARE, sample_rate=1000)) == 50

    @pytest.mark.parametrize("waveform", list(Waveform))
    def test_samples_stay_within_start_gain(self, waveform: Waveform) -> None:
        samples = synthesize(440, 0.1, waveform, sample_rate=8000)
        assert max(abs(sample) for sample in samples) <= START_GAIN * MAX_AMPLITUDE

    def test_tone_fades_out(self) -> None:
        samples = synthesize(100, 0.5, Waveform.SQUARE, sample_rate=1000)
        assert abs(samples[0]) > abs(samples[-1])


@pytest.mark.usefixtures("no_mixer")
class TestAudioFeedback:
    """Tones chosen for game events."""

    def test_missing_device_disables_audio(self, event_bus: EventBus, scheduler: Scheduler) -> None:
        audio = AudioFeedback(event_bus, scheduler)
        assert not audio.available
        # Silently skipped.
        audio.play_tone(440, 0.1)

    def test_move_tones(self, event_bus: EventBus, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler)

        event_bus.publish(MoveApplied("X", 0))
        event_bus.publish(MoveApplied("O", 4, by_computer=True))

        assert audio.tones == [(800, 0.1, Waveform.SQUARE), (600, 0.15, Waveform.TRIANGLE)]

    def test_win_plays_a_rising_arpeggio(self, event_bus: EventBus, clock: FakeClock, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler)

        event_bus.publish(GameWon("X", (0, 1, 2)))
        assert [tone[0] for tone in audio.tones] == [523]

        clock.advance(0.2)
        scheduler.run_pending()
        clock.advance(0.2)
        scheduler.run_pending()

        assert [tone[0] for tone in audio.tones] == [523, 659, 784]

    def test_draw_plays_a_falling_pair(self, event_bus: EventBus, clock: FakeClock, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler)

        event_bus.publish(GameDrawn())
        clock.advance(0.15)
        scheduler.run_pending()

        assert audio.tones == [(400, 0.3, Waveform.SAWTOOTH), (300, 0.3, Waveform.SAWTOOTH)]

    def test_ui_click(self, event_bus: EventBus, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler)
        event_bus.publish(UiClick())
        assert audio.tones == [(1000, 0.05, Waveform.SQUARE)]

    def test_muted_audio_stays_silent(self, event_bus: EventBus, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler, muted=True)
        event_bus.publish(MoveApplied("X", 0))
        assert audio.tones == []

    def test_toggle_mute_clicks_when_unmuting(self, event_bus: EventBus, scheduler: Scheduler) -> None:
        audio = RecordingAudio(event_bus, scheduler)

        assert audio.toggle_mute()
        assert audio.tones == []
        assert not audio.toggle_mute()
        assert audio.tones == [(1000, 0.05, Waveform.SQUARE)]


class TestMixerPlayback:
    """Buffers handed to pygame."""

    def test_stereo_mixer_gets_duplicated_samples(
        self,
        event_bus: EventBus,
        scheduler: Scheduler,
        stereo_mixer: list[bytes],
    ) -> None:
        audio = AudioFeedback(event_bus, scheduler)
        assert audio.available

        audio.play_tone(1000, 0.05, Waveform.SQUARE)

        mono = synthesize(1000, 0.05, Waveform.SQUARE)
        assert len(stereo_mixer) == 1
        assert len(stereo_mixer[0]) == len(mono) * 2 * mono.itemsize

    def test_muted_audio_plays_nothing(
        self,
        event_bus: EventBus,
        scheduler: Scheduler,
        stereo_mixer: list[bytes],
    ) -> None:
        AudioFeedback(event_bus, scheduler, muted=True)
        event_bus.publish(GameWon("O", (2, 4, 6)))
        assert stereo_mixer == []
