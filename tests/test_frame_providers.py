"""Tests for offline frame sources and file replay."""

import numpy as np
import pytest

from guitar_tuner.cli.replay import format_status, replay
from guitar_tuner.core.config import TunerConfig
from guitar_tuner.core.errors import InvalidFrameError
from guitar_tuner.services.frame_providers import ArrayFrameProvider, WavFileFrameProvider

from conftest import SAMPLE_RATE


class TestArrayFrameProvider:
    def test_ticks_and_timestamps(self):
        provider = ArrayFrameProvider(np.zeros(SAMPLE_RATE), SAMPLE_RATE, frame_size=4096, hop_size=4410)
        ticks = list(provider.ticks())
        assert len(ticks) == (SAMPLE_RATE - 4096) // 4410 + 1
        assert all(frame.shape == (4096,) for _, frame in ticks)
        assert ticks[0][0] == pytest.approx(4096 / SAMPLE_RATE)
        assert ticks[1][0] - ticks[0][0] == pytest.approx(0.1)
        assert provider.tick_interval == pytest.approx(0.1)

    def test_stereo_is_downmixed_and_gain_applied(self):
        stereo = np.stack([np.full(100, 0.2), np.full(100, 0.4)], axis=1)
        provider = ArrayFrameProvider(stereo, 1000, frame_size=50, gain=2.0)
        frames = list(provider.frames())
        assert len(frames) == 2
        assert np.allclose(frames[0], 0.6)

    def test_short_signal_yields_nothing(self):
        provider = ArrayFrameProvider(np.zeros(100), SAMPLE_RATE, frame_size=4096)
        assert list(provider.frames()) == []

    def test_invalid_arguments(self):
        with pytest.raises(InvalidFrameError):
            ArrayFrameProvider(np.zeros(100), 0)
        with pytest.raises(InvalidFrameError):
            ArrayFrameProvider(np.zeros(100), SAMPLE_RATE, frame_size=0)


class TestWavReplay:
    def test_wav_provider_reads_file(self, two_strings_wav):
        provider = WavFileFrameProvider(str(two_strings_wav), frame_size=4096, tick_ms=100)
        assert provider.sample_rate == SAMPLE_RATE
        assert provider.tick_interval == pytest.approx(0.1)
        assert provider.file_path == str(two_strings_wav)

    def test_replay_confirms_both_strings(self, two_strings_wav):
        provider = WavFileFrameProvider(str(two_strings_wav), frame_size=4096, tick_ms=100)
        summary = replay(provider, TunerConfig(tolerance_cents=15.0))
        assert summary["confirmed"] == ["sixth", "fifth"]
        assert summary["complete"] is False
        assert summary["ticks"] > 40


def test_format_status_lines():
    from guitar_tuner.tuning.state_machine import TuningStateMachine

    machine = TuningStateMachine(TunerConfig(confirmation_delay=0.0))
    listening = format_status(0.0, machine.tick(None, 0.0))
    assert "listening" in listening
    confirmed = format_status(0.1, machine.tick(82.41, 0.1))
    assert "CONFIRMED" in confirmed
    assert "sixth" in confirmed
