import numpy as np
import pytest
import soundfile as sf

SAMPLE_RATE = 44100
FRAME_SIZE = 4096


def sine_frame(frequency, amplitude=0.5, sample_rate=SAMPLE_RATE, size=FRAME_SIZE, phase=0.0):
    t = np.arange(size) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t + phase)


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def make_sine():
    return sine_frame


@pytest.fixture
def clock():
    return FakeClock()


def tone(frequency, seconds, amplitude=0.5):
    return sine_frame(frequency, amplitude, size=int(seconds * SAMPLE_RATE))


@pytest.fixture
def two_strings_wav(tmp_path):
    """Low E for two seconds, a short gap, then A for three seconds."""
    path = tmp_path / "two_strings.wav"
    signal = np.concatenate([tone(82.41, 2.0), np.zeros(SAMPLE_RATE // 5), tone(110.0, 3.0)])
    sf.write(str(path), signal, SAMPLE_RATE)
    return path
