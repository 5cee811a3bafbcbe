"""Offline frame sources that stand in for a live capture driver."""

from __future__ import annotations
from typing import Iterator, Optional, Tuple

import numpy as np
import soundfile as sf

from ..core.errors import InvalidFrameError
from ..core.interfaces import IFrameProvider
from ..logger import get_logger

logger = get_logger(__name__)


class ArrayFrameProvider(IFrameProvider):
    """Slices an in-memory signal into fixed-size frames, one per tick."""

    def __init__(
        self,
        samples: np.ndarray,
        sample_rate: int,
        frame_size: int = 4096,
        hop_size: Optional[int] = None,
        gain: float = 1.0,
    ):
        """Initialize the provider.

        Args:
            samples: Mono samples, or (samples, channels) which is averaged to mono
            sample_rate: Sample rate in Hz
            frame_size: Samples per frame handed to the tuner
            hop_size: Samples between consecutive ticks (defaults to ``frame_size``)
            gain: Linear gain applied to every frame
        """
        if sample_rate <= 0:
            raise InvalidFrameError(f"Sample rate must be positive, got {sample_rate}")
        if frame_size <= 0 or (hop_size is not None and hop_size <= 0):
            raise InvalidFrameError("frame_size and hop_size must be positive")

        data = np.asarray(samples, dtype=np.float64)
        if data.ndim == 2:
            data = data.mean(axis=1)
        self._samples = data * gain if gain != 1.0 else data
        self._sample_rate = int(sample_rate)
        self._frame_size = frame_size
        self._hop_size = hop_size or frame_size

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def tick_interval(self) -> float:
        """Seconds between consecutive frames."""
        return self._hop_size / self._sample_rate

    def frames(self) -> Iterator[np.ndarray]:
        for _, frame in self.ticks():
            yield frame

    def ticks(self) -> Iterator[Tuple[float, np.ndarray]]:
        """Yield ``(timestamp, frame)`` pairs; the timestamp is the end of the frame."""
        total = self._samples.size
        for start in range(0, total - self._frame_size + 1, self._hop_size):
            end = start + self._frame_size
            yield end / self._sample_rate, self._samples[start:end]


class WavFileFrameProvider(ArrayFrameProvider):
    """Provides frames by reading an audio file with soundfile."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = 4096,
        hop_size: Optional[int] = None,
        gain: float = 1.0,
        tick_ms: Optional[float] = None,
    ):
        """Initialize the provider.

        Args:
            file_path: Path of any format libsndfile reads (WAV, FLAC, OGG, ...)
            frame_size: Samples per frame handed to the tuner
            hop_size: Samples between ticks; ignored when ``tick_ms`` is given
            gain: Linear gain applied to every frame
            tick_ms: Tick interval in milliseconds, converted with the file's sample rate
        """
        self._file_path = file_path
        data, sample_rate = sf.read(file_path, dtype="float32", always_2d=True)
        logger.info(
            f"Loaded {file_path}: {data.shape[0]} samples, {data.shape[1]} channel(s), "
            f"{sample_rate} Hz"
        )
        if tick_ms is not None:
            hop_size = max(1, int(round(sample_rate * tick_ms / 1000.0)))
        super().__init__(data, sample_rate, frame_size, hop_size, gain)

    @property
    def file_path(self) -> str:
        return self._file_path
