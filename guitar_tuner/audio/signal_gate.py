"""Loudness gate deciding whether a frame is worth analysing."""

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class SignalGate:
    """Admit frames whose RMS level exceeds a fixed noise floor.

    The default floor (0.01) passes a plucked string picked up by a laptop
    microphone while rejecting room noise and silence.
    """

    def __init__(self, noise_floor: float = 0.01) -> None:
        self._noise_floor = noise_floor

    @property
    def noise_floor(self) -> float:
        return self._noise_floor

    @staticmethod
    def rms(frame: np.ndarray) -> float:
        """Root-mean-square level of ``frame``; 0.0 for an empty frame."""
        samples = np.asarray(frame, dtype=np.float64)
        if samples.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(samples**2)))

    def admit(self, frame: np.ndarray) -> bool:
        """True only if the frame is louder than the noise floor."""
        level = self.rms(frame)
        if level <= self._noise_floor:
            logger.debug(f"Signal too weak: rms={level:.4f} <= {self._noise_floor}")
            return False
        return True
