"""Defines the core interfaces for the guitar tuner."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterator, Optional

import numpy as np


class IPitchEstimator(ABC):
    """Interface for pitch estimation algorithms."""

    @abstractmethod
    def estimate(self, frame: np.ndarray, sample_rate: int) -> Optional[float]:
        """Return the fundamental frequency of ``frame`` in Hz, or None."""
        pass


class IFrameProvider(ABC):
    """Interface for sources that deliver one audio frame per tick."""

    @abstractmethod
    def frames(self) -> Iterator[np.ndarray]:
        """Yield mono float frames in order."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the frames."""
        pass
