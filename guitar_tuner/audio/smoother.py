"""Jump-aware exponential smoothing of raw pitch estimates."""

from typing import Optional

from ..logger import get_logger

logger = get_logger(__name__)


class FrequencySmoother:
    """Low-pass filter successive pitch estimates into a stable working frequency.

    A change larger than ``jump_threshold`` (relative to the current value)
    is treated as a new note and tracked with ``jump_smoothing_factor``
    instead of ``smoothing_factor``. A missing estimate clears the memory so
    a silence gap never leaks into the next note.
    """

    def __init__(
        self,
        smoothing_factor: float = 0.3,
        jump_smoothing_factor: float = 0.5,
        jump_threshold: float = 0.1,
    ) -> None:
        self._alpha = smoothing_factor
        self._jump_alpha = jump_smoothing_factor
        self._jump_threshold = jump_threshold
        self._value: Optional[float] = None

    @property
    def value(self) -> Optional[float]:
        """The current smoothed frequency, or None after silence/reset."""
        return self._value

    def smooth(self, previous: Optional[float], raw: float) -> float:
        """Pure smoothing step: combine ``previous`` with a new ``raw`` estimate."""
        if previous is None:
            return raw
        delta = raw - previous
        alpha = self._jump_alpha if abs(delta) > previous * self._jump_threshold else self._alpha
        return previous + delta * alpha

    def update(self, raw: Optional[float]) -> Optional[float]:
        """Feed one estimate (None for "no pitch") and return the new smoothed value."""
        if raw is None:
            if self._value is not None:
                logger.debug("No pitch, clearing smoothed frequency")
            self._value = None
            return None
        self._value = self.smooth(self._value, raw)
        return self._value

    def reset(self) -> None:
        self._value = None
