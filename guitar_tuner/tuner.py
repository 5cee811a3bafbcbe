"""The tuner facade: one audio frame in, one tuning status out."""

from __future__ import annotations
import time
from typing import Callable, Optional

from .audio.pitch_estimator import PitchEstimator, prepare_frame
from .audio.smoother import FrequencySmoother
from .core.config import TunerConfig
from .core.events import TuningEvents
from .core.interfaces import IPitchEstimator
from .logger import get_logger
from .note_types import TuningStatus
from .tuning.state_machine import TuningSession, TuningStateMachine

logger = get_logger(__name__)


class Tuner:
    """Run the full pipeline (gate, estimate, smooth, judge) once per tick.

    The host calls ``process_tick`` at a fixed interval with the latest
    frame. Everything happens synchronously inside that call; there are no
    timers or threads, so a fake clock makes the tuner fully deterministic.
    """

    def __init__(
        self,
        config: Optional[TunerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        estimator: Optional[IPitchEstimator] = None,
    ) -> None:
        """Initialize the tuner.

        Args:
            config: Tuner configuration, or None for defaults
            clock: Time source in seconds, used when a tick has no timestamp
            estimator: Pitch estimator, or None for the autocorrelation one
        """
        self._config = config or TunerConfig()
        self._clock = clock
        self._estimator = estimator or PitchEstimator(self._config)
        self._smoother = FrequencySmoother(
            smoothing_factor=self._config.smoothing_factor,
            jump_smoothing_factor=self._config.jump_smoothing_factor,
            jump_threshold=self._config.jump_threshold,
        )
        self._machine = TuningStateMachine(
            self._config, on_string_change=self._smoother.reset
        )
        self.events = TuningEvents()
        self._status: TuningStatus = self._machine.current_status()

        logger.info(
            f"Tuner initialized: tolerance={self._config.tolerance_cents} cents, "
            f"confirmation={self._config.confirmation_delay * 1000:.0f}ms, "
            f"band={self._config.min_frequency}-{self._config.max_frequency}Hz"
        )

    @property
    def config(self) -> TunerConfig:
        return self._config

    @property
    def status(self) -> TuningStatus:
        """The status emitted by the most recent tick."""
        return self._status

    @property
    def session(self) -> TuningSession:
        return self._machine.session

    @property
    def smoothed_frequency(self) -> Optional[float]:
        return self._smoother.value

    def process_tick(self, frame, sample_rate: int, now: Optional[float] = None) -> TuningStatus:
        """Process one audio frame.

        Args:
            frame: Mono samples (or a (samples, channels) array)
            sample_rate: Sample rate of ``frame`` in Hz
            now: Timestamp in seconds, or None to read the tuner's clock

        Returns:
            The tuning status for this tick

        Raises:
            InvalidFrameError: If the frame is empty or the sample rate is not positive
        """
        if now is None:
            now = self._clock()

        samples = prepare_frame(frame, sample_rate)
        if self._machine.is_complete:
            self._status = self._machine.tick(None, now)
            return self._status

        raw = self._estimator.estimate(samples, sample_rate)
        smoothed = self._smoother.update(raw)
        status = self._machine.tick(smoothed, now)
        self._status = status

        if status.confirmed:
            self.events.emit_string_confirmed(status.target, status)
            if status.complete:
                self.events.emit_session_complete(status)
        return status

    def reset(self) -> None:
        """Clear all session state and start again from the first string."""
        self._machine.reset()
        self._status = self._machine.current_status()
        self.events.emit_reset()
