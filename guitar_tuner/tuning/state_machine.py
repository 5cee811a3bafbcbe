"""Per-string tuning confirmation state machine."""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from ..core.config import TunerConfig
from ..logger import get_logger
from ..note_types import StringProgress, TargetString, TuningStatus
from ..note_utils import cents, clamp_cents, note_name

logger = get_logger(__name__)


@dataclass
class TuningSession:
    """Mutable progress of one tuning session, owned by the state machine."""

    index: int = 0
    smoothed_frequency: Optional[float] = None
    in_tolerance: bool = False
    deadline: Optional[float] = None  # Confirmation deadline, seconds
    all_tuned: bool = False

    @property
    def pending(self) -> bool:
        return self.deadline is not None


class TuningStateMachine:
    """Walk the target strings in order, confirming each after a sustained match.

    States are implicit in the session: ``deadline is None`` is Listening,
    a set deadline is PendingConfirm, ``all_tuned`` is AllTuned. The
    deadline is re-checked on every tick instead of firing a timer, and once
    it has passed the decision is made on that tick's smoothed frequency,
    never on the value seen when the deadline was armed.
    """

    def __init__(
        self,
        config: Optional[TunerConfig] = None,
        on_string_change: Optional[Callable[[], None]] = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            config: Tuner configuration, or None for defaults
            on_string_change: Called whenever the current string changes
                (confirmation or reset) so upstream smoothing memory can be
                cleared together with the session
        """
        self._config = config or TunerConfig()
        self._targets: Tuple[TargetString, ...] = tuple(self._config.targets)
        self._on_string_change = on_string_change
        self._session = TuningSession()

    @property
    def session(self) -> TuningSession:
        """A copy of the current session."""
        return replace(self._session)

    @property
    def target(self) -> TargetString:
        return self._targets[self._session.index]

    @property
    def is_complete(self) -> bool:
        return self._session.all_tuned

    def is_in_tolerance(self, frequency: Optional[float], target: TargetString) -> bool:
        """Whether ``frequency`` counts as tuned for ``target``.

        The boundary is inclusive. With ``require_note_match`` the nearest
        pitch class must also be the target's, which stops a neighbouring
        note or a harmonic from confirming the string.
        """
        deviation = cents(frequency, target.frequency)
        if deviation is None or abs(deviation) > self._config.tolerance_cents:
            return False
        if self._config.require_note_match and note_name(frequency) != target.note:
            return False
        return True

    def tick(self, smoothed_frequency: Optional[float], now: float) -> TuningStatus:
        """Advance the session by one tick.

        Args:
            smoothed_frequency: Latest smoothed frequency in Hz, None when silent
            now: Current time in seconds

        Returns:
            The status for this tick
        """
        session = self._session
        if session.all_tuned:
            return self._status(None)

        target = self.target
        session.smoothed_frequency = smoothed_frequency
        in_tolerance = self.is_in_tolerance(smoothed_frequency, target)

        if not in_tolerance:
            if session.deadline is not None:
                logger.debug(
                    f"{target.label} string left tolerance, confirmation cancelled"
                )
            session.deadline = None
            session.in_tolerance = False
            return self._status(smoothed_frequency)

        if session.deadline is None:
            session.deadline = now + self._config.confirmation_delay
            logger.debug(
                f"{target.label} string in tolerance at {smoothed_frequency:.2f}Hz, "
                f"confirming at {session.deadline:.3f}s"
            )
        session.in_tolerance = True

        if now < session.deadline:
            return self._status(smoothed_frequency)

        # Deadline reached and this tick's frequency is still in tolerance
        status = self._status(smoothed_frequency)
        self._advance()
        return replace(
            status,
            confirmed=True,
            complete=session.all_tuned,
            pending=False,
            progress=self._progress(),
        )

    def reset(self) -> None:
        """Start over from the first string, discarding all progress."""
        self._session = TuningSession()
        if self._on_string_change:
            self._on_string_change()
        logger.info("Tuning session reset")

    def current_status(self) -> TuningStatus:
        """Status for the current session without consuming a tick."""
        return self._status(self._session.smoothed_frequency)

    def _advance(self) -> None:
        session = self._session
        confirmed = self.target
        session.deadline = None
        session.in_tolerance = False
        session.smoothed_frequency = None
        if session.index < len(self._targets) - 1:
            session.index += 1
            logger.info(
                f"{confirmed.label.capitalize()} string ({confirmed.note}) tuned, "
                f"next: {self.target.label} ({self.target.note})"
            )
        else:
            session.all_tuned = True
            logger.info("All strings tuned")
        if self._on_string_change:
            self._on_string_change()

    def _progress(self) -> Tuple[StringProgress, ...]:
        session = self._session
        progress = []
        for i in range(len(self._targets)):
            if session.all_tuned or i < session.index:
                progress.append(StringProgress.TUNED)
            elif i == session.index:
                progress.append(StringProgress.CURRENT)
            else:
                progress.append(StringProgress.PENDING)
        return tuple(progress)

    def _status(self, frequency: Optional[float]) -> TuningStatus:
        session = self._session
        target = self.target
        deviation = cents(frequency, target.frequency)
        return TuningStatus(
            target=target,
            cents=deviation,
            in_tolerance=session.in_tolerance,
            confirmed=False,
            complete=session.all_tuned,
            index=session.index,
            frequency=frequency,
            note_name=note_name(frequency),
            pending=session.pending,
            display_offset=clamp_cents(deviation, self._config.max_display_cents),
            progress=self._progress(),
        )
