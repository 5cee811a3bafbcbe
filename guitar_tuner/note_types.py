"""Type definitions for the guitar tuner."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TargetString:
    """One string of the fixed tuning sequence."""

    note: str  # Pitch class, e.g. 'E'
    frequency: float  # Target frequency in Hz
    string_number: int  # Guitar string number (6 is the thickest)
    label: str  # Display label, e.g. 'sixth'

    @property
    def ordinal(self) -> int:
        """Position in the tuning sequence, 1 (low E) to 6 (high E)."""
        return 7 - self.string_number

    def __str__(self):
        return f"{self.note}{self.string_number} ({self.frequency:.2f}Hz)"


# Standard tuning, tuned in this order: low E, A, D, G, B, high E
STANDARD_TUNING: Tuple[TargetString, ...] = (
    TargetString("E", 82.41, 6, "sixth"),
    TargetString("A", 110.00, 5, "fifth"),
    TargetString("D", 146.83, 4, "fourth"),
    TargetString("G", 196.00, 3, "third"),
    TargetString("B", 246.94, 2, "second"),
    TargetString("E", 329.63, 1, "first"),
)


@dataclass(frozen=True)
class PitchEstimate:
    """Diagnostic result of a single pitch analysis."""

    frequency: Optional[float]  # None means "no pitch"
    confidence: float  # Best normalized correlation (0-1)
    rms: float  # Frame loudness
    method: str  # 'ncc', 'fft', 'gated' or 'none'

    @property
    def has_pitch(self) -> bool:
        return self.frequency is not None


class StringProgress(str, Enum):
    """Per-string progress shown by a host UI."""

    TUNED = "tuned"
    CURRENT = "current"
    PENDING = "pending"


@dataclass(frozen=True)
class TuningStatus:
    """Everything a host needs to render one tick of the tuner."""

    target: TargetString
    cents: Optional[float]
    in_tolerance: bool
    confirmed: bool  # A string was confirmed on this tick
    complete: bool  # All six strings are tuned
    index: int = 0
    frequency: Optional[float] = None  # Smoothed frequency
    note_name: Optional[str] = None
    pending: bool = False  # Confirmation deadline is armed
    display_offset: float = 0.0  # Cents clamped for a needle display
    progress: Tuple[StringProgress, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "target": {
                "note": self.target.note,
                "frequency": self.target.frequency,
                "string_number": self.target.string_number,
                "ordinal": self.target.ordinal,
                "label": self.target.label,
            },
            "index": self.index,
            "frequency": self.frequency,
            "note_name": self.note_name,
            "cents": self.cents,
            "display_offset": self.display_offset,
            "in_tolerance": self.in_tolerance,
            "pending": self.pending,
            "confirmed": self.confirmed,
            "complete": self.complete,
            "progress": [p.value for p in self.progress],
        }
