"""Guitar tuner: pitch estimation and per-string tuning confirmation."""

from .core.config import TunerConfig
from .core.errors import ConfigError, InvalidFrameError
from .note_types import STANDARD_TUNING, PitchEstimate, StringProgress, TargetString, TuningStatus
from .tuner import Tuner

__all__ = [
    "Tuner",
    "TunerConfig",
    "ConfigError",
    "InvalidFrameError",
    "STANDARD_TUNING",
    "PitchEstimate",
    "StringProgress",
    "TargetString",
    "TuningStatus",
]
