"""Signal chain: loudness gate, pitch estimation and smoothing."""

from .pitch_estimator import PitchEstimator
from .signal_gate import SignalGate
from .smoother import FrequencySmoother

__all__ = ["PitchEstimator", "SignalGate", "FrequencySmoother"]
