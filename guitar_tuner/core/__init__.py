"""Core components for the guitar tuner."""

# Import interfaces and shared types for easier access
from .config import ConfigManager, TunerConfig
from .errors import ConfigError, InvalidFrameError, TunerError
from .interfaces import IFrameProvider, IPitchEstimator

__all__ = [
    "ConfigManager",
    "TunerConfig",
    "ConfigError",
    "InvalidFrameError",
    "TunerError",
    "IFrameProvider",
    "IPitchEstimator",
]
