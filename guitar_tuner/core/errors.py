"""Exceptions raised by the guitar tuner."""


class TunerError(Exception):
    """Base class for guitar tuner errors."""


class InvalidFrameError(TunerError, ValueError):
    """Raised for malformed audio input (empty frame, bad sample rate, ...)."""


class ConfigError(TunerError, ValueError):
    """Raised when a tuner configuration value is out of range."""
