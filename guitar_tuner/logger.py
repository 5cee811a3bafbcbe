"""Centralized lazy-loading logger access for the guitar tuner."""
import logging
from typing import Dict

# Module-level cache for loggers
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a lazily initialized logger with the given name.

    Args:
        name: The full module name (e.g., 'guitar_tuner.tuning.state_machine')

    Returns:
        A logger instance; levels and handlers are applied by
        ``logging_config.setup_logging``
    """
    if name not in _logger_cache:
        _logger_cache[name] = logging.getLogger(name)
    return _logger_cache[name]
