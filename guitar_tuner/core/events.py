"""Event system for guitar tuner components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TuningEventType(Enum):
    """Event types emitted by the tuner."""

    STRING_CONFIRMED = auto()
    SESSION_COMPLETE = auto()
    RESET = auto()


class EventEmitter:
    """Minimal synchronous event emitter."""

    def __init__(self):
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and does not stop the others or the
        tick that emitted the event.
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}", exc_info=True)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class TuningEvents:
    """Event emitter specifically for tuning progress events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_string_confirmed(self, callback: Callable) -> None:
        """Register ``callback(target, status)`` for each confirmed string."""
        self._emitter.on(TuningEventType.STRING_CONFIRMED, callback)

    def on_session_complete(self, callback: Callable) -> None:
        """Register ``callback(status)`` for when the last string is confirmed."""
        self._emitter.on(TuningEventType.SESSION_COMPLETE, callback)

    def on_reset(self, callback: Callable) -> None:
        """Register ``callback()`` for explicit resets."""
        self._emitter.on(TuningEventType.RESET, callback)

    def emit_string_confirmed(self, target, status) -> None:
        self._emitter.emit(TuningEventType.STRING_CONFIRMED, target, status)

    def emit_session_complete(self, status) -> None:
        self._emitter.emit(TuningEventType.SESSION_COMPLETE, status)

    def emit_reset(self) -> None:
        self._emitter.emit(TuningEventType.RESET)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
