"""Tuning progress across the target strings."""

from .state_machine import TuningSession, TuningStateMachine

__all__ = ["TuningSession", "TuningStateMachine"]
