"""Replay an audio file through the tuner, one tick per frame."""

import json
from typing import Dict, List, Optional, TextIO

from ..core.config import TunerConfig
from ..logger import get_logger
from ..note_types import TuningStatus
from ..services.frame_providers import ArrayFrameProvider
from ..tuner import Tuner

logger = get_logger(__name__)


def format_status(timestamp: float, status: TuningStatus) -> str:
    """One human-readable line per tick."""
    if status.complete and not status.confirmed:
        return f"[{timestamp:6.2f}s] all strings tuned"

    target = f"{status.target.label:>6} ({status.target.note})"
    if status.frequency is None:
        reading = "listening..."
    else:
        reading = f"{status.frequency:7.2f}Hz {status.note_name or '-':<2} {status.cents:+6.1f}c"

    flags = []
    if status.in_tolerance:
        flags.append("in tune")
    if status.pending:
        flags.append("confirming")
    if status.confirmed:
        flags.append("CONFIRMED")
    return f"[{timestamp:6.2f}s] {target} {reading} {' '.join(flags)}".rstrip()


def replay(
    provider: ArrayFrameProvider,
    config: Optional[TunerConfig] = None,
    out: Optional[TextIO] = None,
    as_json: bool = False,
) -> Dict[str, object]:
    """Drive a tuner from ``provider`` using the frame timestamps as the clock.

    Args:
        provider: Source of frames
        config: Tuner configuration, or None for defaults
        out: Stream for per-tick output, or None for no output
        as_json: Write JSON lines instead of formatted text

    Returns:
        Summary with the number of ticks, confirmed strings and completion flag
    """
    tuner = Tuner(config)
    confirmed: List[str] = []
    tuner.events.on_string_confirmed(
        lambda target, status: confirmed.append(target.label)
    )

    ticks = 0
    for timestamp, frame in provider.ticks():
        status = tuner.process_tick(frame, provider.sample_rate, now=timestamp)
        ticks += 1
        if out is not None:
            if as_json:
                out.write(json.dumps({"time": round(timestamp, 4), **status.to_dict()}) + "\n")
            else:
                out.write(format_status(timestamp, status) + "\n")

    summary = {
        "ticks": ticks,
        "confirmed": confirmed,
        "complete": tuner.status.complete,
    }
    logger.info(
        f"Replay finished: {ticks} ticks, {len(confirmed)} string(s) confirmed"
    )
    return summary
