"""Utility functions for working with musical notes, frequencies and cents."""

from typing import List, Optional

import numpy as np

# Standard reference: A4 = 440Hz
A4_FREQUENCY = 440.0

NOTE_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]


def _is_valid_frequency(freq: Optional[float]) -> bool:
    return freq is not None and bool(np.isfinite(freq)) and freq > 0


def cents(detected: Optional[float], target: Optional[float]) -> Optional[float]:
    """Signed deviation of ``detected`` from ``target`` in cents.

    Args:
        detected: Detected frequency in Hz
        target: Target frequency in Hz

    Returns:
        ``1200 * log2(detected / target)``, or None when either frequency is
        missing or not positive. None means "no deviation information" and
        must never be read as "in tune".
    """
    if not _is_valid_frequency(detected) or not _is_valid_frequency(target):
        return None
    return float(1200.0 * np.log2(detected / target))


def semitones_from_a4(freq: float) -> int:
    """Nearest whole number of semitones between ``freq`` and A4."""
    return int(round(12 * np.log2(freq / A4_FREQUENCY)))


def note_name(freq: Optional[float]) -> Optional[str]:
    """Pitch class (no octave) of the equal-tempered note closest to ``freq``.

    Examples:
        >>> note_name(82.41)
        'E'
        >>> note_name(440.0)
        'A'
    """
    if not _is_valid_frequency(freq):
        return None
    offset = semitones_from_a4(freq)
    # +9 moves the reference from A to C; +48 keeps the index positive
    return NOTE_NAMES[(offset + 9 + 48) % 12]


def note_name_with_octave(freq: Optional[float]) -> Optional[str]:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Middle C is C4 (261.63 Hz) and octave numbers change between B and C,
    so the low E string is 'E2' and A4 is 440 Hz.
    """
    if not _is_valid_frequency(freq):
        return None
    midi_number = 69 + semitones_from_a4(freq)  # A4 = 69 in MIDI
    octave = (midi_number // 12) - 1
    return f"{NOTE_NAMES[midi_number % 12]}{octave}"


def frequency_for_note(note: str, octave: int) -> float:
    """Equal-tempered frequency of ``note`` in ``octave`` (SPN).

    Raises:
        ValueError: If ``note`` is not one of NOTE_NAMES
    """
    if note not in NOTE_NAMES:
        raise ValueError(f"Unknown note name: {note!r}")
    semitones = NOTE_NAMES.index(note) - 9 + (octave - 4) * 12
    return A4_FREQUENCY * (2.0 ** (semitones / 12.0))


def clamp_cents(value: Optional[float], limit: float) -> float:
    """Clamp a deviation for display; missing deviation maps to centre (0.0)."""
    if value is None:
        return 0.0
    return float(max(-limit, min(limit, value)))
