"""Fundamental frequency estimation for single plucked strings."""

from __future__ import annotations
from typing import Optional, Tuple

import numpy as np

from ..core.config import TunerConfig
from ..core.errors import InvalidFrameError
from ..core.interfaces import IPitchEstimator
from ..logger import get_logger
from ..note_types import PitchEstimate
from .signal_gate import SignalGate

logger = get_logger(__name__)


def prepare_frame(frame, sample_rate) -> np.ndarray:
    """Validate a frame and return it as a 1-D float64 array.

    2-D input is treated as (samples, channels) and averaged down to mono.

    Raises:
        InvalidFrameError: If the frame or sample rate cannot be analysed
    """
    if sample_rate is None or not np.isfinite(sample_rate) or sample_rate <= 0:
        raise InvalidFrameError(f"Sample rate must be positive, got {sample_rate!r}")

    try:
        samples = np.asarray(frame, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidFrameError(f"Frame is not numeric audio data: {e}") from e

    if samples.ndim == 2:
        samples = samples.mean(axis=1)
    elif samples.ndim != 1:
        raise InvalidFrameError(
            f"Frame must be 1-D (mono) or 2-D (samples, channels), got {samples.ndim}-D"
        )
    if samples.size == 0:
        raise InvalidFrameError("Frame must contain at least one sample")
    if not np.all(np.isfinite(samples)):
        raise InvalidFrameError("Frame contains NaN or infinite samples")
    return samples


def _parabolic_offset(left: float, centre: float, right: float) -> float:
    """Vertex offset (-0.5..0.5) of the parabola through three equally spaced points."""
    denom = left - 2.0 * centre + right
    if denom >= 0:
        # Not a local maximum; keep the integer position
        return 0.0
    offset = 0.5 * (left - right) / denom
    return float(np.clip(offset, -0.5, 0.5))


def normalized_autocorrelation(samples: np.ndarray) -> np.ndarray:
    """NCC for lags 0..N//2.

    ``ncc[L] = sum(x[i] * x[i+L]) / sqrt(sum(x[i]^2) * sum(x[i+L]^2))`` where
    both energy sums run over the overlapping part only.
    """
    n = samples.size
    max_lag = n // 2

    # Linear (not circular) autocorrelation through a zero-padded FFT
    spectrum = np.fft.rfft(samples, 2 * n)
    acf = np.fft.irfft(spectrum * np.conj(spectrum), 2 * n)[: max_lag + 1]

    energy = np.concatenate(([0.0], np.cumsum(samples * samples)))
    lags = np.arange(max_lag + 1)
    head = energy[n - lags]
    tail = energy[n] - energy[lags]
    denom = np.sqrt(head * tail)

    ncc = np.zeros(max_lag + 1)
    np.divide(acf, denom, out=ncc, where=denom > 0)
    return ncc


class PitchEstimator(IPitchEstimator):
    """Estimate the fundamental of a frame by normalized autocorrelation.

    The lag with the highest NCC inside the band's lag range is chosen after
    skipping the lobe around lag zero. ``min_confidence`` is the main guard against noise and
    harmonics: raising it lowers octave errors but makes a decaying string
    drop out sooner. When the NCC is mediocre (between
    ``fft_min_confidence`` and ``min_confidence``) the estimator falls back
    to the interpolated FFT magnitude peak, restricted to the same band.
    """

    def __init__(self, config: Optional[TunerConfig] = None) -> None:
        self._config = config or TunerConfig()
        self._gate = SignalGate(self._config.noise_floor)

    @property
    def gate(self) -> SignalGate:
        return self._gate

    def estimate(self, frame, sample_rate: int) -> Optional[float]:
        """Return the fundamental frequency of ``frame`` in Hz, or None.

        Raises:
            InvalidFrameError: For empty frames or a non-positive sample rate
        """
        return self.analyze(frame, sample_rate).frequency

    def analyze(self, frame, sample_rate: int) -> PitchEstimate:
        """Like ``estimate`` but also reports confidence, level and the method used."""
        samples = prepare_frame(frame, sample_rate)
        level = self._gate.rms(samples)
        if not self._gate.admit(samples):
            return PitchEstimate(None, 0.0, level, "gated")

        # DC offset would otherwise dominate the correlation
        samples = samples - samples.mean()

        lag, confidence = self._best_lag(samples, sample_rate)
        cfg = self._config

        if lag is not None and confidence >= cfg.min_confidence:
            frequency = sample_rate / lag
            if self._in_band(frequency):
                logger.debug(
                    f"NCC pitch {frequency:.2f}Hz (lag={lag:.2f}, conf={confidence:.3f}, rms={level:.4f})"
                )
                return PitchEstimate(float(frequency), confidence, level, "ncc")
            logger.debug(f"NCC pitch {frequency:.1f}Hz outside band, ignoring")
            return PitchEstimate(None, confidence, level, "none")

        if cfg.use_fft_fallback and confidence >= cfg.fft_min_confidence:
            frequency = self._fft_peak(samples, sample_rate)
            if frequency is not None:
                logger.debug(
                    f"FFT fallback pitch {frequency:.2f}Hz (NCC conf={confidence:.3f})"
                )
                return PitchEstimate(frequency, confidence, level, "fft")

        logger.debug(f"No reliable pitch (NCC conf={confidence:.3f})")
        return PitchEstimate(None, confidence, level, "none")

    def _in_band(self, frequency: float) -> bool:
        return self._config.min_frequency <= frequency <= self._config.max_frequency

    def _best_lag(self, samples: np.ndarray, sample_rate: float) -> Tuple[Optional[float], float]:
        """Return (refined lag in samples, NCC at that lag), or (None, 0.0).

        The argmax is taken over the lags of the frequency band only, and it
        must be a local maximum with a neighbour on both sides. A frame too
        short to hold a whole period peaks at the window edge and is
        rejected rather than reported as the edge frequency.
        """
        ncc = normalized_autocorrelation(samples)
        max_lag = ncc.size - 1
        cfg = self._config

        # Skip the main lobe around lag zero, where every low note correlates
        non_positive = np.nonzero(ncc[1:] <= 0)[0]
        if non_positive.size == 0:
            return None, 0.0
        lobe_end = max(cfg.min_lag, int(non_positive[0]) + 1)

        band_start = max(cfg.min_lag, int(np.floor(sample_rate / cfg.max_frequency)))
        start = max(band_start, lobe_end)
        stop = min(max_lag, int(np.ceil(sample_rate / cfg.min_frequency)))
        if start > stop:
            return None, 0.0

        best = start + int(np.argmax(ncc[start : stop + 1]))
        if ncc[best] <= 0 or not self._is_peak(ncc, best):
            return None, 0.0

        # Sub-multiples below the band are still checked, so a tone above
        # the band is recognised and rejected instead of read as a harmonic
        best = self._octave_guard(ncc, best, lobe_end)
        confidence = float(min(ncc[best], 1.0))

        if self._is_peak(ncc, best):
            refined = best + _parabolic_offset(ncc[best - 1], ncc[best], ncc[best + 1])
        else:
            refined = float(best)
        return refined, confidence

    @staticmethod
    def _is_peak(ncc: np.ndarray, lag: int) -> bool:
        if lag < 2 or lag + 1 >= ncc.size:
            return False
        return ncc[lag - 1] <= ncc[lag] >= ncc[lag + 1]

    def _octave_guard(self, ncc: np.ndarray, best: int, start: int) -> int:
        """Prefer the shortest sub-multiple of ``best`` that correlates nearly as well.

        Periodic signals correlate at every multiple of their period, so the
        raw argmax can land on 2x or 3x the true period.
        """
        threshold = ncc[best] * self._config.octave_tolerance
        chosen = best
        for divisor in range(2, best // start + 1):
            centre = int(round(best / divisor))
            lo = max(start, centre - 1)
            hi = min(ncc.size - 1, centre + 1)
            if lo > hi:
                continue
            candidate = lo + int(np.argmax(ncc[lo : hi + 1]))
            if ncc[candidate] >= threshold and candidate < chosen:
                chosen = candidate
        if chosen != best:
            logger.debug(f"Octave guard moved lag {best} -> {chosen}")
        return chosen

    def _fft_peak(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        """Dominant in-band frequency from a Hann-windowed, zero-padded FFT.

        Frames shorter than two periods of ``min_frequency`` are refused: the
        window smears their low bins into a peak at the band edge.
        """
        if samples.size < 2.0 * sample_rate / self._config.min_frequency:
            return None
        window = np.hanning(samples.size)
        n_fft = 4 * samples.size
        magnitude = np.abs(np.fft.rfft(samples * window, n=n_fft))
        freqs = np.fft.rfftfreq(n_fft, 1.0 / sample_rate)

        in_band = np.nonzero(
            (freqs >= self._config.min_frequency) & (freqs <= self._config.max_frequency)
        )[0]
        if in_band.size == 0:
            return None

        peak = int(in_band[np.argmax(magnitude[in_band])])
        if magnitude[peak] <= 0:
            return None
        if 0 < peak < magnitude.size - 1:
            peak_pos = peak + _parabolic_offset(
                magnitude[peak - 1], magnitude[peak], magnitude[peak + 1]
            )
        else:
            peak_pos = float(peak)

        frequency = float(peak_pos * sample_rate / n_fft)
        return frequency if self._in_band(frequency) else None
