"""Pitch detection - Autocorrelation fundamental-frequency estimation.

One call analyses one window of samples:

    1. RMS gate against the noise floor
    2. Trim leading/trailing low-level samples
    3. Autocorrelation over the trimmed window
    4. Skip the initial descending region, take the highest later peak
    5. Parabolic interpolation around that peak
    6. f0 = sample_rate / period
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np
from scipy import signal

from ..core import PITCH_NAMES, freq_to_midi
from ..core.constants import (
    DEFAULT_REFERENCE_HZ,
    DEFAULT_WINDOW_SIZE,
    SILENCE_RMS_THRESHOLD,
    TRIM_THRESHOLD,
)


@dataclass(frozen=True)
class TunerCalibration:
    """Reference pitch and display transposition for a tuner session.

    Frozen so a detection pass always sees a consistent pair; updates
    produce a new record.
    """

    reference_hz: float = DEFAULT_REFERENCE_HZ  # A4
    transposition_semitones: int = 0

    def __post_init__(self):
        if self.reference_hz <= 0:
            raise ValueError(f"Reference frequency must be positive, got {self.reference_hz}")

    def with_reference(self, reference_hz: float) -> "TunerCalibration":
        return replace(self, reference_hz=float(reference_hz))

    def with_transposition(self, semitones: int) -> "TunerCalibration":
        return replace(self, transposition_semitones=int(semitones))

    def adjust_reference(self, delta_hz: float) -> "TunerCalibration":
        return self.with_reference(self.reference_hz + delta_hz)

    def adjust_transposition(self, delta: int) -> "TunerCalibration":
        return self.with_transposition(self.transposition_semitones + delta)


@dataclass(frozen=True)
class PitchReading:
    """A single analysis frame mapped onto the tempered scale."""

    frequency: float  # Hz
    note: str  # Pitch-class name after transposition
    cents: int  # Deviation from nearest semitone, about [-50, 50)
    midi: int  # Nearest note number before transposition

    @property
    def octave(self) -> int:
        """Octave of the nearest note (A4 -> 4)."""
        return self.midi // 12 - 1


def frequency_to_note(
    freq: float,
    calibration: Optional[TunerCalibration] = None,
) -> PitchReading:
    """
    Map a frequency to a note name and cents deviation.

    Args:
        freq: Frequency in Hz (must be positive)
        calibration: Reference pitch and transposition (default A4=440, none)

    Returns:
        PitchReading
    """
    if freq <= 0:
        raise ValueError(f"Frequency must be positive, got {freq}")
    calibration = calibration or TunerCalibration()

    note_num = freq_to_midi(freq, calibration.reference_hz)
    note_int = int(math.floor(note_num + 0.5))
    display = note_int - calibration.transposition_semitones
    cents = int(math.floor((note_num - note_int) * 100))

    return PitchReading(
        frequency=float(freq),
        note=PITCH_NAMES[display % 12],
        cents=cents,
        midi=note_int,
    )


class PitchDetector:
    """Autocorrelation pitch detector over fixed-size windows.

    The window copy goes into a buffer allocated once at construction,
    since detect() runs at the capture rate. Trimming only takes views of
    it; the autocorrelation result is the one per-call allocation.
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        silence_threshold: float = SILENCE_RMS_THRESHOLD,
        trim_threshold: float = TRIM_THRESHOLD,
    ):
        """
        Initialize PitchDetector.

        Args:
            window_size: Samples analysed per call (longer buffers use the newest samples)
            silence_threshold: RMS below which a window counts as silence
            trim_threshold: Absolute amplitude used to trim window edges
        """
        if window_size < 4:
            raise ValueError(f"window_size must be at least 4, got {window_size}")
        self.window_size = window_size
        self.silence_threshold = silence_threshold
        self.trim_threshold = trim_threshold

        self._window = np.zeros(window_size, dtype=np.float64)

    def detect(self, buffer: np.ndarray, sr: int) -> Optional[float]:
        """
        Estimate the fundamental frequency of one window.

        Args:
            buffer: Samples in [-1, 1]
            sr: Sample rate

        Returns:
            Frequency in Hz, or None when there is no pitch (silence,
            noise, or no usable autocorrelation peak)
        """
        samples = np.asarray(buffer).ravel()
        n = min(samples.size, self.window_size)
        if n < 4:
            return None

        window = self._window[:n]
        window[:] = samples[samples.size - n:]

        rms = math.sqrt(float(np.dot(window, window)) / n)
        if rms < self.silence_threshold:
            return None

        segment = self._trim(window)
        m = segment.size
        if m < 4:
            return None

        corr = signal.correlate(segment, segment, mode="full", method="direct")[m - 1:]

        rising = np.flatnonzero(corr[:-1] <= corr[1:])
        if rising.size == 0:
            return None
        start = int(rising[0])

        peak = start + int(np.argmax(corr[start:]))
        if peak <= 0 or corr[peak] <= 0:
            return None
        period = self._refine(corr, peak)
        if period <= 0:
            return None

        return sr / period

    def _trim(self, window: np.ndarray) -> np.ndarray:
        """Cut low-level samples off both ends, scanning half the window from each side."""
        n = window.size
        half = n // 2
        magnitude = np.abs(window)

        head = np.flatnonzero(magnitude[:half] > self.trim_threshold)
        first = int(head[0]) if head.size else 0

        tail_start = n - half + 1
        tail = np.flatnonzero(magnitude[tail_start:] > self.trim_threshold)
        end = tail_start + int(tail[-1]) + 1 if tail.size else n

        return window[first:end]

    @staticmethod
    def _refine(corr: np.ndarray, peak: int) -> float:
        """Parabolic interpolation of the peak lag."""
        if peak < 1 or peak + 1 >= corr.size:
            return float(peak)
        x1, x2, x3 = corr[peak - 1], corr[peak], corr[peak + 1]
        a = (x1 + x3 - 2 * x2) / 2
        b = (x3 - x1) / 2
        if a == 0:
            return float(peak)
        return peak - b / (2 * a)

    def process(
        self,
        buffer: np.ndarray,
        sr: int,
        calibration: Optional[TunerCalibration] = None,
    ) -> Optional[PitchReading]:
        """
        Detect and map one buffer to a reading.

        Returns:
            PitchReading, or None when no pitch was found
        """
        freq = self.detect(buffer, sr)
        if freq is None:
            return None
        return frequency_to_note(freq, calibration)
