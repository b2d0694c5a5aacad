"""Tuner session - Frame-by-frame pitch readings with display smoothing.

The session is pull-based: whoever owns the capture callback calls
process_frame() once per captured buffer and renders the returned
TunerFrame. Nothing here schedules work on its own.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from scipy import signal

from .pitch import PitchDetector, PitchReading, TunerCalibration
from ..core.constants import (
    CHIME_CENTS,
    CHIME_DEBOUNCE_SECONDS,
    CLOSE_CENTS,
    IN_TUNE_CENTS,
    MAX_DISPLAY_CENTS,
    NEEDLE_DEGREES_PER_CENT,
    NEEDLE_REST_ANGLE,
    NEEDLE_SMOOTHING,
    PREFILTER_CUTOFF_HZ,
)


@dataclass
class TunerConfig:
    """Display and feedback settings for a tuner session.

    Attributes:
        smoothing: Fraction of the remaining distance the needle moves per frame
        rest_angle: Needle angle shown when there is no pitch
        degrees_per_cent: Needle scale
        max_cents: Clamp applied to the deviation before scaling
        chime_cents: |cents| below which the in-tune chime fires
        chime_interval: Minimum seconds between chimes
        prefilter_hz: Low-pass cutoff applied before detection (None disables)
    """

    smoothing: float = NEEDLE_SMOOTHING
    rest_angle: float = NEEDLE_REST_ANGLE
    degrees_per_cent: float = NEEDLE_DEGREES_PER_CENT
    max_cents: int = MAX_DISPLAY_CENTS
    chime_cents: int = CHIME_CENTS
    chime_interval: float = CHIME_DEBOUNCE_SECONDS
    prefilter_hz: Optional[float] = PREFILTER_CUTOFF_HZ


@dataclass(frozen=True)
class TunerFrame:
    """What the display needs for one processed frame."""

    reading: Optional[PitchReading]
    needle_angle: float
    target_angle: float
    chime: bool = False

    @property
    def has_pitch(self) -> bool:
        return self.reading is not None

    @property
    def in_tune(self) -> bool:
        return self.reading is not None and abs(self.reading.cents) < IN_TUNE_CENTS

    @property
    def status(self) -> str:
        """'silent', 'in_tune', 'close' or 'off'."""
        if self.reading is None:
            return "silent"
        if self.in_tune:
            return "in_tune"
        if abs(self.reading.cents) < CLOSE_CENTS:
            return "close"
        return "off"


class ChimeDebouncer:
    """Rate-limits the in-tune chime on a monotonic clock."""

    def __init__(
        self,
        interval: float = CHIME_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = interval
        self.clock = clock
        self._last: Optional[float] = None
        self._lock = threading.Lock()

    def try_fire(self, now: Optional[float] = None) -> bool:
        """Return True (and record the time) if a chime may sound now."""
        if now is None:
            now = self.clock()
        with self._lock:
            if self._last is not None and now - self._last < self.interval:
                return False
            self._last = now
            return True

    def reset(self) -> None:
        with self._lock:
            self._last = None


class NeedleSmoother:
    """Exponential smoothing of the needle toward the latest deviation."""

    def __init__(self, config: TunerConfig):
        self.config = config
        self.angle = config.rest_angle

    def target_for(self, reading: Optional[PitchReading]) -> float:
        if reading is None:
            return self.config.rest_angle
        cents = max(-self.config.max_cents, min(self.config.max_cents, reading.cents))
        return cents * self.config.degrees_per_cent

    def update(self, reading: Optional[PitchReading]) -> float:
        target = self.target_for(reading)
        self.angle += (target - self.angle) * self.config.smoothing
        return target

    def reset(self) -> None:
        self.angle = self.config.rest_angle


class TunerSession:
    """A listening session: calibration, detector, smoothing and chime state.

    Each session owns its calibration, so several sessions (or tests)
    never interfere with each other.
    """

    def __init__(
        self,
        detector: Optional[PitchDetector] = None,
        calibration: Optional[TunerCalibration] = None,
        config: Optional[TunerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        on_chime: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize TunerSession.

        Args:
            detector: Pitch detector (default: 2048-sample window)
            calibration: Starting calibration (default: A4=440, no transposition)
            config: Display/feedback settings
            clock: Monotonic time source for the chime debounce
            on_chime: Called whenever the in-tune chime fires
        """
        self.detector = detector or PitchDetector()
        self.config = config or TunerConfig()
        self.on_chime = on_chime
        self._calibration = calibration or TunerCalibration()
        self._calibration_lock = threading.Lock()

        self.chime = ChimeDebouncer(self.config.chime_interval, clock)
        self.needle = NeedleSmoother(self.config)

        self.listening = False
        self.last_reading: Optional[PitchReading] = None

        self._filter_sr: Optional[int] = None
        self._sos = None
        self._zi = None

    # --- Calibration ---

    @property
    def calibration(self) -> TunerCalibration:
        """Snapshot of the current calibration."""
        with self._calibration_lock:
            return self._calibration

    def calibrate(
        self,
        reference_hz: Optional[float] = None,
        transposition: Optional[int] = None,
    ) -> TunerCalibration:
        """Set reference pitch and/or transposition; returns the new record."""
        with self._calibration_lock:
            calibration = self._calibration
            if reference_hz is not None:
                calibration = calibration.with_reference(reference_hz)
            if transposition is not None:
                calibration = calibration.with_transposition(transposition)
            self._calibration = calibration
            return calibration

    def adjust(self, reference_delta: float = 0.0, transposition_delta: int = 0) -> TunerCalibration:
        """Nudge the calibration, as the +/- buttons of a tuner do."""
        with self._calibration_lock:
            calibration = self._calibration
            if reference_delta:
                calibration = calibration.adjust_reference(reference_delta)
            if transposition_delta:
                calibration = calibration.adjust_transposition(transposition_delta)
            self._calibration = calibration
            return calibration

    # --- Lifecycle ---

    def start(self) -> None:
        self.listening = True

    def stop(self) -> None:
        """Stop listening and return every display value to neutral."""
        self.listening = False
        self.last_reading = None
        self.needle.reset()
        self._zi = None

    @property
    def needle_angle(self) -> float:
        return self.needle.angle

    # --- Processing ---

    def process_frame(self, buffer: np.ndarray, sr: int, contiguous: bool = True) -> TunerFrame:
        """
        Analyse one captured buffer.

        Args:
            buffer: Samples in [-1, 1]
            sr: Sample rate
            contiguous: False when this buffer does not start where the
                previous one ended (overlapping or gapped frames); the
                pre-filter then starts from fresh state

        Returns:
            TunerFrame for display

        Raises:
            RuntimeError: If the session is not listening
        """
        if not self.listening:
            raise RuntimeError("Tuner session is not listening; call start() first")

        calibration = self.calibration
        if not contiguous:
            self._zi = None
        samples = self._prefilter(np.asarray(buffer, dtype=np.float64).ravel(), sr)
        reading = self.detector.process(samples, sr, calibration)
        target = self.needle.update(reading)

        fired = False
        if reading is not None and abs(reading.cents) < self.config.chime_cents:
            fired = self.chime.try_fire()
            if fired and self.on_chime is not None:
                self.on_chime()

        self.last_reading = reading
        return TunerFrame(
            reading=reading,
            needle_angle=self.needle.angle,
            target_angle=target,
            chime=fired,
        )

    def _prefilter(self, samples: np.ndarray, sr: int) -> np.ndarray:
        """Low-pass to suppress harmonics; filter state carries across contiguous frames."""
        cutoff = self.config.prefilter_hz
        if not cutoff or cutoff >= sr / 2:
            return samples

        if self._sos is None or self._filter_sr != sr:
            self._sos = signal.butter(2, cutoff, btype="low", fs=sr, output="sos")
            self._filter_sr = sr
            self._zi = None
        if samples.size == 0:
            return samples
        if self._zi is None:
            self._zi = signal.sosfilt_zi(self._sos) * samples[0]

        filtered, self._zi = signal.sosfilt(self._sos, samples, zi=self._zi)
        return filtered
