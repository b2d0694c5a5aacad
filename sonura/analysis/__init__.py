"""Analysis layer - Low-level signal analysis.

This layer turns raw capture buffers into readings:
- Autocorrelation pitch detection
- Note/cents mapping against a calibration
- Tuner session smoothing and in-tune feedback
"""

from .pitch import PitchDetector, PitchReading, TunerCalibration, frequency_to_note
from .tuner import TunerSession, TunerConfig, TunerFrame, ChimeDebouncer, NeedleSmoother

__all__ = [
    "PitchDetector",
    "PitchReading",
    "TunerCalibration",
    "frequency_to_note",
    "TunerSession",
    "TunerConfig",
    "TunerFrame",
    "ChimeDebouncer",
    "NeedleSmoother",
]
