"""Sonura - Tuner and chord engine for songwriting and ear training.

Architecture Layers:
    1. core/      - Pitch classes, constants, chord-quality intervals
    2. inference/ - Chord symbol parsing, spelling and transposition
    3. analysis/  - Autocorrelation pitch detection and tuner sessions
    4. fretboard/ - Guitar fingerings (open shapes, CAGED barres)
    5. synthesis/ - Tone scheduling, timbres and offline rendering
    6. input/     - Audio file loading for offline tuning
    7. output/    - WAV export and live audio devices
"""

__version__ = "0.1.0"

# Core
from .core import normalize_note, transpose_note, resolve_interval_set

# Inference layer
from .inference import ChordParser, ParsedChord, parse_chord, transpose_chord, chord_notes

# Analysis layer
from .analysis import PitchDetector, PitchReading, TunerCalibration, TunerSession

# Fretboard layer
from .fretboard import FingeringResolver, resolve_fretting

# Synthesis layer
from .synthesis import ToneScheduler, ToneEvent, OfflineRenderer

# Input layer
from .input import AudioLoader

__all__ = [
    # Core
    "normalize_note",
    "transpose_note",
    "resolve_interval_set",
    # Inference
    "ChordParser",
    "ParsedChord",
    "parse_chord",
    "transpose_chord",
    "chord_notes",
    # Analysis
    "PitchDetector",
    "PitchReading",
    "TunerCalibration",
    "TunerSession",
    # Fretboard
    "FingeringResolver",
    "resolve_fretting",
    # Synthesis
    "ToneScheduler",
    "ToneEvent",
    "OfflineRenderer",
    # Input
    "AudioLoader",
]
