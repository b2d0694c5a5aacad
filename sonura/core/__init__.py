"""Core types and constants for Sonura."""

from .note import (
    normalize_note,
    pitch_class,
    note_name,
    transpose_note,
    freq_to_midi,
    midi_to_freq,
    note_frequency,
)
from .intervals import (
    CHORD_INTERVALS,
    DegradedMatchWarning,
    IntervalMatch,
    match_interval_set,
    resolve_interval_set,
)
from .constants import (
    PITCH_NAMES,
    DEFAULT_REFERENCE_HZ,
    DEFAULT_WINDOW_SIZE,
    STANDARD_TUNING,
)

__all__ = [
    "normalize_note",
    "pitch_class",
    "note_name",
    "transpose_note",
    "freq_to_midi",
    "midi_to_freq",
    "note_frequency",
    "CHORD_INTERVALS",
    "DegradedMatchWarning",
    "IntervalMatch",
    "match_interval_set",
    "resolve_interval_set",
    "PITCH_NAMES",
    "DEFAULT_REFERENCE_HZ",
    "DEFAULT_WINDOW_SIZE",
    "STANDARD_TUNING",
]
