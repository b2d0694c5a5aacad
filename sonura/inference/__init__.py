"""Inference layer - Chord symbol understanding.

Pipeline: chord symbol → ParsedChord → [note list, transposition]
"""

from .chords import (
    ChordParser,
    ParsedChord,
    parse_chord,
    transpose_chord,
    chord_notes,
)

__all__ = [
    "ChordParser",
    "ParsedChord",
    "parse_chord",
    "transpose_chord",
    "chord_notes",
]
