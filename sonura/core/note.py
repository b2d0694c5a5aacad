"""Pitch-class arithmetic - the fundamental unit of every chord and reading."""

from typing import Union
import numpy as np

from .constants import PITCH_NAMES, FLAT_TO_SHARP, NOTE_FREQUENCIES, DEFAULT_REFERENCE_HZ

NoteLike = Union[int, str]


def normalize_note(token: str) -> str:
    """
    Normalize a note token to its sharp spelling (e.g. 'bb' -> 'A#').

    Never raises: empty or unrecognized tokens degrade to 'C'.

    Args:
        token: One or two characters, a letter plus optional '#' or 'b'

    Returns:
        Canonical note name from PITCH_NAMES
    """
    if not token:
        return "C"
    name = token[0].upper() + token[1:]
    name = FLAT_TO_SHARP.get(name, name)
    if name not in PITCH_NAMES:
        return "C"
    return name


def pitch_class(token: NoteLike) -> int:
    """Get pitch class (0-11, where 0=C) of a note name or integer."""
    if isinstance(token, (int, np.integer)):
        return int(token) % 12
    return PITCH_NAMES.index(normalize_note(token))


def note_name(pc: int) -> str:
    """Get the sharp note name of a pitch class (wraps modulo 12)."""
    return PITCH_NAMES[int(pc) % 12]


def transpose_note(note: NoteLike, steps: int) -> NoteLike:
    """
    Move a note by a number of semitones.

    Integers in give integers out, names in give names out. Negative
    results wrap into 0-11.
    """
    if isinstance(note, str):
        return note_name(pitch_class(note) + steps)
    return (int(note) + steps) % 12


def freq_to_midi(freq: float, reference_hz: float = DEFAULT_REFERENCE_HZ) -> float:
    """Continuous MIDI note number of a frequency (A4 = 69)."""
    if freq <= 0:
        return 0.0
    return 12 * float(np.log2(freq / reference_hz)) + 69


def midi_to_freq(midi: float, reference_hz: float = DEFAULT_REFERENCE_HZ) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return reference_hz * (2 ** ((midi - 69) / 12.0))


def note_frequency(note: NoteLike, octave_offset: int = 0) -> float:
    """
    Frequency of a note relative to the fourth octave.

    Args:
        note: Note name or pitch class
        octave_offset: Octaves above (positive) or below (negative) octave 4

    Returns:
        Frequency in Hz
    """
    freq = NOTE_FREQUENCIES[note_name(pitch_class(note))]
    if octave_offset:
        freq *= 2.0 ** octave_offset
    return freq
