"""Chord symbols - Parse, spell and transpose chord names.

Parsing is best-effort: chord tokens typed by users or produced by
generators are not schema-guaranteed, so malformed input degrades to a
C chord instead of raising.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core import (
    PITCH_NAMES,
    normalize_note,
    pitch_class,
    transpose_note,
    match_interval_set,
)

ROOT_PATTERN = re.compile(r"^([A-G][#b]?)(.*)$")


@dataclass(frozen=True)
class ParsedChord:
    """A chord symbol split into its parts."""

    root: str  # Sharp spelling (e.g. "C#")
    quality: str  # Raw suffix (e.g. "m7", "sus4", "")
    bass: Optional[str] = None  # Slash bass note, sharp spelling

    @property
    def root_pc(self) -> int:
        return PITCH_NAMES.index(self.root)

    @property
    def bass_pc(self) -> Optional[int]:
        if self.bass is None:
            return None
        return PITCH_NAMES.index(self.bass)

    @property
    def symbol(self) -> str:
        """Get chord symbol (e.g., 'C#m7', 'G/B')."""
        symbol = f"{self.root}{self.quality}"
        if self.bass:
            symbol += f"/{self.bass}"
        return symbol

    @property
    def intervals(self) -> Tuple[int, ...]:
        return match_interval_set(self.quality).intervals


def parse_chord(symbol: str) -> ParsedChord:
    """
    Parse a chord symbol into root, quality and optional bass.

    Args:
        symbol: Chord symbol (e.g. "C#m7/G", "Bbmaj7", "Am")

    Returns:
        ParsedChord. Unparseable roots fall back to C with empty quality.
    """
    parts = (symbol or "").strip().split("/", 1)
    main = parts[0]
    bass = normalize_note(parts[1].strip()) if len(parts) > 1 else None

    match = ROOT_PATTERN.match(main)
    if not match:
        return ParsedChord(root="C", quality="", bass=bass)

    return ParsedChord(
        root=normalize_note(match.group(1)),
        quality=match.group(2),
        bass=bass,
    )


def transpose_chord(symbol: str, steps: int) -> str:
    """
    Transpose a chord symbol, keeping its quality text verbatim.

    Example: transpose_chord("C#m7/G", 2) -> "D#m7/A"
    """
    chord = parse_chord(symbol)
    bass = transpose_note(chord.bass, steps) if chord.bass else None
    return ParsedChord(
        root=transpose_note(chord.root, steps),
        quality=chord.quality,
        bass=bass,
    ).symbol


def chord_notes(symbol: str) -> List[str]:
    """
    Spell the pitch classes of a chord, bass first for slash chords.

    Args:
        symbol: Chord symbol

    Returns:
        Note names; a slash bass that is already a chord tone is moved
        to the front, otherwise it is added there.
    """
    chord = parse_chord(symbol)
    notes = [PITCH_NAMES[(chord.root_pc + i) % 12] for i in chord.intervals]

    if chord.bass:
        if chord.bass in notes:
            notes.remove(chord.bass)
        notes.insert(0, chord.bass)

    return notes


class ChordParser:
    """Object front end for chord symbol handling.

    Keeps a small cache of parsed symbols, since the same progression is
    usually looked up repeatedly by the fretboard and the scheduler.
    """

    def __init__(self, cache_size: int = 256):
        self.cache_size = cache_size
        self._cache = {}

    def parse(self, symbol: str) -> ParsedChord:
        chord = self._cache.get(symbol)
        if chord is None:
            chord = parse_chord(symbol)
            if len(self._cache) >= self.cache_size:
                self._cache.pop(next(iter(self._cache)))
            self._cache[symbol] = chord
        return chord

    def notes(self, symbol: str) -> List[str]:
        return chord_notes(symbol)

    def transpose(self, symbol: str, steps: int) -> str:
        return transpose_chord(symbol, steps)

    def transpose_progression(self, symbols: List[str], steps: int) -> List[str]:
        """Transpose every chord of a progression by the same interval."""
        return [transpose_chord(s, steps) for s in symbols]

    def root_pitch_class(self, symbol: str) -> int:
        return pitch_class(self.parse(symbol).root)
