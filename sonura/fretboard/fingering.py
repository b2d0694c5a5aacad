"""Guitar fingerings - Map chord symbols onto six-string fret patterns.

Common open chords come from a hand-authored table. Everything else is
played as a movable barre shape (CAGED): the open-E and open-A shapes
are slid up the neck to the chord root and the one closer to the nut
wins.

Frettings are six ints, lowest string first: -1 muted, 0 open, n fret.
"""

import warnings
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core import PITCH_NAMES, pitch_class
from ..core.constants import DISPLAY_FRETS, STANDARD_TUNING
from ..inference import ChordParser

Fretting = Tuple[int, ...]

# Common open shapes (standard tuning E A D G B e)
OPEN_CHORDS: Dict[str, Fretting] = {
    "C": (-1, 3, 2, 0, 1, 0),
    "C7": (-1, 3, 2, 3, 1, 0),
    "D": (-1, -1, 0, 2, 3, 2),
    "D7": (-1, -1, 0, 2, 1, 2),
    "Dm": (-1, -1, 0, 2, 3, 1),
    "E": (0, 2, 2, 1, 0, 0),
    "E7": (0, 2, 0, 1, 0, 0),
    "Em": (0, 2, 2, 0, 0, 0),
    "G": (3, 2, 0, 0, 0, 3),
    "G7": (3, 2, 0, 0, 0, 1),
    "A": (-1, 0, 2, 2, 2, 0),
    "A7": (-1, 0, 2, 0, 2, 0),
    "Am": (-1, 0, 2, 2, 1, 0),
    "F": (1, 3, 3, 2, 1, 1),  # Barred at the first fret
}

# E shape, root on the low E string
E_SHAPES: Dict[str, Fretting] = {
    "": (0, 2, 2, 1, 0, 0),
    "m": (0, 2, 2, 0, 0, 0),
    "7": (0, 2, 0, 1, 0, 0),
    "m7": (0, 2, 0, 0, 0, 0),
    "maj7": (0, 2, 1, 1, 0, 0),
}

# A shape, root on the A string
A_SHAPES: Dict[str, Fretting] = {
    "": (-1, 0, 2, 2, 2, 0),
    "m": (-1, 0, 2, 2, 1, 0),
    "7": (-1, 0, 2, 0, 2, 0),
    "m7": (-1, 0, 2, 0, 1, 0),
    "maj7": (-1, 0, 2, 1, 2, 0),
}

E_ROOT = pitch_class("E")
A_ROOT = pitch_class("A")


class FrettingRangeWarning(UserWarning):
    """A computed shape reaches past the displayable fret range."""


@dataclass(frozen=True)
class Barre:
    """Strings held down together by the index finger."""

    fret: int
    first_string: int
    last_string: int

    @property
    def span(self) -> int:
        return self.last_string - self.first_string + 1


@dataclass(frozen=True)
class Fingering:
    """A resolved fret pattern and how it was obtained."""

    chord: str
    frets: Fretting
    source: str  # "open", "E" or "A"
    base_fret: int = 0  # Barre offset for movable shapes

    @property
    def barre(self) -> Optional["Barre"]:
        return find_barre(self.frets)

    @property
    def max_fret(self) -> int:
        return max(self.frets)

    @property
    def in_display_range(self) -> bool:
        return self.max_fret <= DISPLAY_FRETS

    def sounding_notes(self, tuning: Tuple[str, ...] = STANDARD_TUNING) -> List[Optional[str]]:
        """Note name produced by each string (None for muted strings)."""
        notes = []
        for open_note, fret in zip(tuning, self.frets):
            if fret < 0:
                notes.append(None)
            else:
                notes.append(PITCH_NAMES[(pitch_class(open_note) + fret) % 12])
        return notes


def shape_bucket(quality: str) -> str:
    """
    Reduce a chord quality to one of the movable shape families.

    Rules, in order:
        - starts with "m" but not "maj" -> "m"
        - contains "7" -> "maj7" / "m7" by prefix, otherwise "7"
        - anything else -> "" (major shape)
    """
    bucket = ""
    if quality.startswith("m") and not quality.startswith("maj"):
        bucket = "m"
    if "7" in quality:
        if quality.startswith("maj7"):
            bucket = "maj7"
        elif quality.startswith("m7"):
            bucket = "m7"
        else:
            bucket = "7"
    return bucket


def barre_offset(root_pc: int, open_root_pc: int) -> int:
    """Frets needed to move an open shape to a new root (never 0, the open case)."""
    offset = (root_pc - open_root_pc) % 12
    if offset == 0:
        offset = 12
    return offset


def shift_shape(template: Fretting, offset: int) -> Fretting:
    return tuple(-1 if fret == -1 else fret + offset for fret in template)


def find_barre(frets: Fretting) -> Optional[Barre]:
    """
    Find the barre of a fretting: the lowest pressed fret, when it is held
    on at least two strings.
    """
    pressed = [f for f in frets if f > 0]
    if not pressed:
        return None
    lowest = min(pressed)
    strings = [i for i, f in enumerate(frets) if f == lowest]
    if len(strings) < 2:
        return None
    return Barre(fret=lowest, first_string=min(strings), last_string=max(strings))


class FingeringResolver:
    """Resolve chord symbols to playable guitar fingerings.

    Shapes other than the five buckets (13ths, add9, ...) are played with
    the major shape of their family; that is a simplification, not an
    attempt at a complete voicing.
    """

    def __init__(
        self,
        open_chords: Optional[Dict[str, Fretting]] = None,
        max_fret: int = DISPLAY_FRETS,
    ):
        self.open_chords = OPEN_CHORDS if open_chords is None else open_chords
        self.max_fret = max_fret
        self.parser = ChordParser()

    def resolve(self, symbol: str) -> Fingering:
        """
        Resolve a chord symbol.

        Args:
            symbol: Chord symbol; slash bass notes are ignored for the shape

        Returns:
            Fingering with six frets
        """
        chord = self.parser.parse(symbol)
        key = f"{chord.root}{chord.quality}"

        if key in self.open_chords:
            return Fingering(chord=key, frets=tuple(self.open_chords[key]), source="open")

        bucket = shape_bucket(chord.quality)
        e_template = E_SHAPES.get(bucket) or E_SHAPES.get(chord.quality) or E_SHAPES[""]
        a_template = A_SHAPES.get(bucket) or A_SHAPES.get(chord.quality) or A_SHAPES[""]

        offset_e = barre_offset(chord.root_pc, E_ROOT)
        offset_a = barre_offset(chord.root_pc, A_ROOT)

        if offset_e < offset_a:
            fingering = Fingering(key, shift_shape(e_template, offset_e), "E", offset_e)
        else:
            fingering = Fingering(key, shift_shape(a_template, offset_a), "A", offset_a)

        if fingering.max_fret > self.max_fret:
            warnings.warn(
                f"{symbol}: shape reaches fret {fingering.max_fret}, "
                f"beyond the {self.max_fret}-fret display",
                FrettingRangeWarning,
                stacklevel=2,
            )
        return fingering


_default_resolver = FingeringResolver()


def resolve_fretting(symbol: str) -> Fretting:
    """Six-string fret pattern for a chord symbol."""
    return _default_resolver.resolve(symbol).frets
