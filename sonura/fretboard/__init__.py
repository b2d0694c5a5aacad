"""Fretboard layer - Chord symbols to guitar fingerings."""

from .fingering import (
    OPEN_CHORDS,
    E_SHAPES,
    A_SHAPES,
    Barre,
    Fingering,
    FingeringResolver,
    FrettingRangeWarning,
    find_barre,
    resolve_fretting,
    shape_bucket,
)
from .diagram import render_diagram

__all__ = [
    "OPEN_CHORDS",
    "E_SHAPES",
    "A_SHAPES",
    "Barre",
    "Fingering",
    "FingeringResolver",
    "FrettingRangeWarning",
    "find_barre",
    "resolve_fretting",
    "shape_bucket",
    "render_diagram",
]
