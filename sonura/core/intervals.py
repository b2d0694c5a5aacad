"""Chord-quality interval sets.

Qualities are resolved by an ordered list of rules, evaluated first to last:

    1. exact   - the quality is a key of CHORD_INTERVALS
    2. prefix  - the longest non-empty key that starts the quality
                 ("maj7#11" -> "maj7", "madd11" -> "m")
    3. default - major triad

Anything but an exact match is reported with a DegradedMatchWarning.
"""

import warnings
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Intervals in semitones from root
CHORD_INTERVALS: Dict[str, Tuple[int, ...]] = {
    # Triads
    "": (0, 4, 7),
    "m": (0, 3, 7),
    "min": (0, 3, 7),
    "-": (0, 3, 7),
    # Sevenths
    "7": (0, 4, 7, 10),
    "m7": (0, 3, 7, 10),
    "maj7": (0, 4, 7, 11),
    "M7": (0, 4, 7, 11),
    "dim7": (0, 3, 6, 9),
    "m7b5": (0, 3, 6, 10),
    # Suspended & add
    "sus2": (0, 2, 7),
    "sus4": (0, 5, 7),
    "7sus4": (0, 5, 7, 10),
    "add9": (0, 4, 7, 14),
    "madd9": (0, 3, 7, 14),
    # Extended
    "6": (0, 4, 7, 9),
    "m6": (0, 3, 7, 9),
    "9": (0, 4, 7, 10, 14),
    "m9": (0, 3, 7, 10, 14),
    "maj9": (0, 4, 7, 11, 14),
    "11": (0, 4, 7, 10, 14, 17),
    "13": (0, 4, 7, 10, 14, 21),
    # Altered
    "dim": (0, 3, 6),
    "aug": (0, 4, 8),
    "+": (0, 4, 8),
    # Power chord
    "5": (0, 7),
}

MAJOR_TRIAD = CHORD_INTERVALS[""]


class DegradedMatchWarning(UserWarning):
    """A chord quality was not in the table and was approximated."""


@dataclass(frozen=True)
class IntervalMatch:
    """Result of resolving a quality: which rule fired and what it produced."""

    rule: str  # "exact", "prefix" or "default"
    key: Optional[str]  # Table key used (None for default)
    intervals: Tuple[int, ...]

    @property
    def degraded(self) -> bool:
        return self.rule != "exact"


def _exact_rule(quality: str) -> Optional[IntervalMatch]:
    if quality in CHORD_INTERVALS:
        return IntervalMatch("exact", quality, CHORD_INTERVALS[quality])
    return None


def _prefix_rule(quality: str) -> Optional[IntervalMatch]:
    # Longest first; ties broken alphabetically so the result never depends on dict order
    candidates = sorted(
        (key for key in CHORD_INTERVALS if key and quality.startswith(key)),
        key=lambda key: (-len(key), key),
    )
    if candidates:
        return IntervalMatch("prefix", candidates[0], CHORD_INTERVALS[candidates[0]])
    return None


def _default_rule(quality: str) -> Optional[IntervalMatch]:
    return IntervalMatch("default", None, MAJOR_TRIAD)


MATCH_RULES = (_exact_rule, _prefix_rule, _default_rule)


def match_interval_set(quality: str) -> IntervalMatch:
    """
    Resolve a chord quality suffix through the ordered rules.

    Args:
        quality: Raw suffix after the root (e.g. "m7", "sus4", "")

    Returns:
        IntervalMatch describing the rule that fired
    """
    quality = quality or ""
    for rule in MATCH_RULES:
        match = rule(quality)
        if match is not None:
            break

    if match.degraded:
        warnings.warn(
            f"Unknown chord quality {quality!r}, using {match.rule} match "
            f"{match.key!r} -> {list(match.intervals)}",
            DegradedMatchWarning,
            stacklevel=2,
        )
    return match


def resolve_interval_set(quality: str) -> Tuple[int, ...]:
    """Semitone offsets from root for a chord quality."""
    return match_interval_set(quality).intervals
