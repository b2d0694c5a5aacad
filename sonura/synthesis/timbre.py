"""Instrument timbre presets for chord playback."""

from dataclasses import dataclass
from typing import Dict, Optional

from ..core.constants import TONE_DURATION


@dataclass(frozen=True)
class Timbre:
    """Oscillator, envelope and strum settings for one instrument.

    Attributes:
        name: Preset name
        waveform: 'sine', 'triangle' or 'sawtooth'
        peak_gain: Gain reached at the end of the attack
        attack: Linear attack time in seconds
        decay: Time (from note start) at which the exponential decay reaches floor_gain
        floor_gain: Gain at the end of the decay
        stagger: Delay between successive chord tones in seconds
        duration: Hard stop after note start, whatever the envelope is doing
        filter_cutoff: Resonant low-pass cutoff in Hz (None for no filter)
        filter_q: Low-pass resonance
    """

    name: str
    waveform: str
    peak_gain: float
    attack: float
    decay: float
    stagger: float
    floor_gain: float = 0.01
    duration: float = TONE_DURATION
    filter_cutoff: Optional[float] = None
    filter_q: float = 0.707


PIANO = Timbre(
    name="piano",
    waveform="triangle",
    peak_gain=0.4,
    attack=0.02,
    decay=2.5,
    stagger=0.01,
)

GUITAR = Timbre(
    name="guitar",
    waveform="sawtooth",
    peak_gain=0.3,
    attack=0.05,
    decay=3.0,
    stagger=0.05,
    filter_cutoff=800.0,
    filter_q=5.0,
)

TIMBRES: Dict[str, Timbre] = {
    "piano": PIANO,
    "guitar": GUITAR,
}


def get_timbre(timbre) -> Timbre:
    """Look up a preset by name (Timbre instances pass through)."""
    if isinstance(timbre, Timbre):
        return timbre
    try:
        return TIMBRES[str(timbre).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown instrument: {timbre}. Supported: {sorted(TIMBRES)}"
        ) from None
