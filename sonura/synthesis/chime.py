"""In-tune confirmation chime."""

import numpy as np

from .renderer import render_tone
from .timbre import Timbre
from ..core.constants import DEFAULT_RENDER_SR

CHIME = Timbre(
    name="chime",
    waveform="sine",
    peak_gain=0.1,
    attack=0.0,
    decay=1.0,
    stagger=0.0,
    floor_gain=0.001,
    duration=1.0,
)


def render_chime(sr: int = DEFAULT_RENDER_SR) -> np.ndarray:
    """A high A rising an octave over 100 ms, fading out over one second."""
    return render_tone(880.0, CHIME, sr, end_frequency=1760.0, sweep_time=0.1)
