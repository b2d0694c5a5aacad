"""Synthesis layer - Chord playback.

Pipeline: chord symbol → ToneScheduler → [ToneEvent] → AudioSink
"""

from .timbre import Timbre, PIANO, GUITAR, TIMBRES, get_timbre
from .scheduler import ToneScheduler, ToneEvent, AudioSink
from .renderer import OfflineRenderer, render_tone, envelope
from .chime import render_chime, CHIME

__all__ = [
    "Timbre",
    "PIANO",
    "GUITAR",
    "TIMBRES",
    "get_timbre",
    "ToneScheduler",
    "ToneEvent",
    "AudioSink",
    "OfflineRenderer",
    "render_tone",
    "envelope",
    "render_chime",
    "CHIME",
]
