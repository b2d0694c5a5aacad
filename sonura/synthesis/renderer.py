"""Offline rendering of tone events to sample buffers."""

from typing import List, Optional, Sequence

import numpy as np
from scipy import signal

from .scheduler import AudioSink, ToneEvent
from .timbre import Timbre
from ..core.constants import DEFAULT_RENDER_SR


def oscillator(waveform: str, phase: np.ndarray) -> np.ndarray:
    """Evaluate a waveform at the given phases (radians)."""
    if waveform == "sine":
        return np.sin(phase)
    if waveform == "triangle":
        return signal.sawtooth(phase, width=0.5)
    if waveform == "sawtooth":
        return signal.sawtooth(phase)
    raise ValueError(f"Unknown waveform: {waveform}")


def envelope(
    t: np.ndarray,
    peak: float,
    attack: float,
    decay: float,
    floor: float,
) -> np.ndarray:
    """
    Linear attack to `peak`, then exponential decay reaching `floor` at
    time `decay`; holds `floor` afterwards.
    """
    env = np.full_like(t, floor)
    if attack > 0:
        rising = t < attack
        env[rising] = peak * t[rising] / attack

    falling = (t >= attack) & (t < decay)
    span = max(decay - attack, 1e-9)
    env[falling] = peak * (floor / peak) ** ((t[falling] - attack) / span)
    return env


def lowpass_biquad(cutoff: float, q: float, sr: int):
    """Resonant second-order low-pass coefficients (b, a)."""
    w0 = 2 * np.pi * cutoff / sr
    alpha = np.sin(w0) / (2 * q)
    cos_w0 = np.cos(w0)
    b = np.array([(1 - cos_w0) / 2, 1 - cos_w0, (1 - cos_w0) / 2])
    a = np.array([1 + alpha, -2 * cos_w0, 1 - alpha])
    return b / a[0], a / a[0]


def render_tone(
    frequency: float,
    timbre: Timbre,
    sr: int = DEFAULT_RENDER_SR,
    end_frequency: Optional[float] = None,
    sweep_time: float = 0.0,
) -> np.ndarray:
    """
    Render a single tone for its timbre's full duration.

    Args:
        frequency: Start frequency in Hz
        timbre: Instrument preset
        sr: Sample rate
        end_frequency: If set, glide exponentially to this frequency
        sweep_time: Glide duration in seconds

    Returns:
        Mono float array
    """
    n = int(round(timbre.duration * sr))
    t = np.arange(n) / sr

    if end_frequency and sweep_time > 0:
        ratio = end_frequency / frequency
        inst = np.where(
            t < sweep_time,
            frequency * ratio ** (t / sweep_time),
            end_frequency,
        )
        phase = 2 * np.pi * np.cumsum(inst) / sr
    else:
        phase = 2 * np.pi * frequency * t

    tone = oscillator(timbre.waveform, phase)

    if timbre.filter_cutoff and timbre.filter_cutoff < sr / 2:
        b, a = lowpass_biquad(timbre.filter_cutoff, timbre.filter_q, sr)
        tone = signal.lfilter(b, a, tone)

    env = envelope(t, timbre.peak_gain, timbre.attack, timbre.decay, timbre.floor_gain)
    return (tone * env).astype(np.float32)


class OfflineRenderer(AudioSink):
    """Mixes submitted events onto a timeline buffer."""

    def __init__(self, sr: int = DEFAULT_RENDER_SR):
        self.sr = sr
        self.pending: List[ToneEvent] = []

    def submit(self, events: List[ToneEvent]) -> None:
        self.pending.extend(events)

    def render(self, events: Sequence[ToneEvent]) -> np.ndarray:
        """
        Mix events into one buffer starting at time 0.

        Returns:
            Mono float32 array long enough for the last event to stop
        """
        if not events:
            return np.zeros(0, dtype=np.float32)
        if min(e.start for e in events) < 0:
            raise ValueError("Cannot render events that start before time 0")

        length = int(np.ceil(max(e.stop for e in events) * self.sr))
        mix = np.zeros(length, dtype=np.float32)
        for event in events:
            tone = render_tone(event.frequency, event.timbre, self.sr)
            offset = int(round(event.start * self.sr))
            end = min(offset + tone.size, length)
            mix[offset:end] += tone[: end - offset]
        return mix

    def bounce(self) -> np.ndarray:
        """Render and clear everything submitted so far."""
        mix = self.render(self.pending)
        self.pending = []
        return mix
