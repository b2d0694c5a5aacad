"""Tone scheduling - Turn a chord into timed oscillator events.

The scheduler only decides what sounds when. Producing samples is the
job of an AudioSink (the offline renderer, or a live output device).
Events are never retracted once handed to a sink; each lasts at most
its timbre's duration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .timbre import Timbre, get_timbre
from ..core import note_frequency, note_name, pitch_class
from ..inference import parse_chord

ChordInput = Union[str, Sequence[str]]


@dataclass(frozen=True)
class ToneEvent:
    """One oscillator note of a played chord."""

    pitch_class: int
    octave_offset: int  # Relative to octave 4
    start: float  # Seconds on the output clock
    timbre: Timbre

    @property
    def note(self) -> str:
        return note_name(self.pitch_class)

    @property
    def frequency(self) -> float:
        return note_frequency(self.pitch_class, self.octave_offset)

    @property
    def stop(self) -> float:
        return self.start + self.timbre.duration


class AudioSink(ABC):
    """Destination for scheduled tone events."""

    @abstractmethod
    def submit(self, events: List[ToneEvent]) -> None:
        """
        Accept events for playback.

        Args:
            events: Tone events with absolute start times
        """
        pass


class ToneScheduler:
    """Schedules chord tones with a per-instrument strum.

    Stateless apart from the sink: every play() call is self-contained,
    so overlapping chords need no coordination.
    """

    def __init__(self, sink: Optional[AudioSink] = None):
        self.sink = sink

    def schedule(
        self,
        chord: ChordInput,
        timbre: Union[str, Timbre] = "guitar",
        start_time: float = 0.0,
    ) -> List[ToneEvent]:
        """
        Build the tone events for a chord.

        The bass note (or the root when there is no bass) sounds first, an
        octave down; the remaining chord tones follow, one stagger apart.

        Args:
            chord: Chord symbol, or an explicit list of note names whose
                first entry is treated as the bass
            timbre: Instrument preset or its name
            start_time: Onset of the first tone in seconds

        Returns:
            Events ordered by start time
        """
        timbre = get_timbre(timbre)
        voicing = self._voicing(chord)

        return [
            ToneEvent(
                pitch_class=pc,
                octave_offset=octave,
                start=start_time + index * timbre.stagger,
                timbre=timbre,
            )
            for index, (pc, octave) in enumerate(voicing)
        ]

    def play(
        self,
        chord: ChordInput,
        timbre: Union[str, Timbre] = "guitar",
        start_time: float = 0.0,
    ) -> List[ToneEvent]:
        """Schedule a chord and hand it to the sink."""
        events = self.schedule(chord, timbre, start_time)
        if self.sink is not None:
            self.sink.submit(events)
        return events

    def play_progression(
        self,
        chords: Sequence[ChordInput],
        timbre: Union[str, Timbre] = "guitar",
        start_time: float = 0.0,
        spacing: float = 1.0,
    ) -> List[ToneEvent]:
        """Play chords one after another, `spacing` seconds apart."""
        events = []
        for i, chord in enumerate(chords):
            events.extend(self.play(chord, timbre, start_time + i * spacing))
        return events

    @staticmethod
    def _voicing(chord: ChordInput) -> List[tuple]:
        """(pitch class, octave offset) pairs in playing order."""
        if not isinstance(chord, str):
            notes = [pitch_class(n) for n in chord]
            if not notes:
                return []
            return [(notes[0], -1)] + [(pc, 0) for pc in notes[1:]]

        parsed = parse_chord(chord)
        root = parsed.root_pc
        bass = parsed.bass_pc

        voicing = [(bass if bass is not None else root, -1)]
        for interval in parsed.intervals:
            if interval == 0 and bass is None:
                continue
            octave = 1 if interval >= 12 else 0
            voicing.append(((root + interval) % 12, octave))
        return voicing
