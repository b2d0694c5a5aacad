"""Tests for tone scheduling and offline rendering."""

from dataclasses import replace

import numpy as np
import pytest

from sonura.synthesis import (
    GUITAR,
    PIANO,
    OfflineRenderer,
    ToneEvent,
    ToneScheduler,
    envelope,
    get_timbre,
    render_chime,
    render_tone,
)

SR = 8000


class TestScheduler:
    """Tests for ToneScheduler.schedule()."""

    @pytest.fixture
    def scheduler(self):
        return ToneScheduler()

    def test_guitar_major_triad(self, scheduler):
        events = scheduler.schedule("C", "guitar", start_time=1.0)
        assert [e.note for e in events] == ["C", "E", "G"]
        assert [e.octave_offset for e in events] == [-1, 0, 0]
        assert [e.start for e in events] == pytest.approx([1.0, 1.05, 1.10])
        assert all(e.timbre is GUITAR for e in events)

    def test_piano_is_nearly_simultaneous(self, scheduler):
        events = scheduler.schedule("Am", "piano")
        assert [e.start for e in events] == pytest.approx([0.0, 0.01, 0.02])
        assert all(e.timbre is PIANO for e in events)

    def test_slash_chord_bass_first(self, scheduler):
        events = scheduler.schedule("C/G", "guitar")
        assert [e.note for e in events] == ["G", "C", "E", "G"]
        assert events[0].octave_offset == -1
        assert [e.octave_offset for e in events[1:]] == [0, 0, 0]
        assert [e.start for e in events] == pytest.approx([0.0, 0.05, 0.10, 0.15])

    def test_extensions_go_up_an_octave(self, scheduler):
        events = scheduler.schedule("Cadd9", "piano")
        assert events[-1].note == "D"
        assert events[-1].octave_offset == 1

    def test_explicit_note_list(self, scheduler):
        events = scheduler.schedule(["E", "G#", "B"], "piano")
        assert [e.note for e in events] == ["E", "G#", "B"]
        assert [e.octave_offset for e in events] == [-1, 0, 0]

    def test_empty_note_list(self, scheduler):
        assert scheduler.schedule([], "piano") == []

    def test_frequencies(self, scheduler):
        events = scheduler.schedule("A", "piano")
        assert events[0].frequency == pytest.approx(220.0)
        assert events[1].frequency == pytest.approx(554.37, abs=0.1)

    def test_fixed_stop_time(self, scheduler):
        for event in scheduler.schedule("G7", "guitar", start_time=2.0):
            assert event.stop == pytest.approx(event.start + 3.5)

    def test_unknown_instrument(self, scheduler):
        with pytest.raises(ValueError, match="Unknown instrument"):
            scheduler.schedule("C", "banjo")

    def test_malformed_chord_degrades(self, scheduler):
        events = scheduler.schedule("??", "piano")
        assert [e.note for e in events] == ["C", "E", "G"]

    def test_play_submits_to_sink(self):
        sink = OfflineRenderer(SR)
        scheduler = ToneScheduler(sink=sink)
        first = scheduler.play("C", "piano")
        second = scheduler.play("G", "piano", start_time=0.5)
        assert sink.pending == first + second

    def test_progression_spacing(self):
        scheduler = ToneScheduler()
        events = scheduler.play_progression(["C", "F", "G"], "piano", spacing=2.0)
        roots = [e for e in events if e.octave_offset == -1]
        assert [e.start for e in roots] == pytest.approx([0.0, 2.0, 4.0])


class TestTimbres:
    """Tests for presets."""

    def test_lookup(self):
        assert get_timbre("Guitar") is GUITAR
        assert get_timbre(PIANO) is PIANO

    def test_guitar_has_resonant_filter(self):
        assert GUITAR.filter_cutoff == 800.0
        assert GUITAR.filter_q == 5.0
        assert PIANO.filter_cutoff is None

    def test_durations(self):
        assert PIANO.decay == 2.5
        assert GUITAR.decay == 3.0
        assert PIANO.duration == GUITAR.duration == 3.5


class TestEnvelope:
    """Tests for the attack/decay envelope."""

    def test_shape(self):
        t = np.array([0.0, 0.01, 0.02, 2.5, 3.0])
        env = envelope(t, peak=0.4, attack=0.02, decay=2.5, floor=0.01)
        assert env[0] == 0.0
        assert env[1] == pytest.approx(0.2)
        assert env[2] == pytest.approx(0.4)
        assert env[3] == pytest.approx(0.01)
        assert env[4] == pytest.approx(0.01)

    def test_decay_is_monotonic(self):
        t = np.linspace(0.05, 3.0, 200)
        env = envelope(t, peak=0.3, attack=0.05, decay=3.0, floor=0.01)
        assert np.all(np.diff(env) <= 0)


class TestRenderer:
    """Tests for offline rendering."""

    def test_render_tone_length(self):
        tone = render_tone(440.0, PIANO, SR)
        assert tone.dtype == np.float32
        assert tone.size == int(3.5 * SR)
        assert np.all(np.isfinite(tone))
        assert np.abs(tone).max() <= 0.41

    def test_guitar_tone_is_filtered(self):
        tone = render_tone(220.0, GUITAR, SR)
        unfiltered = render_tone(220.0, replace(GUITAR, filter_cutoff=None), SR)
        spectrum = np.abs(np.fft.rfft(tone[:SR]))
        raw_spectrum = np.abs(np.fft.rfft(unfiltered[:SR]))
        freqs = np.fft.rfftfreq(SR, 1 / SR)
        high = freqs > 2000
        assert spectrum[high].sum() < raw_spectrum[high].sum() * 0.5

    def test_render_mix_length(self):
        renderer = OfflineRenderer(SR)
        events = ToneScheduler().schedule("C", "guitar", start_time=0.5)
        mix = renderer.render(events)
        assert mix.size == int(np.ceil(max(e.stop for e in events) * SR))
        assert mix.size >= int(4.1 * SR) - 1
        # Nothing before the first onset
        assert np.abs(mix[: int(0.5 * SR)]).max() == 0.0
        assert np.abs(mix).max() > 0.0

    def test_render_empty(self):
        assert OfflineRenderer(SR).render([]).size == 0

    def test_negative_start_rejected(self):
        event = ToneEvent(pitch_class=0, octave_offset=0, start=-0.1, timbre=PIANO)
        with pytest.raises(ValueError):
            OfflineRenderer(SR).render([event])

    def test_bounce_clears_pending(self):
        renderer = OfflineRenderer(SR)
        ToneScheduler(sink=renderer).play("Em", "piano")
        assert renderer.bounce().size > 0
        assert renderer.pending == []

    def test_chime(self):
        chime = render_chime(SR)
        assert chime.size == SR
        assert np.abs(chime).max() <= 0.1 + 1e-6
        # Louder at the start than at the end
        assert np.abs(chime[: SR // 10]).max() > np.abs(chime[-SR // 10:]).max()
