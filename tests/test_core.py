"""Tests for pitch-class arithmetic and chord-quality intervals."""

import warnings

import pytest

from sonura.core import (
    PITCH_NAMES,
    DegradedMatchWarning,
    match_interval_set,
    normalize_note,
    note_frequency,
    pitch_class,
    resolve_interval_set,
    transpose_note,
    freq_to_midi,
    midi_to_freq,
)


class TestNormalizeNote:
    """Tests for note-token normalization."""

    def test_flats_become_sharps(self):
        assert normalize_note("Bb") == normalize_note("A#") == "A#"
        assert normalize_note("Db") == "C#"
        assert normalize_note("Eb") == "D#"
        assert normalize_note("Gb") == "F#"
        assert normalize_note("Ab") == "G#"

    def test_enharmonic_naturals(self):
        assert normalize_note("Cb") == "B"
        assert normalize_note("Fb") == "E"

    def test_capitalizes_letter(self):
        assert normalize_note("bb") == "A#"
        assert normalize_note("f#") == "F#"
        assert normalize_note("e") == "E"

    def test_empty_defaults_to_c(self):
        assert normalize_note("") == "C"

    def test_unrecognized_defaults_to_c(self):
        assert normalize_note("H") == "C"
        assert normalize_note("X#") == "C"

    def test_pitch_class(self):
        assert pitch_class("C") == 0
        assert pitch_class("Bb") == 10
        assert pitch_class(14) == 2
        assert pitch_class(-1) == 11


class TestTransposeNote:
    """Tests for modulo-12 transposition."""

    def test_wraps_upward(self):
        assert transpose_note(11, 1) == 0
        assert transpose_note("B", 2) == "C#"

    def test_negative_steps_wrap_positive(self):
        assert transpose_note(0, -1) == 11
        assert transpose_note("C", -13) == "B"

    @pytest.mark.parametrize("steps", [-25, -12, -7, -1, 0, 1, 5, 11, 12, 30])
    def test_round_trip(self, steps):
        for pc in range(12):
            assert transpose_note(transpose_note(pc, steps), -steps) == pc

    def test_round_trip_names(self):
        for name in PITCH_NAMES:
            assert transpose_note(transpose_note(name, 7), -7) == name


class TestIntervalSets:
    """Tests for the ordered quality rules."""

    def test_major_is_empty_quality(self):
        assert resolve_interval_set("") == (0, 4, 7)

    def test_exact_matches(self):
        assert resolve_interval_set("m7") == (0, 3, 7, 10)
        assert resolve_interval_set("maj7") == (0, 4, 7, 11)
        assert resolve_interval_set("dim7") == (0, 3, 6, 9)
        assert resolve_interval_set("5") == (0, 7)
        assert resolve_interval_set("13") == (0, 4, 7, 10, 14, 21)

    def test_madd9_is_exact(self):
        match = match_interval_set("madd9")
        assert match.rule == "exact"
        assert match.intervals == (0, 3, 7, 14)

    def test_madd11_falls_back_to_minor_prefix(self):
        """No 'madd11' entry: the longest table key starting it is 'm'."""
        with pytest.warns(DegradedMatchWarning):
            match = match_interval_set("madd11")
        assert match.rule == "prefix"
        assert match.key == "m"
        assert match.intervals == (0, 3, 7)

    def test_longest_prefix_wins(self):
        with pytest.warns(DegradedMatchWarning):
            match = match_interval_set("maj7#11")
        # "m", "maj7" are both prefixes; the longer one is chosen
        assert match.key == "maj7"
        assert match.intervals == (0, 4, 7, 11)

    def test_m7b5_prefers_exact_over_prefix(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert resolve_interval_set("m7b5") == (0, 3, 6, 10)

    def test_unknown_defaults_to_major(self):
        with pytest.warns(DegradedMatchWarning):
            match = match_interval_set("xyz")
        assert match.rule == "default"
        assert match.key is None
        assert match.intervals == (0, 4, 7)

    def test_offsets_non_negative_and_start_at_root(self):
        from sonura.core import CHORD_INTERVALS

        for quality, intervals in CHORD_INTERVALS.items():
            assert intervals[0] == 0, quality
            assert all(i >= 0 for i in intervals), quality


class TestFrequencies:
    """Tests for frequency helpers."""

    def test_note_frequency_octave_four(self):
        assert note_frequency("A") == 440.0
        assert note_frequency("C") == pytest.approx(261.63)

    def test_note_frequency_octave_offset(self):
        assert note_frequency("A", -1) == pytest.approx(220.0)
        assert note_frequency("A", 1) == pytest.approx(880.0)

    def test_midi_conversion(self):
        assert freq_to_midi(440.0) == pytest.approx(69.0)
        assert freq_to_midi(880.0) == pytest.approx(81.0)
        assert midi_to_freq(69) == 440.0
        assert freq_to_midi(442.0, reference_hz=442.0) == pytest.approx(69.0)
