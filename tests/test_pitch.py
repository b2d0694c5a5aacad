"""Tests for autocorrelation pitch detection and note mapping."""

import numpy as np
import pytest

from sonura.analysis import PitchDetector, PitchReading, TunerCalibration, frequency_to_note

from generate_test_audio import generate_window, generate_white_noise


class TestPitchDetector:
    """Tests for PitchDetector.detect()."""

    @pytest.fixture
    def detector(self):
        return PitchDetector(window_size=2048)

    def test_sine_a4(self, detector):
        """A 440 Hz sine reads as A, within 2 Hz and 10 cents."""
        sr = 44100
        reading = detector.process(generate_window(440.0, 2048, sr), sr)

        assert reading is not None
        assert reading.frequency == pytest.approx(440.0, abs=2.0)
        assert reading.note == "A"
        assert abs(reading.cents) <= 10
        assert reading.octave == 4

    def test_sine_a4_lower_sample_rate(self, detector):
        sr = 22050
        freq = detector.detect(generate_window(440.0, 2048, sr), sr)
        assert freq == pytest.approx(440.0, abs=2.0)

    @pytest.mark.parametrize("freq,name", [
        (261.63, "C"),
        (329.63, "E"),
        (392.00, "G"),
        (493.88, "B"),
    ])
    def test_sine_notes(self, detector, freq, name):
        sr = 44100
        reading = detector.process(generate_window(freq, 2048, sr), sr)
        assert reading is not None
        assert reading.note == name
        assert reading.frequency == pytest.approx(freq, rel=0.01)

    def test_quiet_sine_still_detected(self, detector):
        """Below the trim threshold nothing is trimmed, but RMS is above the floor."""
        sr = 44100
        freq = detector.detect(generate_window(440.0, 2048, sr, amplitude=0.1), sr)
        assert freq == pytest.approx(440.0, abs=2.0)

    def test_silence_is_no_pitch(self, detector):
        assert detector.detect(np.zeros(2048, dtype=np.float32), 44100) is None
        assert detector.process(np.zeros(2048), 44100) is None

    def test_noise_floor_is_no_pitch(self, detector):
        noise = generate_white_noise(2048 / 44100, 44100, amplitude=0.005)
        assert detector.detect(noise, 44100) is None

    def test_impulse_is_no_pitch(self, detector):
        """A lone click has no periodic peak after lag 0."""
        buffer = np.zeros(2048)
        buffer[10] = 1.0
        assert detector.detect(buffer, 44100) is None

    def test_dc_offset_is_no_pitch(self, detector):
        """Constant signal: autocorrelation only ever decreases."""
        assert detector.detect(np.full(2048, 0.5), 44100) is None

    def test_too_short_buffer(self, detector):
        assert detector.detect(np.array([0.5, -0.5]), 44100) is None

    def test_longer_buffer_uses_newest_samples(self, detector):
        sr = 44100
        buffer = np.concatenate([np.zeros(4096), generate_window(440.0, 2048, sr)])
        assert detector.detect(buffer, sr) == pytest.approx(440.0, abs=2.0)

    def test_window_buffer_is_reused(self, detector):
        window_id = id(detector._window)
        for freq in (220.0, 440.0, 330.0):
            detector.detect(generate_window(freq, 2048, 44100), 44100)
        assert id(detector._window) == window_id

    def test_reuse_does_not_leak_between_calls(self, detector):
        sr = 44100
        short = generate_window(330.0, 1024, sr)
        detector.detect(generate_window(110.0, 2048, sr), sr)
        assert detector.detect(short, sr) == PitchDetector().detect(short, sr)

    def test_does_not_modify_input(self, detector):
        buffer = generate_window(440.0, 2048, 44100)
        original = buffer.copy()
        detector.detect(buffer, 44100)
        np.testing.assert_array_equal(buffer, original)

    def test_invalid_window_size(self):
        with pytest.raises(ValueError):
            PitchDetector(window_size=2)


class TestFrequencyToNote:
    """Tests for the note/cents mapping."""

    def test_exact_a4(self):
        reading = frequency_to_note(440.0)
        assert reading == PitchReading(frequency=440.0, note="A", cents=0, midi=69)

    def test_sharp_and_flat(self):
        # 20 cents sharp of A4
        sharp = frequency_to_note(440.0 * 2 ** (20 / 1200))
        assert sharp.note == "A"
        assert sharp.cents in (19, 20)

        # 20 cents flat of A4
        flat = frequency_to_note(440.0 * 2 ** (-20 / 1200))
        assert flat.note == "A"
        assert flat.cents in (-21, -20)

    def test_cents_are_floored(self):
        # 0.5 cent flat floors to -1
        reading = frequency_to_note(440.0 * 2 ** (-0.5 / 1200))
        assert reading.cents == -1

    def test_reference_pitch(self):
        """A 440 Hz tone against A4=432 reads about 31 cents sharp."""
        reading = frequency_to_note(440.0, TunerCalibration(reference_hz=432.0))
        assert reading.note == "A"
        assert reading.cents == 31

    def test_reference_442(self):
        reading = frequency_to_note(442.0, TunerCalibration(reference_hz=442.0))
        assert reading.note == "A"
        assert reading.cents == 0

    def test_transposition(self):
        """Bb instruments: concert A is displayed as B (transposition -2)."""
        assert frequency_to_note(440.0, TunerCalibration(transposition_semitones=2)).note == "G"
        assert frequency_to_note(440.0, TunerCalibration(transposition_semitones=-2)).note == "B"

    def test_transposition_wraps(self):
        reading = frequency_to_note(261.63, TunerCalibration(transposition_semitones=1))
        assert reading.note == "B"

    def test_invalid_frequency(self):
        with pytest.raises(ValueError):
            frequency_to_note(0.0)


class TestTunerCalibration:
    """Tests for the calibration record."""

    def test_defaults(self):
        calibration = TunerCalibration()
        assert calibration.reference_hz == 440.0
        assert calibration.transposition_semitones == 0

    def test_updates_return_new_records(self):
        calibration = TunerCalibration()
        updated = calibration.adjust_reference(1).adjust_transposition(-1)
        assert calibration == TunerCalibration()
        assert updated.reference_hz == 441.0
        assert updated.transposition_semitones == -1

    def test_frozen(self):
        calibration = TunerCalibration()
        with pytest.raises(Exception):
            calibration.reference_hz = 430.0

    def test_rejects_non_positive_reference(self):
        with pytest.raises(ValueError):
            TunerCalibration(reference_hz=0)
        with pytest.raises(ValueError):
            TunerCalibration().with_reference(-440)
