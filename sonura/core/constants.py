"""Global constants for Sonura."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
}

# Octave-4 reference frequencies used by the tone scheduler
NOTE_FREQUENCIES = {
    "C": 261.63, "C#": 277.18, "D": 293.66, "D#": 311.13,
    "E": 329.63, "F": 349.23, "F#": 369.99, "G": 392.00,
    "G#": 415.30, "A": 440.00, "A#": 466.16, "B": 493.88,
}

# Tuner defaults
DEFAULT_REFERENCE_HZ = 440.0
DEFAULT_WINDOW_SIZE = 2048
SILENCE_RMS_THRESHOLD = 0.01
TRIM_THRESHOLD = 0.2
PREFILTER_CUTOFF_HZ = 1000.0

# Needle display
NEEDLE_REST_ANGLE = -50.0
NEEDLE_SMOOTHING = 0.15
NEEDLE_DEGREES_PER_CENT = 1.5
MAX_DISPLAY_CENTS = 50

# Tuning feedback
CHIME_CENTS = 4
CHIME_DEBOUNCE_SECONDS = 2.0
IN_TUNE_CENTS = 5
CLOSE_CENTS = 15

# Fretboard
STANDARD_TUNING = ("E", "A", "D", "G", "B", "E")
NUM_STRINGS = 6
DISPLAY_FRETS = 15

# Playback
TONE_DURATION = 3.5
DEFAULT_RENDER_SR = 44100

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
