"""Output layer - WAV export and live audio devices."""

from .wav import write_wav
from .device import AudioUnavailableError, DeviceSink, open_input_stream, play_buffer

__all__ = [
    "write_wav",
    "AudioUnavailableError",
    "DeviceSink",
    "open_input_stream",
    "play_buffer",
]
