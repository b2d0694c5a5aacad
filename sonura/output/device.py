"""Live audio devices through sounddevice.

sounddevice needs the PortAudio system library; when it (or a usable
device) is missing, every entry point raises AudioUnavailableError with
a message that can be shown to the user as-is.
"""

import threading
import time
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..synthesis import AudioSink, ToneEvent, render_tone


class AudioUnavailableError(RuntimeError):
    """Audio capture or playback cannot run on this machine."""


def _sounddevice():
    try:
        import sounddevice as sd
    except ImportError:
        raise AudioUnavailableError(
            "sounddevice is not installed. Run: pip install 'sonura-engine[live]'"
        ) from None
    except OSError as e:
        raise AudioUnavailableError(f"PortAudio library not found: {e}") from e
    return sd


def play_buffer(audio: np.ndarray, sr: int, blocking: bool = True) -> None:
    """Play a mono buffer on the default output device."""
    sd = _sounddevice()
    try:
        sd.play(np.asarray(audio, dtype=np.float32), sr)
        if blocking:
            sd.wait()
    except sd.PortAudioError as e:
        raise AudioUnavailableError(f"Audio output unavailable: {e}") from e


def open_input_stream(
    callback: Callable[[np.ndarray], None],
    sr: int = 44100,
    blocksize: int = 2048,
    device: Optional[int] = None,
):
    """
    Open (but do not start) a mono input stream.

    Args:
        callback: Receives each captured block as a 1-D float32 array
        sr: Sample rate
        blocksize: Samples per block
        device: Input device index (None for default)

    Returns:
        sounddevice.InputStream, usable as a context manager
    """
    sd = _sounddevice()

    def _on_block(indata, frames, time_info, status):
        callback(indata[:, 0].copy())

    try:
        return sd.InputStream(
            samplerate=sr,
            blocksize=blocksize,
            channels=1,
            dtype="float32",
            device=device,
            callback=_on_block,
        )
    except sd.PortAudioError as e:
        raise AudioUnavailableError(f"No microphone available: {e}") from e


class DeviceSink(AudioSink):
    """Mixes scheduled tones into one running output stream.

    Event start times are seconds on the stream clock, which counts from
    zero when the sink is opened. Every submitted tone plays from its start
    to its timbre's stop time; later submissions mix in alongside it.
    """

    def __init__(self, sr: int = 44100, blocksize: int = 512, device: Optional[int] = None):
        self.sr = sr
        self.blocksize = blocksize
        self.device = device
        self.position = 0  # Samples delivered to the device so far
        self._voices: List[Tuple[int, np.ndarray]] = []
        self._lock = threading.Lock()
        self._stream = None

    @property
    def clock(self) -> float:
        """Current output time in seconds."""
        return self.position / self.sr

    @property
    def active(self) -> bool:
        with self._lock:
            return bool(self._voices)

    def submit(self, events: List[ToneEvent]) -> None:
        voices = [
            (int(round(e.start * self.sr)), render_tone(e.frequency, e.timbre, self.sr))
            for e in events
        ]
        with self._lock:
            self._voices.extend(voices)

    def mix(self, frames: int) -> np.ndarray:
        """Produce the next `frames` output samples and advance the clock."""
        out = np.zeros(frames, dtype=np.float32)
        with self._lock:
            begin = self.position
            end = begin + frames
            remaining = []
            for start, tone in self._voices:
                stop = start + tone.size
                lo, hi = max(start, begin), min(stop, end)
                if lo < hi:
                    out[lo - begin:hi - begin] += tone[lo - start:hi - start]
                if stop > end:
                    remaining.append((start, tone))
            self._voices = remaining
            self.position = end
        return out

    def _on_block(self, outdata, frames, time_info, status):
        outdata[:, 0] = self.mix(frames)

    def open(self) -> "DeviceSink":
        """Start the output stream; the clock starts at zero."""
        sd = _sounddevice()
        with self._lock:
            self.position = 0
        try:
            self._stream = sd.OutputStream(
                samplerate=self.sr,
                blocksize=self.blocksize,
                channels=1,
                dtype="float32",
                device=self.device,
                callback=self._on_block,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._stream = None
            raise AudioUnavailableError(f"Audio output unavailable: {e}") from e
        return self

    def wait(self, poll: float = 0.1) -> None:
        """Block until every submitted tone has finished."""
        while self._stream is not None and self.active:
            time.sleep(poll)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "DeviceSink":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
