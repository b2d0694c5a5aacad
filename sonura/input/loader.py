"""Audio loading and frame slicing for offline tuning."""

import numpy as np
import librosa
from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..core.constants import DEFAULT_WINDOW_SIZE


class AudioLoader:
    """Loads audio files and cuts them into analysis windows."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a"}

    def __init__(
        self,
        target_sr: Optional[int] = None,
        mono: bool = True,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Resample to this rate (None keeps the file's rate)
            mono: Convert to mono if True
            normalize: Peak-normalize amplitude if True
        """
        self.target_sr = target_sr
        self.mono = mono
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load audio file and preprocess.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=self.mono)

        if self.normalize:
            audio = self._normalize(audio)

        return audio, int(sr)

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if audio.size else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

    @staticmethod
    def frames(
        audio: np.ndarray,
        window_size: int = DEFAULT_WINDOW_SIZE,
        hop: Optional[int] = None,
    ) -> Iterator[Tuple[int, np.ndarray]]:
        """
        Yield (start sample, window) pairs, as a capture callback would
        deliver them. A trailing partial window is dropped.
        """
        hop = hop or window_size
        for start in range(0, len(audio) - window_size + 1, hop):
            yield start, audio[start:start + window_size]

    def get_duration(self, audio: np.ndarray, sr: int) -> float:
        """Get duration in seconds."""
        return len(audio) / sr
