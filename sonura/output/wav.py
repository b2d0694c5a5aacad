"""WAV export of rendered audio."""

from pathlib import Path

import numpy as np
import soundfile as sf


def write_wav(path, audio: np.ndarray, sr: int, normalize: bool = True) -> Path:
    """
    Write a mono buffer as 16-bit PCM WAV.

    Args:
        path: Output path (parent directories are created)
        audio: Float samples
        sr: Sample rate
        normalize: Scale down to avoid clipping when the peak exceeds 1

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    audio = np.asarray(audio, dtype=np.float32)
    peak = float(np.abs(audio).max()) if audio.size else 0.0
    if normalize and peak > 1.0:
        audio = audio / peak
    audio = np.clip(audio, -1.0, 1.0)

    sf.write(str(path), audio, sr, subtype="PCM_16")
    return path
