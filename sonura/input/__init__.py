"""Input layer - Audio files for offline analysis."""

from .loader import AudioLoader

__all__ = ["AudioLoader"]
