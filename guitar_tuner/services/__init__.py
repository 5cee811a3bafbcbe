"""Frame sources that drive the tuner outside a live capture host."""

from .frame_providers import ArrayFrameProvider, WavFileFrameProvider

__all__ = ["ArrayFrameProvider", "WavFileFrameProvider"]
