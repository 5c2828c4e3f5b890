"""
Display side of Pixel Invaders.

Exposes:
- PresentationSink: protocol implemented by displays.
- FramePresenter: writes board frames plus score/text overlay into a sink.
- MatrixBuffer: in-memory display for headless runs and tests.

The Arcade window lives in ``presentation.arcade_display`` and is only
imported when a GUI is requested.
"""
from .headless import MatrixBuffer
from .sink import FramePresenter, PresentationSink, score_bits

__all__ = [
    "FramePresenter",
    "MatrixBuffer",
    "PresentationSink",
    "score_bits",
]
