"""
Pixel Invaders package root.

A space invaders shooter for tiny pixel matrix displays. The board engine and
the game controller are pure simulation code; display backends (Arcade window,
headless buffer) and input transports only talk to them through the
presentation sink protocol and the command queue.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
