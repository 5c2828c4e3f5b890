"""
Input layer for Pixel Invaders.

Exposes:
- Command: the closed set of player commands (left, right, fire).
- CommandMapper: rebindable mapping from raw symbols/key codes to commands.
- CommandQueue: thread-safe queue drained by the tick loop.
"""
from .commands import Command
from .mapping import CommandMapper
from .queue import CommandQueue

__all__ = [
    "Command",
    "CommandMapper",
    "CommandQueue",
]
