from __future__ import annotations

from enum import Enum


class Command(Enum):
    """Closed set of player commands understood by the game controller.

    Input transports (keyboard, network listener, tests) translate their raw
    symbols into one of these before the controller ever sees them, so the
    controller never deals with unknown codes.
    """

    LEFT = "L"
    RIGHT = "R"
    FIRE = "U"


__all__ = ["Command"]
