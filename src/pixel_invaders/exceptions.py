class PixelInvadersError(Exception):
    """Base exception for the Pixel Invaders project."""


class ConfigurationError(PixelInvadersError, ValueError):
    """Raised when settings cannot describe a playable board on the display."""


class RoundNotStartedError(PixelInvadersError, RuntimeError):
    """Raised when the defender is commanded before a round was started."""
