from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Union

from .commands import Command

logger = logging.getLogger(__name__)

RawSymbol = Union[str, bytes, int]


class CommandMapper:
    """Rebindable mapping from raw input symbols to commands.

    Symbols are normalized to uppercase strings, so ``"l"``, ``"L"`` and
    ``b"L"`` all resolve the same way. Backends with numeric key codes (Arcade,
    pyglet) register aliases from their codes to canonical names instead of
    binding the numbers directly.

    Example usage:
        mapper = CommandMapper.default()
        mapper.translate("U")      # -> Command.FIRE
        mapper.translate(b"L")     # -> Command.LEFT
    """

    def __init__(self, bindings: Optional[Dict[str, Command]] = None) -> None:
        self._bindings: Dict[str, Command] = {}
        self._aliases: Dict[str, str] = {}
        if bindings:
            for key, command in bindings.items():
                self.bind(key, command)

    # ---------- Canonicalization ----------
    @staticmethod
    def _normalize(symbol: Optional[RawSymbol]) -> Optional[str]:
        if symbol is None or isinstance(symbol, bool):
            return None
        if isinstance(symbol, int):
            return str(symbol)
        if isinstance(symbol, (bytes, bytearray)):
            try:
                symbol = bytes(symbol).decode("ascii")
            except UnicodeDecodeError:
                return None
        if not isinstance(symbol, str):
            return None
        key = symbol.strip()
        if not key:
            return None
        return key.upper()

    # ---------- Binding API ----------
    def bind(self, symbol: RawSymbol, command: Command) -> None:
        key = self._normalize(symbol)
        if key is None:
            logger.warning("Attempted to bind invalid symbol: %r", symbol)
            return
        self._bindings[key] = command

    def bind_many(self, symbols: Iterable[RawSymbol], command: Command) -> None:
        for symbol in symbols:
            self.bind(symbol, command)

    def unbind(self, symbol: RawSymbol) -> None:
        key = self._normalize(symbol)
        if key is not None:
            self._bindings.pop(key, None)

    def set_alias(self, physical: RawSymbol, canonical_name: str) -> None:
        """Resolve ``physical`` (e.g. a backend key code) as ``canonical_name``."""
        key = self._normalize(physical)
        name = self._normalize(canonical_name)
        if key and name:
            self._aliases[key] = name

    # ---------- Translation ----------
    def translate(self, symbol: Optional[RawSymbol]) -> Optional[Command]:
        """Return the command bound to ``symbol`` or None if it is unknown."""
        key = self._normalize(symbol)
        if key is None:
            return None
        return self._bindings.get(self._aliases.get(key, key))

    # ---------- Defaults ----------
    @classmethod
    def default(cls) -> "CommandMapper":
        """Wire symbols L/R/U plus arrow keys, WASD and space."""
        mapper = cls()
        mapper.bind_many(["L", "LEFT", "A"], Command.LEFT)
        mapper.bind_many(["R", "RIGHT", "D"], Command.RIGHT)
        mapper.bind_many(["U", "UP", "W", "SPACE", "FIRE"], Command.FIRE)
        # Raw byte values as delivered by the network button listener
        for command in Command:
            mapper.set_alias(ord(command.value), command.value)
        return mapper


__all__ = ["CommandMapper", "RawSymbol"]
