from __future__ import annotations

import logging
from collections import deque
from threading import Lock
from typing import Deque, List, Optional

from .commands import Command
from .mapping import CommandMapper, RawSymbol

logger = logging.getLogger(__name__)


class CommandQueue:
    """Thread-safe hand-off of player commands into the tick loop.

    Input listeners may run on any thread; they only ever append here. The
    tick loop drains the queue once per tick and applies the commands in
    arrival order, so game state is only touched from the loop's thread.
    """

    def __init__(self, mapper: Optional[CommandMapper] = None, maxlen: Optional[int] = 256) -> None:
        self.mapper = mapper or CommandMapper.default()
        self._pending: Deque[Command] = deque(maxlen=maxlen)
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def push(self, command: Command) -> None:
        with self._lock:
            self._pending.append(command)

    def push_symbol(self, symbol: RawSymbol) -> bool:
        """Translate a raw symbol and queue it.

        Returns:
            True if the symbol mapped to a command; malformed symbols are
            dropped and False is returned.
        """
        command = self.mapper.translate(symbol)
        if command is None:
            logger.debug("Dropping unmapped input symbol %r", symbol)
            return False
        self.push(command)
        return True

    def drain(self) -> List[Command]:
        """Return and clear all queued commands, oldest first."""
        with self._lock:
            commands = list(self._pending)
            self._pending.clear()
        return commands


__all__ = ["CommandQueue"]
