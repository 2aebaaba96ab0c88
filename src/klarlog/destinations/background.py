"""
Moves any destination off the caller's thread.
"""

from __future__ import annotations

from typing import Optional

from ..core import get_diagnostics_logger
from ..levels import LogLevel
from ..metadata import LogMetadata
from ..worker import SerialWorker
from .base import Destination

logger = get_diagnostics_logger("klarlog.destinations.background")


class BackgroundDestination:
    """Wraps a destination so ``log`` only queues the call.

    Calls reach the wrapped destination in submission order on a private
    ``SerialWorker``. Use it for sinks that may block (network, slow
    streams) so they cannot delay the destinations after them.
    """

    def __init__(self, destination: Destination, *, name: Optional[str] = None):
        self.destination = destination
        self.levels = destination.levels
        self._worker = SerialWorker(name=name or f"klarlog-bg:{type(destination).__name__}")

    def log(
        self,
        subsystem: str,
        category: str,
        level: LogLevel,
        message: str,
        metadata: Optional[LogMetadata] = None,
    ) -> None:
        if level not in self.levels:
            return
        self._worker.submit(self._deliver, subsystem, category, level, message, metadata)

    def _deliver(
        self,
        subsystem: str,
        category: str,
        level: LogLevel,
        message: str,
        metadata: Optional[LogMetadata],
    ) -> None:
        try:
            self.destination.log(subsystem, category, level, message, metadata)
        except Exception as exc:
            logger.debug("destination_failed", destination=repr(self.destination), error=repr(exc))

    def flush(self, timeout: Optional[float] = None) -> bool:
        if not self._worker.flush(timeout):
            return False
        inner_flush = getattr(self.destination, "flush", None)
        return inner_flush(timeout) if callable(inner_flush) else True

    def close(self) -> None:
        self._worker.stop()
        inner_close = getattr(self.destination, "close", None)
        if callable(inner_close):
            inner_close()

    def __repr__(self) -> str:
        return f"BackgroundDestination({self.destination!r})"
