"""
Destination backed by a plain callable.
"""

from __future__ import annotations

from typing import Callable, Iterable

from ..levels import LogLevel
from .base import BaseDestination, LogRecord


class CallbackDestination(BaseDestination):
    """Hands every accepted record to ``callback``.

    Set ``structured=False`` to receive records with metadata stripped, the
    same way destinations without metadata support see them.
    """

    def __init__(
        self,
        callback: Callable[[LogRecord], object],
        levels: Iterable[LogLevel | str] | str | None = None,
        *,
        structured: bool = True,
    ):
        super().__init__(levels)
        self._callback = callback
        self.supports_metadata = structured  # type: ignore[misc]

    def emit(self, record: LogRecord) -> None:
        self._callback(record)
