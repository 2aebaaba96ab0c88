"""
Destination abstractions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterable, Optional, Protocol, runtime_checkable

from ..levels import ALL_LEVELS, LogLevel, parse_levels
from ..metadata import LogMetadata


@dataclass(frozen=True)
class LogRecord:
    """One log call, as handed to a destination after its level gate."""

    subsystem: str
    category: str
    level: LogLevel
    message: str
    metadata: Optional[LogMetadata] = None


@runtime_checkable
class Destination(Protocol):
    """Anything that can receive log calls.

    Implementations must check ``level in self.levels`` themselves and do
    nothing at all for levels outside the set.
    """

    levels: frozenset[LogLevel]

    def log(
        self,
        subsystem: str,
        category: str,
        level: LogLevel,
        message: str,
        metadata: Optional[LogMetadata] = None,
    ) -> None: ...


# =============================================================================
# Destination Base (Strategy Pattern)
# =============================================================================


class BaseDestination(ABC):
    """Base class providing the level gate and metadata handling.

    Subclasses implement ``emit``. Metadata is dropped before ``emit``
    unless the subclass sets ``supports_metadata = True``.
    """

    supports_metadata: ClassVar[bool] = False

    def __init__(self, levels: Iterable[LogLevel | str] | str | None = None):
        self.levels: frozenset[LogLevel] = ALL_LEVELS if levels is None else parse_levels(levels)

    def accepts(self, level: LogLevel) -> bool:
        return level in self.levels

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
        if not self.supports_metadata or (metadata is not None and metadata.is_empty):
            metadata = None
        self.emit(LogRecord(subsystem, category, level, message, metadata))

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        """Deliver a record that already passed the level gate."""
        ...

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for pending deliveries. Synchronous destinations have none."""
        return True

    def close(self) -> None:
        """Release resources."""
        pass

    def __repr__(self) -> str:
        levels = ",".join(level.value for level in sorted(self.levels))
        return f"{type(self).__name__}(levels={levels})"
