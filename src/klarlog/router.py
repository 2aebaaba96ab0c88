"""
Category routing: one log call fanned out to every destination.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .core import get_diagnostics_logger
from .destinations.base import Destination
from .levels import LogLevel
from .metadata import LogMetadata

logger = get_diagnostics_logger("klarlog.router")


class CategoryRouter:
    """Binds a category name to an ordered list of destinations.

    The subsystem is supplied on every call by the owning facade.
    """

    __slots__ = ("category", "destinations")

    def __init__(self, category: str, destinations: Iterable[Destination] = ()):
        self.category = category
        self.destinations: tuple[Destination, ...] = tuple(destinations)

    def log(
        self,
        subsystem: str,
        level: LogLevel,
        message: str,
        metadata: Optional[LogMetadata] = None,
    ) -> None:
        """Deliver to each destination in list order.

        A destination that raises is skipped; the rest still receive the
        record.
        """
        for destination in self.destinations:
            try:
                destination.log(subsystem, self.category, level, message, metadata)
            except Exception as exc:
                # Logging must never destabilize the host application.
                logger.debug(
                    "destination_failed",
                    category=self.category,
                    destination=repr(destination),
                    error=repr(exc),
                )

    def __repr__(self) -> str:
        return f"CategoryRouter(category={self.category!r}, destinations={len(self.destinations)})"
