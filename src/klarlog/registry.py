"""
Facade and category registry.

Usage:
    from klarlog import ConsoleDestination, FileDestination, KlarLog

    log = KlarLog(
        subsystem="com.example.app",
        categories=["general", "network"],
        destinations={
            "console": ConsoleDestination(),
            "file": FileDestination("logs", levels="warning,error,critical"),
        },
    )

    log.network.info("request sent", metadata={"url": "/health"})
    log["general"].warning("low disk", free_mb=120)
    log.destinations["file"].read_logs()
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from .destinations.base import Destination
from .exceptions import DuplicateCategoryError, UnknownCategoryError
from .levels import LogLevel
from .metadata import LogMetadata
from .router import CategoryRouter

MetadataInput = Optional[Mapping[str, Any]]


class CategoryLogger:
    """Public logging API for one category, bound to a subsystem."""

    __slots__ = ("_subsystem", "_router")

    def __init__(self, subsystem: str, router: CategoryRouter):
        self._subsystem = subsystem
        self._router = router

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @property
    def category(self) -> str:
        return self._router.category

    @property
    def router(self) -> CategoryRouter:
        return self._router

    def log(self, level: LogLevel | str, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        meta = LogMetadata.coerce(metadata)
        if fields:
            meta = meta.merged(fields) if meta is not None else LogMetadata(fields)
        self._router.log(self._subsystem, LogLevel.parse(level), message, meta)

    def debug(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, message, metadata, **fields)

    def info(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.INFO, message, metadata, **fields)

    def notice(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.NOTICE, message, metadata, **fields)

    def warning(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.WARNING, message, metadata, **fields)

    def error(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.ERROR, message, metadata, **fields)

    def critical(self, message: str, metadata: MetadataInput = None, **fields: Any) -> None:
        self.log(LogLevel.CRITICAL, message, metadata, **fields)

    def __repr__(self) -> str:
        return f"CategoryLogger(subsystem={self._subsystem!r}, category={self.category!r})"


def _named_destinations(
    destinations: Mapping[str, Destination] | Sequence[Destination],
) -> dict[str, Destination]:
    if isinstance(destinations, Mapping):
        return dict(destinations)
    named: dict[str, Destination] = {}
    for index, destination in enumerate(destinations):
        base = type(destination).__name__
        name = base if base not in named else f"{base}_{index}"
        named[name] = destination
    return named


def _category_names(categories: Mapping[str, str] | Iterable[str]) -> dict[str, str]:
    pairs = categories.items() if isinstance(categories, Mapping) else ((name, name) for name in categories)
    names: dict[str, str] = {}
    for accessor, category in pairs:
        if accessor in names:
            raise DuplicateCategoryError(name=accessor)
        names[accessor] = category
    return names


class KlarLog:
    """Explicit registry of category loggers sharing one destination list.

    Args:
        subsystem: Identifier of the owning application (e.g. package name)
        categories: Category names, or ``{accessor: category}`` when the
            attribute name should differ from the logged category
        destinations: Ordered destinations, or an ordered name->destination
            mapping so individual destinations can be looked up later
    """

    def __init__(
        self,
        subsystem: str,
        categories: Mapping[str, str] | Iterable[str],
        destinations: Mapping[str, Destination] | Sequence[Destination] = (),
    ):
        self._subsystem = subsystem
        self._destinations = _named_destinations(destinations)
        shared = tuple(self._destinations.values())
        self._loggers: dict[str, CategoryLogger] = {
            accessor: CategoryLogger(subsystem, CategoryRouter(category, shared))
            for accessor, category in _category_names(categories).items()
        }

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @property
    def destinations(self) -> Mapping[str, Destination]:
        return MappingProxyType(self._destinations)

    @property
    def categories(self) -> list[str]:
        return list(self._loggers)

    def category(self, name: str) -> CategoryLogger:
        try:
            return self._loggers[name]
        except KeyError:
            raise UnknownCategoryError(name=name, known=list(self._loggers)) from None

    def __getitem__(self, name: str) -> CategoryLogger:
        return self.category(name)

    def __getattr__(self, name: str) -> CategoryLogger:
        # only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self.category(name)

    def __contains__(self, name: object) -> bool:
        return name in self._loggers

    def __iter__(self) -> Iterator[CategoryLogger]:
        return iter(self._loggers.values())

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for every destination's pending work."""
        done = True
        for destination in self._destinations.values():
            flush = getattr(destination, "flush", None)
            if callable(flush) and not flush(timeout):
                done = False
        return done

    def close(self) -> None:
        for destination in self._destinations.values():
            close = getattr(destination, "close", None)
            if callable(close):
                close()

    def __repr__(self) -> str:
        return f"KlarLog(subsystem={self._subsystem!r}, categories={self.categories!r})"
