"""
klarlog: category-based structured logging.

Application code logs through named category loggers; every call is fanned
out to a configurable set of destinations:
- console: structlog host facility (plain print in preview runs)
- file: bounded, FIFO-pruned local log file
- custom: any object with ``levels`` and ``log(...)``

Library: structlog + orjson, settings via pydantic-settings.
"""

from .config import KlarLogSettings, build_destinations, create_logger
from .core import configure_console, get_logger
from .destinations import (
    BackgroundDestination,
    BaseDestination,
    CallbackDestination,
    ConsoleDestination,
    Destination,
    FileDestination,
    LogRecord,
)
from .exceptions import ConfigurationError, DuplicateCategoryError, KlarLogError, UnknownCategoryError
from .interceptors import CategoryHandler, install_handler
from .levels import ALL_LEVELS, LogLevel, levels_at_least, parse_levels
from .metadata import LogMetadata, MetadataConvertible
from .registry import CategoryLogger, KlarLog
from .router import CategoryRouter

__all__ = [
    "ALL_LEVELS",
    "BackgroundDestination",
    "BaseDestination",
    "CallbackDestination",
    "CategoryHandler",
    "CategoryLogger",
    "CategoryRouter",
    "ConfigurationError",
    "ConsoleDestination",
    "Destination",
    "DuplicateCategoryError",
    "FileDestination",
    "KlarLog",
    "KlarLogError",
    "KlarLogSettings",
    "LogLevel",
    "LogMetadata",
    "LogRecord",
    "MetadataConvertible",
    "UnknownCategoryError",
    "build_destinations",
    "configure_console",
    "create_logger",
    "get_logger",
    "install_handler",
    "levels_at_least",
    "parse_levels",
]
