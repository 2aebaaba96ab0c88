"""
Log levels and level-set helpers.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")


class LogLevel(str, Enum):
    """Severity of a log record, ordered from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        """Upper-case name used in rendered lines (e.g. ``WARNING``)."""
        return self.value.upper()

    @property
    def native_method(self) -> str:
        """Nearest structlog method name; ``notice`` has no native counterpart."""
        return "info" if self is LogLevel.NOTICE else self.value

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity >= other.severity

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        """Parse a level name case-insensitively."""
        if isinstance(value, LogLevel):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown log level: {value!r}") from None

    @classmethod
    def from_stdlib(cls, levelno: int) -> LogLevel:
        """Map a stdlib ``logging`` level number to the nearest level at or below it."""
        result = cls.DEBUG
        for level in cls:
            if levelno >= level.stdlib_level:
                result = level
        return result


_SEVERITY = {level: index for index, level in enumerate(LogLevel)}

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.NOTICE: NOTICE,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}

ALL_LEVELS: frozenset[LogLevel] = frozenset(LogLevel)


def parse_levels(value: str | Iterable[str | LogLevel] | None) -> frozenset[LogLevel]:
    """Parse a comma-separated string or an iterable of names into a level set.

    ``None``, an empty string, ``"all"`` or ``"*"`` select every level.
    """
    if value is None:
        return ALL_LEVELS
    if isinstance(value, str):
        stripped = value.strip().lower()
        if stripped in {"", "all", "*"}:
            return ALL_LEVELS
        names: Iterable[str | LogLevel] = [part for part in stripped.split(",") if part.strip()]
    else:
        names = value
    return frozenset(LogLevel.parse(name) for name in names)


def levels_at_least(minimum: str | LogLevel) -> frozenset[LogLevel]:
    """All levels with severity greater than or equal to ``minimum``."""
    floor = LogLevel.parse(minimum)
    return frozenset(level for level in LogLevel if level >= floor)
