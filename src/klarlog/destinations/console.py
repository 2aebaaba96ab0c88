"""
Console destination: structlog as the host logging facility, with a plain
``print`` fallback for preview/sandbox runs.
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Optional, TextIO

import structlog

from ..formatters import format_preview_line
from ..levels import LogLevel
from .base import BaseDestination, LogRecord

RESERVED_KEYS = frozenset(
    {"event", "level", "logger", "message", "timestamp", "category", "_name", "exc_info", "stack_info"}
)


def _structured_fields(record: LogRecord) -> dict[str, Any]:
    if record.metadata is None:
        return {}
    return {
        (f"metadata_{key}" if key in RESERVED_KEYS else key): value
        for key, value in record.metadata.as_dict().items()
    }


def _preview_from_settings() -> bool:
    from ..config import KlarLogSettings

    return KlarLogSettings().console_preview


class ConsoleDestination(BaseDestination):
    """Synchronous console output on the caller's thread.

    Args:
        levels: Accepted levels (default: all)
        preview: Force the plain ``[LEVEL][subsystem][category] message``
            fallback on (True) or off (False). ``None`` reads the
            ``KLARLOG_CONSOLE_PREVIEW`` setting.
        stream: Stream for preview output (default: stdout at write time)
    """

    supports_metadata = True

    def __init__(
        self,
        levels: Iterable[LogLevel | str] | str | None = None,
        *,
        preview: Optional[bool] = None,
        stream: Optional[TextIO] = None,
    ):
        super().__init__(levels)
        self.preview = _preview_from_settings() if preview is None else preview
        self._stream = stream

    def emit(self, record: LogRecord) -> None:
        try:
            if self.preview:
                self._emit_preview(record)
            else:
                self._emit_native(record)
        except Exception:
            # the host facility does not surface errors; neither do we
            pass

    def _emit_preview(self, record: LogRecord) -> None:
        line = format_preview_line(record.level, record.subsystem, record.category, record.message, record.metadata)
        print(line, file=self._stream or sys.stdout, flush=True)

    def _emit_native(self, record: LogRecord) -> None:
        logger = structlog.get_logger(_name=record.subsystem)
        method = getattr(logger, record.level.native_method)
        method(record.message, category=record.category, **_structured_fields(record))
