"""
Line formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from structlog.typing import EventDict

if TYPE_CHECKING:
    from .levels import LogLevel
    from .metadata import LogMetadata

# =============================================================================
# Plain-text record lines
# =============================================================================

FILE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def file_timestamp(moment: datetime | None = None) -> str:
    """Local-time, lexically sortable timestamp with millisecond precision."""
    moment = moment or datetime.now().astimezone()
    return f"{moment.strftime(FILE_TIMESTAMP_FORMAT)}.{moment.microsecond // 1000:03d}"


def single_line(text: str) -> str:
    """Escape line breaks so one record always occupies one line."""
    if "\n" not in text and "\r" not in text:
        return text
    return text.replace("\r\n", "\\n").replace("\r", "\\n").replace("\n", "\\n")


def format_file_line(
    level: LogLevel,
    category: str,
    message: str,
    metadata: LogMetadata | None = None,
    *,
    timestamp: str | None = None,
) -> str:
    """``<timestamp>\\t[<LEVEL>]\\t[<category>] <message>`` with optional metadata."""
    text = message
    if metadata:
        text = f"{message} {metadata.formatted()}"
    return f"{timestamp or file_timestamp()}\t[{level.label}]\t[{category}] {single_line(text)}"


def format_preview_line(
    level: LogLevel,
    subsystem: str,
    category: str,
    message: str,
    metadata: LogMetadata | None = None,
) -> str:
    """``[LEVEL][subsystem][category] message`` used when no host facility is available."""
    line = f"[{level.label}][{subsystem}][{category}] {message}"
    if metadata:
        line = f"{line} {metadata.formatted()}"
    return line


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "debug": "\033[36m",
    "info": "\033[32m",
    "notice": "\033[34m",
    "warning": "\033[33m",
    "error": "\033[31m",
    "critical": "\033[1;31m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Renders structlog event dicts as aligned, optionally colored columns.

    ``timestamp | LEVEL | subsystem/category | message key=value ...``
    """

    EXCLUDED_KEYS = {"level", "message", "event", "logger", "timestamp", "category", "_name"}
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 8
    LOGGER_WIDTH = 32
    SEPARATOR = " | "

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _format_timestamp(cls, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)
            except (ValueError, TypeError):
                pass
        return datetime.now().strftime(cls.TIMESTAMP_FORMAT)

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, event_dict: EventDict, *, use_color: bool = True) -> str:
        """Format an event dict into an aligned string."""
        level = str(event_dict.get("level", "info")).lower()
        message = str(event_dict.get("message", event_dict.get("event", "")))
        logger_name = str(event_dict.get("logger", "root"))
        category = event_dict.get("category")
        display_logger = f"{logger_name}/{category}" if category else logger_name

        extras = []
        for key, value in event_dict.items():
            if key in cls.EXCLUDED_KEYS:
                continue
            extras.append(f"{cls._maybe_color(key, 'key', use_color)}={cls._maybe_color(str(value), 'dim', use_color)}")
        if extras:
            message = f"{message} " + " ".join(extras)

        level_text = cls._fit_right(level.upper(), cls.LEVEL_WIDTH)
        return "".join(
            [
                cls._maybe_color(
                    cls._fit_right(cls._format_timestamp(event_dict.get("timestamp")), cls.TIMESTAMP_WIDTH),
                    "timestamp",
                    use_color,
                ),
                cls.SEPARATOR,
                cls._maybe_color(level_text, level, use_color) if level in COLORS else level_text,
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(display_logger, cls.LOGGER_WIDTH), "logger", use_color),
                cls.SEPARATOR,
                message,
            ]
        )
