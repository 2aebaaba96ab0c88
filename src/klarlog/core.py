"""
structlog configuration for console output and internal diagnostics.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Literal, TextIO

import orjson
import structlog
from structlog.typing import EventDict, WrappedLogger

from .formatters import ConsoleFormatter

LogFormat = Literal["console", "json"]


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


def _discard(*args: Any, **kwargs: Any) -> None:
    return None


class DiagnosticsLogger:
    """Internal logger that stays silent until structlog has been configured.

    structlog's defaults print every level to stdout, which would leak
    swallowed destination errors into the host application's output.
    """

    def __init__(self, name: str):
        self._name = name

    def __getattr__(self, method: str) -> Any:
        if not structlog.is_configured():
            return _discard
        return getattr(structlog.get_logger(_name=self._name), method)


def get_diagnostics_logger(name: str) -> DiagnosticsLogger:
    """Logger for klarlog's own failures (write errors, failing destinations)."""
    return DiagnosticsLogger(name)


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class StreamRenderer:
    """Final processor that writes each event to a stream.

    Returns an empty string so the wrapped logger has nothing left to print.
    """

    def __init__(self, fmt: LogFormat = "console", stream: TextIO | None = None):
        self._fmt = fmt
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # resolved lazily so pytest's capsys replacement of sys.stdout is honoured
        return self._stream or sys.stdout

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        stream = self.stream
        try:
            if self._fmt == "json":
                output = orjson_dumps(event_dict, default=str)
            else:
                use_color = bool(getattr(stream, "isatty", lambda: False)())
                output = ConsoleFormatter.format(event_dict, use_color=use_color)
            stream.write(output + "\n")
            stream.flush()
        except (OSError, ValueError):
            # closed or broken stream; console output is best effort
            pass
        return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)  # type: ignore[arg-type]


def configure_console(
    *,
    level: str = "DEBUG",
    fmt: str = "console",
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog as the host facility behind ``ConsoleDestination``.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Output format, "console" (aligned columns) or "json"
        stream: Output stream (default: stdout at write time)
    """
    log_format: LogFormat = "json" if fmt.lower() == "json" else "console"
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            add_timestamp,
            add_logger_name,
            rename_event_key,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            StreamRenderer(fmt=log_format, stream=stream),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.DEBUG)),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
