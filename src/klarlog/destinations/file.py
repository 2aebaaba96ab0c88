"""
Local file destination.

Keeps the most recent ``max_messages`` records in a single UTF-8 text file,
one record per line, oldest first. Every operation on the file (writes,
reads, clear, ensure-exists) runs on the destination's own ``SerialWorker``
so operations never interleave. ``log`` only formats the line and queues
the write; it never blocks on disk I/O and never raises.

Each write re-reads the file, appends, drops the oldest lines beyond the
bound and atomically replaces the file (temp file + ``os.replace``), so a
reader never sees a half-written file.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from concurrent.futures import Future
from pathlib import Path
from typing import Iterable, Optional, TypeVar

from ..core import get_diagnostics_logger
from ..exceptions import ConfigurationError
from ..formatters import format_file_line
from ..levels import LogLevel
from ..worker import SerialWorker
from .base import BaseDestination, LogRecord

T = TypeVar("T")

DEFAULT_MAX_MESSAGES = 1000
DEFAULT_BASE_NAME = "app"
DEFAULT_EXTENSION = "logs"

logger = get_diagnostics_logger("klarlog.destinations.file")


class FileDestination(BaseDestination):
    """Bounded, FIFO-pruned log file.

    Args:
        directory: Directory holding the log file (created lazily)
        base_name: File name without extension
        extension: File extension, appended as ``.<extension>``
        max_messages: Maximum number of lines kept in the file
        levels: Accepted levels (default: all)
        include_metadata: Append ``metadata.formatted()`` to each line
    """

    supports_metadata = True

    def __init__(
        self,
        directory: str | Path,
        *,
        base_name: str = DEFAULT_BASE_NAME,
        extension: str = DEFAULT_EXTENSION,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        levels: Iterable[LogLevel | str] | str | None = None,
        include_metadata: bool = True,
    ):
        super().__init__(levels)
        if max_messages < 1:
            raise ConfigurationError(
                f"max_messages must be at least 1, got {max_messages}",
                details={"max_messages": max_messages},
            )
        suffix = extension.lstrip(".")
        self.path = Path(directory) / (f"{base_name}.{suffix}" if suffix else base_name)
        self.max_messages = max_messages
        self.include_metadata = include_metadata
        self._worker = SerialWorker(name=f"klarlog-file:{self.path.name}")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def emit(self, record: LogRecord) -> None:
        try:
            line = format_file_line(
                record.level,
                record.category,
                record.message,
                record.metadata if self.include_metadata else None,
            )
            self._worker.submit(self._write_line, line)
        except Exception as exc:
            logger.debug("file_enqueue_failed", path=str(self.path), error=repr(exc))

    # -------------------------------------------------------------------------
    # Read-back and maintenance (serialized with writes)
    # -------------------------------------------------------------------------

    def read_logs(self) -> list[str]:
        """All stored lines, oldest first. Empty if the file does not exist."""
        return self._worker.submit(self._read_lines).result()

    def read_logs_string(self) -> str:
        """The raw file content, or an empty string if it does not exist."""
        return self._worker.submit(self._read_text).result()

    def clear_logs(self) -> bool:
        """Delete the log file. True if it was deleted or never existed."""
        return self._worker.submit(self._clear).result()

    def ensure_exists(self) -> Optional[Path]:
        """Create the directory and an empty file if needed; None on failure."""
        return self._worker.submit(self._ensure_exists).result()

    async def aread_logs(self) -> list[str]:
        return await self._await(self._worker.submit(self._read_lines))

    async def aread_logs_string(self) -> str:
        return await self._await(self._worker.submit(self._read_text))

    async def aclear_logs(self) -> bool:
        return await self._await(self._worker.submit(self._clear))

    async def aensure_exists(self) -> Optional[Path]:
        return await self._await(self._worker.submit(self._ensure_exists))

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every write queued so far is on disk (or failed)."""
        return self._worker.flush(timeout)

    def close(self) -> None:
        self._worker.stop()

    def __enter__(self) -> FileDestination:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileDestination(path={str(self.path)!r}, max_messages={self.max_messages})"

    @staticmethod
    async def _await(future: Future[T]) -> T:
        return await asyncio.wrap_future(future)

    # -------------------------------------------------------------------------
    # Worker-side operations
    # -------------------------------------------------------------------------

    def _write_line(self, line: str) -> None:
        lines = self._read_lines()
        lines.append(line)
        if len(lines) > self.max_messages:
            lines = lines[-self.max_messages :]
        try:
            self._atomic_write("\n".join(lines) + "\n")
        except (OSError, ValueError) as exc:
            logger.debug("file_write_failed", path=str(self.path), error=repr(exc))

    def _atomic_write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def _read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            logger.debug("file_read_failed", path=str(self.path), error=repr(exc))
            return ""

    def _read_lines(self) -> list[str]:
        return [line for line in self._read_text().split("\n") if line]

    def _clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.debug("file_clear_failed", path=str(self.path), error=repr(exc))
            return False
        return True

    def _ensure_exists(self) -> Optional[Path]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as exc:
            logger.debug("file_create_failed", path=str(self.path), error=repr(exc))
            return None
        return self.path
