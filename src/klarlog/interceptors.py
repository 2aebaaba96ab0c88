"""
Bridge from the standard library ``logging`` module into a category logger.
"""

from __future__ import annotations

import logging
from typing import Optional

from .levels import LogLevel
from .registry import CategoryLogger


class CategoryHandler(logging.Handler):
    """
    Forward standard library log records to a ``CategoryLogger``.

    Third-party libraries that use ``logging`` then reach the same
    destinations as application code. The stdlib logger name is kept as
    ``logger`` metadata.
    """

    def __init__(self, category_logger: CategoryLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self.category_logger = category_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            self.category_logger.log(LogLevel.from_stdlib(record.levelno), msg, {"logger": record.name})
        except Exception:
            self.handleError(record)


def install_handler(
    category_logger: CategoryLogger,
    logger_name: Optional[str] = None,
    *,
    level: int = logging.NOTSET,
) -> CategoryHandler:
    """Attach a ``CategoryHandler`` to a stdlib logger (root by default)."""
    handler = CategoryHandler(category_logger, level)
    logging.getLogger(logger_name).addHandler(handler)
    return handler
