"""
Log destinations.

- console: structlog host facility, or plain print in preview runs
- file: bounded, FIFO-pruned local file on a serial worker
- callback: any callable
- background: wrapper that moves a destination off the caller's thread
"""

from .background import BackgroundDestination
from .base import BaseDestination, Destination, LogRecord
from .callback import CallbackDestination
from .console import ConsoleDestination
from .file import DEFAULT_MAX_MESSAGES, FileDestination

__all__ = [
    "BackgroundDestination",
    "BaseDestination",
    "CallbackDestination",
    "ConsoleDestination",
    "DEFAULT_MAX_MESSAGES",
    "Destination",
    "FileDestination",
    "LogRecord",
]
