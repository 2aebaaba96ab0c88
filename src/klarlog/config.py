"""
Settings and wiring helpers.

Every field can be set through the environment with the ``KLARLOG_`` prefix
(for example ``KLARLOG_FILE_ENABLED=true``) or a ``.env`` file.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core import configure_console
from .destinations import ConsoleDestination, Destination, FileDestination
from .destinations.file import DEFAULT_MAX_MESSAGES
from .exceptions import ConfigurationError
from .levels import LogLevel, parse_levels
from .registry import KlarLog


class ConsoleLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class KlarLogSettings(BaseSettings):
    """Destination configuration, fixed once loggers are built."""

    model_config = SettingsConfigDict(
        env_prefix="KLARLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    subsystem: str = Field(default="app", description="Subsystem identifier stamped on every record")
    level: ConsoleLevel = Field(default=ConsoleLevel.DEBUG, description="Minimum level printed by the console renderer")

    console_enabled: bool = Field(default=True, description="Add a ConsoleDestination")
    console_levels: str = Field(default="all", description="Comma-separated levels accepted by the console")
    console_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console output format")
    console_preview: bool = Field(default=False, description="Print plain lines instead of using structlog")

    file_enabled: bool = Field(default=False, description="Add a FileDestination")
    file_directory: str = Field(default="logs", description="Directory for the log file")
    file_base_name: str = Field(default="app", description="Log file name without extension")
    file_extension: str = Field(default="logs", description="Log file extension")
    file_max_messages: int = Field(default=DEFAULT_MAX_MESSAGES, ge=1, description="Maximum lines kept in the file")
    file_levels: str = Field(default="all", description="Comma-separated levels accepted by the file")

    @field_validator("console_levels", "file_levels")
    @classmethod
    def _check_levels(cls, value: str) -> str:
        parse_levels(value)
        return value

    @property
    def console_level_set(self) -> frozenset[LogLevel]:
        return parse_levels(self.console_levels)

    @property
    def file_level_set(self) -> frozenset[LogLevel]:
        return parse_levels(self.file_levels)


def build_destinations(settings: Optional[KlarLogSettings] = None) -> dict[str, Destination]:
    """Ordered name->destination mapping described by ``settings``."""
    settings = settings or KlarLogSettings()
    destinations: dict[str, Destination] = {}
    if settings.console_enabled:
        destinations["console"] = ConsoleDestination(
            settings.console_level_set,
            preview=settings.console_preview,
        )
    if settings.file_enabled:
        destinations["file"] = FileDestination(
            settings.file_directory,
            base_name=settings.file_base_name,
            extension=settings.file_extension,
            max_messages=settings.file_max_messages,
            levels=settings.file_level_set,
        )
    return destinations


def create_logger(
    categories: Mapping[str, str] | Iterable[str],
    settings: Optional[KlarLogSettings] = None,
    *,
    extra_destinations: Optional[Mapping[str, Destination]] = None,
) -> KlarLog:
    """Configure the console renderer and build a ``KlarLog`` from settings.

    ``extra_destinations`` are appended after the configured ones.
    """
    settings = settings or KlarLogSettings()
    configure_console(level=settings.level.value, fmt=settings.console_format.value)
    destinations = build_destinations(settings)
    for name, destination in (extra_destinations or {}).items():
        if name in destinations:
            raise ConfigurationError(f"Destination '{name}' is already configured", details={"name": name})
        destinations[name] = destination
    return KlarLog(settings.subsystem, categories, destinations)
