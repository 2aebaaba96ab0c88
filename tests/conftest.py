import os
import typing as t

import pytest
import structlog

from klarlog.destinations.base import LogRecord
from klarlog.destinations.callback import CallbackDestination


@pytest.fixture(autouse=True)
def reset_structlog():
    """
    Every test starts from structlog's default configuration.
    configure_console() and capture_logs() mutate global state.
    """
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch, tmp_path):
    """Keep KLARLOG_* variables and stray .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("KLARLOG_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def log_dir(tmp_path):
    """Directory for file destinations (not created up front)."""
    return tmp_path / "logs" / "nested"


@pytest.fixture
def recorded() -> t.List[LogRecord]:
    return []


@pytest.fixture
def recording_destination(recorded) -> CallbackDestination:
    """Destination that appends every accepted record to ``recorded``."""
    return CallbackDestination(recorded.append)
