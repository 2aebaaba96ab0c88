"""
ConsoleDestination: structlog host facility and preview fallback.
"""

from __future__ import annotations

import io

import pytest
from structlog.testing import capture_logs

from klarlog.destinations.console import ConsoleDestination
from klarlog.levels import LogLevel
from klarlog.metadata import LogMetadata


class TestNativeFacility:
    def test_routes_through_structlog_with_subsystem_and_category(self) -> None:
        dest = ConsoleDestination(preview=False)
        with capture_logs() as logs:
            dest.log("com.example.app", "network", LogLevel.WARNING, "slow response")

        assert len(logs) == 1
        entry = logs[0]
        assert entry["_name"] == "com.example.app"
        assert entry["category"] == "network"
        assert entry["event"] == "slow response"
        assert entry["log_level"] == "warning"

    @pytest.mark.parametrize(
        ("level", "native"),
        [
            (LogLevel.DEBUG, "debug"),
            (LogLevel.INFO, "info"),
            (LogLevel.NOTICE, "info"),
            (LogLevel.WARNING, "warning"),
            (LogLevel.ERROR, "error"),
            (LogLevel.CRITICAL, "critical"),
        ],
    )
    def test_level_mapping(self, level, native) -> None:
        dest = ConsoleDestination(preview=False)
        with capture_logs() as logs:
            dest.log("s", "c", level, "m")
        assert logs[0]["log_level"] == native

    def test_metadata_becomes_structured_fields(self) -> None:
        dest = ConsoleDestination(preview=False)
        with capture_logs() as logs:
            dest.log("s", "db", LogLevel.INFO, "query", LogMetadata({"rows": 2, "event": "select", "tags": ["a"]}))

        entry = logs[0]
        assert entry["rows"] == 2
        assert entry["tags"] == ["a"]
        assert entry["metadata_event"] == "select"
        assert entry["event"] == "query"

    def test_exception_rendering_keys_stay_plain_fields(self) -> None:
        dest = ConsoleDestination(preview=False)
        with capture_logs() as logs:
            dest.log("s", "c", LogLevel.ERROR, "m", LogMetadata(exc_info=True, stack_info=True))

        entry = logs[0]
        assert entry["metadata_exc_info"] is True
        assert entry["metadata_stack_info"] is True
        assert "exc_info" not in entry
        assert "stack_info" not in entry

    def test_filtered_levels_produce_nothing(self) -> None:
        dest = ConsoleDestination(levels="error,critical", preview=False)
        with capture_logs() as logs:
            dest.log("s", "c", LogLevel.INFO, "ignored")
            dest.log("s", "c", LogLevel.ERROR, "kept")
        assert [entry["event"] for entry in logs] == ["kept"]


class TestPreviewFallback:
    def test_plain_line_on_stream(self) -> None:
        stream = io.StringIO()
        dest = ConsoleDestination(preview=True, stream=stream)
        dest.log("com.example.app", "auth", LogLevel.NOTICE, "signed in")
        assert stream.getvalue() == "[NOTICE][com.example.app][auth] signed in\n"

    def test_metadata_appended(self) -> None:
        stream = io.StringIO()
        dest = ConsoleDestination(preview=True, stream=stream)
        dest.log("s", "c", LogLevel.INFO, "m", LogMetadata({"b": 1, "a": "x"}))
        assert stream.getvalue() == '[INFO][s][c] m a="x" b=1\n'

    def test_defaults_to_stdout(self, capsys) -> None:
        ConsoleDestination(preview=True).log("s", "c", LogLevel.ERROR, "boom")
        assert capsys.readouterr().out == "[ERROR][s][c] boom\n"

    def test_preview_detected_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("KLARLOG_CONSOLE_PREVIEW", "1")
        assert ConsoleDestination().preview is True

    def test_preview_off_by_default(self) -> None:
        assert ConsoleDestination().preview is False

    def test_filtered_levels_print_nothing(self) -> None:
        stream = io.StringIO()
        dest = ConsoleDestination(levels=[LogLevel.ERROR], preview=True, stream=stream)
        dest.log("s", "c", LogLevel.DEBUG, "hidden")
        assert stream.getvalue() == ""


class TestBestEffort:
    def test_broken_stream_is_swallowed(self) -> None:
        stream = io.StringIO()
        stream.close()
        dest = ConsoleDestination(preview=True, stream=stream)
        dest.log("s", "c", LogLevel.ERROR, "nowhere")
