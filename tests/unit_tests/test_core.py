"""
structlog console configuration and processors.
"""

from __future__ import annotations

import io

import orjson

from klarlog.core import (
    StreamRenderer,
    add_logger_name,
    configure_console,
    get_logger,
    orjson_dumps,
    rename_event_key,
)


class TestProcessors:
    def test_logger_name_and_message_keys(self) -> None:
        event = {"_name": "svc", "event": "hello"}
        event = rename_event_key(None, "info", add_logger_name(None, "info", event))
        assert event == {"logger": "svc", "message": "hello"}

    def test_logger_name_defaults_to_root(self) -> None:
        assert add_logger_name(None, "info", {})["logger"] == "root"

    def test_orjson_dumps(self) -> None:
        assert orjson_dumps({"a": 1}) == '{"a":1}'


class TestStreamRenderer:
    def test_json_output(self) -> None:
        stream = io.StringIO()
        result = StreamRenderer("json", stream)(None, "info", {"message": "m", "n": 1})
        assert result == ""
        assert orjson.loads(stream.getvalue()) == {"message": "m", "n": 1}

    def test_closed_stream_is_ignored(self) -> None:
        stream = io.StringIO()
        stream.close()
        assert StreamRenderer("console", stream)(None, "info", {"message": "m"}) == ""


class TestConfigureConsole:
    def test_json_pipeline(self) -> None:
        stream = io.StringIO()
        configure_console(level="INFO", fmt="json", stream=stream)

        log = get_logger("svc")
        log.debug("filtered")
        log.warning("kept", attempt=2)

        (line,) = stream.getvalue().splitlines()
        record = orjson.loads(line)
        assert record["message"] == "kept"
        assert record["logger"] == "svc"
        assert record["level"] == "warning"
        assert record["attempt"] == 2
        assert "timestamp" in record

    def test_console_pipeline(self) -> None:
        stream = io.StringIO()
        configure_console(stream=stream)

        get_logger("svc").info("aligned", category="db")

        output = stream.getvalue()
        assert "INFO" in output
        assert "svc/db" in output
        assert "aligned" in output
        assert "\033[" not in output
