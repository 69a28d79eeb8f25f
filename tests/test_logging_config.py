"""
Tests for the log formatters.
"""
import json
import logging

from config.logging_config import JSONFormatter, StandardFormatter, relay_context
from realtime.registry import Connection


def make_record(**extra):
    record = logging.LogRecord("realtime.relay", logging.INFO, __file__, 10, "Relay event 'ping'", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_relay_context(self):
        connection = Connection(transport=None)
        connection.user_id, connection.society_id = 4, 1
        line = JSONFormatter().format(make_record(**relay_context(connection, "ping")))

        data = json.loads(line)
        assert data["message"] == "Relay event 'ping'"
        assert data["event_type"] == "ping"
        assert data["user_id"] == 4
        assert data["connection_id"] == connection.connection_id[:8]

    def test_json_omits_missing_context(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert "event_type" not in data
        assert data["level"] == "INFO"

    def test_standard_appends_context(self):
        formatter = StandardFormatter(fmt="%(levelname)s %(message)s")
        line = formatter.format(make_record(event_type="ping", society_id=1))
        assert line.endswith("[society_id=1 event_type=ping]")
