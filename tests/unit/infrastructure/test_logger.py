"""
Unit tests for logging setup.
"""

import json
import logging

from gardien.infrastructure.monitoring.logger import (
    JSONFormatter,
    RequestIdFilter,
    bind_request_id,
    request_id_ctx,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "gardien.test", logging.WARNING, __file__, 1, "Sign-in rejected", None, None
    )
    record.__dict__.update(extra)
    return record


class TestLogging:
    """Unit tests for JSON formatting and request id binding."""

    def test_json_includes_bound_request_id(self):
        """Test records carry the request id bound to the context."""
        token = bind_request_id("req-abc")
        try:
            record = _record()
            RequestIdFilter().filter(record)
        finally:
            request_id_ctx.reset(token)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["request_id"] == "req-abc"
        assert entry["level"] == "WARNING"
        assert entry["message"] == "Sign-in rejected"

    def test_json_without_request(self):
        """Test records outside a request get a placeholder id."""
        record = _record()
        RequestIdFilter().filter(record)

        assert json.loads(JSONFormatter().format(record))["request_id"] == "-"

    def test_json_includes_extra_fields(self):
        """Test `extra=` fields are emitted, standard attributes are not."""
        entry = json.loads(JSONFormatter().format(_record(reason="NonceExpired")))

        assert entry["reason"] == "NonceExpired"
        assert "pathname" not in entry
        assert "args" not in entry
