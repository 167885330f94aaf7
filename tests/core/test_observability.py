"""Structured Logging — verifies the JSON formatter and idempotent setup."""

import json
import logging

from inkwell.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "inkwell.test", logging.WARNING, __file__, 1, "Post %s missing", ("p1",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_core_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "inkwell.test"
    assert payload["message"] == "Post p1 missing"
    assert "timestamp" in payload
    assert "path" not in payload


def test_json_formatter_copies_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(path="/api/posts", status_code=404, post_id="p1", secret="x"),
    ))
    assert payload["path"] == "/api/posts"
    assert payload["status_code"] == 404
    assert payload["post_id"] == "p1"
    assert "secret" not in payload


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging("DEBUG", "text")
        setup_logging("DEBUG", "json")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
