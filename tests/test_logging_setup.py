import json
import logging

from tableside.core.logging_setup import JsonFormatter
from tableside.core.request_context import clear_request_context, set_request_context


def _record(message, *args, **extra):
    record = logging.LogRecord("tableside.test", logging.INFO, __file__, 1, message, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_request_context():
    set_request_context(request_id="req-1", user_id="7")
    try:
        line = JsonFormatter("%(message)s").format(_record("order %s placed", 12, order_id=12))
    finally:
        clear_request_context()

    payload = json.loads(line)
    assert payload["message"] == "order 12 placed"
    assert payload["level"] == "INFO"
    assert payload["module"] == "tableside.test"
    assert payload["request_id"] == "req-1"
    assert payload["user_id"] == "7"
    assert payload["order_id"] == 12


def test_formatter_masks_secrets():
    line = JsonFormatter("%(message)s").format(_record("login password=hunter2 token=abc"))

    message = json.loads(line)["message"]
    assert "hunter2" not in message
    assert "abc" not in message
    assert "password=***" in message


def test_formatter_includes_request_fields():
    record = _record("request completed", endpoint="/api/menu", method="GET", status_code=200, duration_ms=1.5)
    payload = json.loads(JsonFormatter("%(message)s").format(record))

    assert payload["endpoint"] == "/api/menu"
    assert payload["method"] == "GET"
    assert payload["status_code"] == 200
    assert payload["duration_ms"] == 1.5
