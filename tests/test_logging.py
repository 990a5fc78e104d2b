import json
import logging
import sys

from storefront.core.logging_config import (
    SecurityFilter,
    StructuredFormatter,
    clear_request_context,
    set_request_context,
)

def make_record(msg, *args, exc_info=None):
    return logging.LogRecord("storefront.test", logging.INFO, __file__, 10, msg, args, exc_info)

def test_formatter_emits_json_with_trace_context():
    set_request_context(request_id="req-1", user_id="42")
    try:
        record = make_record("Order %s placed", 7)
        record.extra_fields = {"order_id": 7}
        out = json.loads(StructuredFormatter("storefront", "test", "1.0.0").format(record))
    finally:
        clear_request_context()

    assert out["message"] == "Order 7 placed"
    assert out["service"] == "storefront"
    assert out["trace"] == {"request_id": "req-1", "user_id": "42"}
    assert out["custom"] == {"order_id": 7}

def test_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record("failed", exc_info=sys.exc_info())
    out = json.loads(StructuredFormatter("s", "e", "v").format(record))
    assert out["error"]["type"] == "ValueError"

def test_security_filter_redacts_values():
    record = make_record("login attempt password=%s token: abc", "hunter2")
    SecurityFilter().filter(record)
    message = record.getMessage()
    assert "hunter2" not in message
    assert "abc" not in message
    assert "password=***REDACTED***" in message
