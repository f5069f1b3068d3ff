"""Tests for JSON log formatting and request context."""

import json
import logging

from academy.core.logging import GradingJsonFormatter, RequestContextFilter, request_id_var


def _record(msg="Exam summary computed", **extra):
    record = logging.LogRecord("academy.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _format(record):
    RequestContextFilter().filter(record)
    return json.loads(GradingJsonFormatter("%(timestamp)s %(level)s %(logger)s").format(record))


def test_record_fields():
    """Each line carries event, level, service and env."""
    line = _format(_record(exam_id="midterm", participants=3))
    assert line["event"] == "Exam summary computed"
    assert line["level"] == "INFO"
    assert line["logger"] == "academy.test"
    assert line["service"] == "Academy Grading API"
    assert line["env"] == "test"
    assert line["exam_id"] == "midterm"
    assert line["participants"] == 3
    assert "message" not in line


def test_request_id_from_context():
    """The filter stamps the request id bound for the current request."""
    token = request_id_var.set("req-42")
    try:
        line = _format(_record())
    finally:
        request_id_var.reset(token)
    assert line["request_id"] == "req-42"
    assert "exam_id" not in line


def test_explicit_request_id_kept():
    """A request id passed in extra is not overwritten."""
    token = request_id_var.set("req-context")
    try:
        line = _format(_record(request_id="req-explicit"))
    finally:
        request_id_var.reset(token)
    assert line["request_id"] == "req-explicit"


def test_no_request_outside_requests():
    """Outside a request the id is null."""
    assert _format(_record())["request_id"] is None
