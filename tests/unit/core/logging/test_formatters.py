"""
Tests for log formatters.

Tests JSONFormatter, TextFormatter, and get_formatter.
"""

import json
import logging
import sys

import pytest

from http_request.core.logging.formatters import (
    JSONFormatter,
    TextFormatter,
    extra_fields,
    get_formatter,
)


def make_record(msg="Test message", level=logging.INFO, exc_info=None, **fields):
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in fields.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_format(self):
        """JSONFormatter outputs valid JSON."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        """Extra record attributes become JSON keys."""
        data = json.loads(JSONFormatter().format(make_record(method="GET", status_code=200)))

        assert data["method"] == "GET"
        assert data["status_code"] == 200

    def test_non_serializable_values(self):
        """Values json cannot handle are stringified."""
        data = json.loads(JSONFormatter().format(make_record(obj=object())))

        assert data["obj"].startswith("<object object")

    def test_exception(self):
        """exc_info is rendered."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_basic_format(self):
        """Text format carries level, logger and message."""
        output = TextFormatter().format(make_record())

        assert "[INFO]" in output
        assert "[test]" in output
        assert output.endswith("Test message")

    def test_fields_as_key_value(self):
        """Extra fields are appended as key=value."""
        output = TextFormatter().format(make_record(method="GET", status_code=200))

        assert output.endswith("Test message method=GET status_code=200")


class TestExtraFields:

    def test_reserved_and_private_attributes_are_skipped(self):
        record = make_record(request_id="r1", _private=True)
        assert extra_fields(record) == [("request_id", "r1")]


class TestGetFormatter:
    """Tests for get_formatter."""

    @pytest.mark.parametrize("name,cls", [("json", JSONFormatter), ("TEXT", TextFormatter)])
    def test_known_formats(self, name, cls):
        assert isinstance(get_formatter(name), cls)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown format type"):
            get_formatter("xml")
