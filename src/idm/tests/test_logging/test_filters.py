# src/idm/tests/test_logging/test_filters.py
import logging

from idm.core.logging.filters import (
    RedactFilter,
    RequestIdFilter,
    reset_request_id,
    set_request_id,
)


def make_record():
    # name, level, pathname, lineno, msg, args, exc_info
    return logging.LogRecord("idm", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_request_id_filter_defaults_to_dash():
    rec = make_record()
    token = set_request_id(None)
    try:
        assert RequestIdFilter().filter(rec) is True
    finally:
        reset_request_id(token)
    assert rec.request_id == "-"


def test_request_id_filter_uses_contextvar():
    rec = make_record()
    token = set_request_id("abc-123")
    try:
        RequestIdFilter().filter(rec)
    finally:
        reset_request_id(token)
    assert rec.request_id == "abc-123"


def test_request_id_filter_respects_record_extra():
    rec = make_record()
    rec.request_id = "explicit"
    token = set_request_id("context-id")
    try:
        RequestIdFilter().filter(rec)
    finally:
        reset_request_id(token)
    assert rec.request_id == "explicit"


def test_redact_filter_masks_secrets():
    rec = make_record()
    rec.authorization = "Bearer abc"
    rec.JWT_KEY = "secret-key"
    rec.employee_name = "John"

    assert RedactFilter().filter(rec) is True

    assert rec.authorization == RedactFilter.MASK
    assert rec.JWT_KEY == RedactFilter.MASK
    assert rec.employee_name == "John"
