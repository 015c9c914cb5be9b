"""
AccessLog - Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    access_logger:  Logger injected into writers/middleware, captured by caplog
    access_lines:   Callable returning the access lines logged so far
    make_request:   Factory building a starlette Request from scope parts
    fixed_now:      The Apache documentation timestamp, -0700
    sink:           Fresh in-memory BufferSink
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from starlette.requests import Request

from accesslog.sinks import BufferSink

ACCESS_LOGGER_NAME = "accesslog.tests.access"


@pytest.fixture
def access_logger(caplog):
    """
    Logger dedicated to access lines in tests.

    Propagates to the root logger so caplog sees every record.
    """
    caplog.set_level(logging.INFO, logger=ACCESS_LOGGER_NAME)
    logger = logging.getLogger(ACCESS_LOGGER_NAME)
    logger.propagate = True
    return logger


@pytest.fixture
def access_lines(caplog, access_logger):
    """Returns a callable listing the messages logged on the access logger."""

    def lines():
        return [r.getMessage() for r in caplog.records if r.name == ACCESS_LOGGER_NAME]

    return lines


@pytest.fixture
def make_request():
    """
    Builds a Request from the pieces formatters look at.

    Usage:
        request = make_request("/search", query=b"q=1", headers={"User-Agent": "curl"})
    """

    def _make(
        path="/",
        method="GET",
        query=b"",
        headers=None,
        client=("127.0.0.1", 51234),
        http_version="1.1",
    ):
        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]
        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": http_version,
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode("latin-1"),
            "query_string": query,
            "headers": raw_headers,
            "client": client,
            "server": ("testserver", 80),
        }
        return Request(scope)

    return _make


@pytest.fixture
def fixed_now():
    return datetime(2000, 10, 10, 13, 55, 36, tzinfo=timezone(timedelta(hours=-7)))


@pytest.fixture
def sink():
    return BufferSink()
