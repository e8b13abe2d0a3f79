"""
Pytest configuration and fixtures for http-request-core tests.
"""

from typing import Dict, List, Optional

import pytest
import requests
import responses as responses_lib
from requests.structures import CaseInsensitiveDict

from http_request.core.context import Context
from http_request.core.logging.config import LoggingConfig
from http_request.core.logging.filters import clear_request_id
from http_request.core.transport import Transport


class FakeTransport(Transport):
    """Transport that records what it was asked to send and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: bytes = b"", headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.sent: List[requests.PreparedRequest] = []
        self.contexts: List[Context] = []

    def round_trip(self, request: requests.PreparedRequest, context: Context) -> requests.Response:
        self.sent.append(request)
        self.contexts.append(context)

        response = requests.Response()
        response.status_code = self.status_code
        response._content = self.body
        response._content_consumed = True
        response.headers = CaseInsensitiveDict(self.headers)
        response.url = request.url
        response.reason = "OK" if self.status_code < 400 else "Error"
        response.encoding = "utf-8"
        response.request = request
        return response

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def fake_transport():
    """In-memory transport; plug it in with use_transport(fake_transport)."""
    return FakeTransport()


@pytest.fixture(autouse=True)
def _reset_request_id():
    yield
    clear_request_id()


@pytest.fixture
def logging_config():
    """Console-only DEBUG logging config."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False,
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig with file output in a temporary directory.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file),
    )


@pytest.fixture
def make_transport():
    """Factory for FakeTransport with a canned status, body and headers."""
    return FakeTransport
