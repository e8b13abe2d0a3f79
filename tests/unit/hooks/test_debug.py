"""
Tests for the debug dump hook.
"""

import io

import requests

from http_request.core.extension import HookOrder
from http_request.core.request import Request
from http_request.hooks.debug import DebugOptions, debug_hook, dump_request, dump_response
from http_request.hooks.transport import use_transport


def run(transport, options, **request_kwargs):
    request_kwargs.setdefault("url", "https://api.example.com/users?page=2")
    Request(options=[use_transport(transport), debug_hook(options)], **request_kwargs).do()


class TestDumps:

    def test_dump_request(self):
        prepared = Request(
            method="POST", url="https://api.example.com/users?x=1", header={"X-Tag": "a"}, raw_body=b"payload"
        ).new_request()

        text = dump_request(prepared, body=True)

        assert text.startswith("POST /users?x=1 HTTP/1.1\r\nHost: api.example.com\r\n")
        assert "X-Tag: a\r\n" in text
        assert text.endswith("\r\n\r\npayload")

    def test_dump_response(self):
        response = requests.Response()
        response.status_code = 404
        response.reason = "Not Found"
        response.headers["Content-Type"] = "text/plain"
        response._content = b"gone"

        text = dump_response(response, body=True)

        assert text == "HTTP/1.1 404 Not Found\r\nContent-Type: text/plain\r\n\r\ngone"


class TestDebugHook:

    def test_runs_last(self):
        assert debug_hook().order == HookOrder.DEBUG

    def test_request_and_response(self, make_transport):
        out = io.StringIO()
        run(make_transport(body=b"ok"), DebugOptions(out=out))

        text = out.getvalue()
        assert "-> GET https://api.example.com/users?page=2\n" in text
        assert "GET /users?page=2 HTTP/1.1\r\nHost: api.example.com\r\n" in text
        assert "<- GET https://api.example.com/users?page=2\n" in text
        assert "HTTP/1.1 200 OK\r\n" in text
        assert "ok" not in text.split("HTTP/1.1 200 OK")[1]

    def test_body(self, make_transport):
        out = io.StringIO()
        run(make_transport(body=b"response-body"), DebugOptions(out=out, body=True),
            method="POST", raw_body=b"request-body")

        text = out.getvalue()
        assert "request-body" in text
        assert "response-body" in text

    def test_disable(self, fake_transport):
        out = io.StringIO()
        run(fake_transport, DebugOptions(out=out, disable=True))
        assert out.getvalue() == ""

    def test_error_only_skips_success_response(self, make_transport):
        out = io.StringIO()
        run(make_transport(status_code=200), DebugOptions(out=out, error_only=True))

        text = out.getvalue()
        assert "-> GET" in text
        assert "<-" not in text

    def test_error_only_dumps_errors(self, make_transport):
        out = io.StringIO()
        run(make_transport(status_code=503), DebugOptions(out=out, error_only=True))
        assert "HTTP/1.1 503 Error" in out.getvalue()

    def test_custom_error_predicate(self, make_transport):
        out = io.StringIO()
        options = DebugOptions(out=out, error_only=True, is_error=lambda r: r.status_code == 200)
        run(make_transport(status_code=200), options)
        assert "<- GET" in out.getvalue()

    def test_defaults_to_stderr(self, fake_transport, capsys):
        run(fake_transport, None)
        assert "-> GET" in capsys.readouterr().err
