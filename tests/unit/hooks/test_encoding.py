"""
Тесты для codec hooks: JSON, form, multipart.
"""

import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from http_request.core.context import Context
from http_request.core.exceptions import DecodeError, EncodeError
from http_request.core.request import Request
from http_request.core.slots import Slot
from http_request.hooks.encoding import (
    FORM_CONTENT_TYPE,
    FORM_ENCODE,
    JSON_CONTENT_TYPE,
    JSON_ENCODE,
    form_encode,
    json_decode,
    json_encode,
    multipart_form_encode,
)

CTX = Context.background()


@dataclass
class User:
    id: int
    name: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# JSON
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestJsonEncode:

    def test_compact(self):
        assert json_encode(CTX, {"name": "wener", "tags": [1, 2]}) == b'{"name":"wener","tags":[1,2]}'

    def test_non_ascii_is_utf8(self):
        assert json_encode(CTX, {"name": "Вэнер"}) == '{"name":"Вэнер"}'.encode("utf-8")

    def test_rich_values(self):
        body = {
            "user": User(1, "wener"),
            "at": datetime(2024, 1, 2, tzinfo=timezone.utc),
            "amount": Decimal("1.50"),
            "slot": Slot("boxed"),
        }
        assert json.loads(json_encode(CTX, body)) == {
            "user": {"id": 1, "name": "wener"},
            "at": "2024-01-02T00:00:00+00:00",
            "amount": "1.50",
            "slot": "boxed",
        }

    def test_unserializable(self):
        with pytest.raises(EncodeError, match="json encode"):
            json_encode(CTX, {"x": object()})


class TestJsonDecode:

    def test_into_slot_with_model(self):
        out = Slot(model=User)
        json_decode(CTX, b'{"id": 1, "name": "wener"}', out)
        assert out.value == User(1, "wener")

    def test_into_dict(self):
        out = {}
        json_decode(CTX, b'{"a": 1}', out)
        assert out == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(DecodeError, match="json decode"):
            json_decode(CTX, b"{not json", Slot())

    def test_shape_mismatch(self):
        with pytest.raises(DecodeError):
            json_decode(CTX, b"[1]", {})


class TestJsonHook:

    def test_content_type_set(self):
        prepared = Request(method="POST", url="https://h/", body={"a": 1}, options=[JSON_ENCODE]).new_request()
        assert prepared.headers["Content-Type"] == JSON_CONTENT_TYPE

    def test_existing_content_type_kept(self):
        prepared = Request(
            method="POST",
            url="https://h/",
            header={"Content-Type": "application/vnd.api+json"},
            body={"a": 1},
            options=[JSON_ENCODE],
        ).new_request()
        assert prepared.headers["Content-Type"] == "application/vnd.api+json"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# FORM
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestForm:

    def test_form_encode(self):
        assert form_encode(CTX, {"name": "wener", "age": 18}) == b"age=18&name=wener"

    def test_form_encode_unsupported(self):
        with pytest.raises(EncodeError, match="form encode"):
            form_encode(CTX, 42)

    def test_form_request(self):
        prepared = Request(
            method="POST", url="https://h/login", body={"user": "wener", "remember": True}, options=[FORM_ENCODE]
        ).new_request()
        assert prepared.body == b"remember=true&user=wener"
        assert prepared.headers["Content-Type"] == FORM_CONTENT_TYPE

    def test_later_listed_encoder_wins(self):
        prepared = Request(method="POST", url="https://h/", body={"a": "1"}, options=[FORM_ENCODE, JSON_ENCODE]).new_request()
        assert prepared.body == b'{"a":"1"}'


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MULTIPART
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestMultipart:

    def test_fields_and_files(self):
        prepared = Request(
            method="POST",
            url="https://h/upload",
            body={"title": "report", "file": ("a.txt", b"hello", "text/plain"), "skipped": None},
            options=[multipart_form_encode(boundary="xyz")],
        ).new_request()

        assert prepared.headers["Content-Type"] == "multipart/form-data; boundary=xyz"
        assert prepared.body.startswith(b"--xyz\r\n")
        assert b'name="title"\r\n\r\nreport\r\n' in prepared.body
        assert b'name="file"; filename="a.txt"\r\nContent-Type: text/plain\r\n\r\nhello\r\n' in prepared.body
        assert b"skipped" not in prepared.body

    def test_file_objects_and_repeated_fields(self):
        prepared = Request(
            method="POST",
            url="https://h/upload",
            body={"tag": ["a", "b"], "file": ("data.bin", io.BytesIO(b"\x00\x01"))},
            options=[multipart_form_encode(boundary="b0undary")],
        ).new_request()

        assert prepared.body.count(b'name="tag"') == 2
        assert b"\x00\x01" in prepared.body

    def test_random_boundary_matches_header(self):
        prepared = Request(
            method="POST", url="https://h/upload", body={"a": "1"}, options=[multipart_form_encode()]
        ).new_request()

        boundary = prepared.headers["Content-Type"].split("boundary=")[1]
        assert prepared.body.startswith(f"--{boundary}\r\n".encode())

    def test_non_mapping_body(self):
        with pytest.raises(EncodeError, match="must be a mapping"):
            Request(method="POST", url="https://h/", body=["a"], options=[multipart_form_encode()]).new_request()

    def test_bad_file_tuple(self):
        with pytest.raises(EncodeError, match="expected"):
            Request(method="POST", url="https://h/", body={"f": ("only",)}, options=[multipart_form_encode()]).new_request()
