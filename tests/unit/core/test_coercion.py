"""
Tests for values_of() / value_string().
"""

from collections import namedtuple
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

import pytest

from http_request.core.coercion import query_field, value_string, values_of
from http_request.core.exceptions import CoercionError
from http_request.core.slots import Slot
from http_request.core.values import Values


class Color(Enum):
    RED = "red"


@dataclass
class Search:
    text: str = query_field("q")
    page: int = query_field(omitempty=True, default=0)
    size: int = 0
    secret: str = query_field("-", default="hidden")


Point = namedtuple("Point", ["x", "y"])


class Account:
    def __init__(self, login):
        self.login = login

    def to_field_map(self):
        return {"login": self.login, "kind": "user"}


class Broken:
    def to_field_map(self):
        raise RuntimeError("boom")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# values_of
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestValuesOf:

    def test_none_gives_empty_values(self):
        assert values_of(None) == Values()

    def test_values_returned_as_is(self):
        v = Values({"a": "1"})
        assert values_of(v) is v

    def test_string_mapping(self):
        assert values_of({"name": "wener"}).encode() == "name=wener"

    def test_mixed_mapping_is_deterministic(self):
        assert values_of({"name": "wener", "age": 18}).encode() == "age=18&name=wener"

    def test_list_values_and_none_elements(self):
        v = values_of({"v": [None, "v"]})
        assert v["v"] == ["", "v"]

    def test_none_value_is_skipped(self):
        v = values_of({"a": None, "b": "x"})
        assert "a" not in v
        assert v["b"] == ["x"]

    def test_tuple_values_repeat_the_key(self):
        assert values_of({"id": (1, 2)}).encode() == "id=1&id=2"

    def test_slot_is_unwrapped(self):
        assert values_of(Slot({"a": "b"})).encode() == "a=b"

    def test_dataclass_with_field_names(self):
        assert values_of(Search(text="python")).encode() == "q=python&size="

    def test_dataclass_omitempty_keeps_non_zero(self):
        assert values_of(Search(text="python", page=2)).get("page") == "2"

    def test_namedtuple(self):
        assert values_of(Point(1, 2)).encode() == "x=1&y=2"

    def test_to_field_map(self):
        assert values_of(Account("wener")).encode() == "kind=user&login=wener"

    def test_nested_dataclass_field(self):
        v = values_of({"filter": Search(text="py"), "page": 1})
        assert v.get("filter") == '{"q":"py","size":0}'
        assert v.get("page") == "1"

    def test_failing_to_field_map_raises_coercion_error(self):
        with pytest.raises(CoercionError, match="to_field_map failed"):
            values_of(Broken())

    @pytest.mark.parametrize("value", [1, "text", 1.5, [("a", "b")]])
    def test_unsupported_top_level_types(self, value):
        with pytest.raises(CoercionError, match="unsupported type"):
            values_of(value)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# value_string
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestValueString:

    @pytest.mark.parametrize("value", [None, 0, 0.0, False, "", [], {}])
    def test_zero_values_are_empty(self, value):
        assert value_string(value) == ""

    def test_true(self):
        assert value_string(True) == "true"

    def test_integral_float_has_no_exponent(self):
        assert value_string(1000000000018.0) == "1000000000018"

    def test_fractional_float(self):
        assert value_string(1.5) == "1.5"

    def test_datetime_utc_uses_z(self):
        value = datetime(2024, 1, 2, 3, 4, 5, 999, tzinfo=timezone.utc)
        assert value_string(value) == "2024-01-02T03:04:05Z"

    def test_datetime_with_offset(self):
        value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=8)))
        assert value_string(value) == "2024-01-02T03:04:05+08:00"

    def test_date(self):
        assert value_string(date(2024, 1, 2)) == "2024-01-02"

    def test_enum_uses_value(self):
        assert value_string(Color.RED) == "red"

    def test_nested_slot(self):
        assert value_string(Slot(Slot(7))) == "7"

    def test_bytes(self):
        assert value_string(b"abc") == "abc"

    def test_nested_mapping_is_json(self):
        value = {"a": 1, "at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "c": Color.RED}
        assert value_string(value) == '{"a":1,"at":"2024-01-02T03:04:05Z","c":"red"}'

    def test_nested_record_is_json(self):
        assert value_string(Account("wener")) == '{"login":"wener","kind":"user"}'
