"""Tests for Slot targets and populate()."""

from dataclasses import dataclass

import pytest

from http_request.core.coercion import query_field
from http_request.core.slots import RequestSlot, ResponseSlot, Slot, build_model, populate


@dataclass
class User:
    id: int
    name: str = query_field("full_name", default="")


class Point:
    def __init__(self, x=0, y=0):
        self.x = x
        self.y = y

    @classmethod
    def from_field_map(cls, data):
        return cls(data["x"], data["y"])


class TestSlot:

    def test_empty_slot_is_falsy(self):
        assert not Slot()
        assert Slot(0)

    def test_special_slots_are_slots(self):
        assert isinstance(RequestSlot(), Slot)
        assert isinstance(ResponseSlot(), Slot)

    def test_repr(self):
        assert repr(ResponseSlot(1)) == "ResponseSlot(1)"


class TestBuildModel:

    def test_dataclass_uses_field_names(self):
        user = build_model(User, {"id": 1, "full_name": "Wener", "ignored": True})
        assert user == User(id=1, name="Wener")

    def test_from_field_map(self):
        point = build_model(Point, {"x": 1, "y": 2})
        assert (point.x, point.y) == (1, 2)

    def test_plain_callable_model(self):
        assert build_model(int, "42") == 42


class TestPopulate:

    def test_slot_assignment(self):
        slot = Slot()
        populate(slot, {"a": 1})
        assert slot.value == {"a": 1}

    def test_slot_with_model(self):
        slot = Slot(model=User)
        populate(slot, {"id": 7})
        assert slot.value == User(id=7)

    def test_dict_target_is_replaced(self):
        target = {"stale": True}
        populate(target, {"fresh": True})
        assert target == {"fresh": True}

    def test_list_target_is_replaced_in_place(self):
        target = [1]
        populate(target, [2, 3])
        assert target == [2, 3]

    def test_object_attributes(self):
        target = Point()
        populate(target, {"x": 5})
        assert target.x == 5

    @pytest.mark.parametrize("target,payload", [({}, [1]), ([], {"a": 1}), (Point(), [1])])
    def test_shape_mismatch(self, target, payload):
        with pytest.raises(TypeError, match="cannot decode"):
            populate(target, payload)
