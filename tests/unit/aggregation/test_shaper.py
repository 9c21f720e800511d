from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

import pytest

from src.shared.aggregation import as_bool, as_optional_bool, parse_json_object, shape, to_wire


@pytest.mark.parametrize("value", [1, "1", True, Decimal("1"), b"\x01", "true"])
def test_truthy_flags(value):
    assert as_bool(value) is True


@pytest.mark.parametrize("value", [0, "0", False, None, b"\x00", ""])
def test_falsy_flags(value):
    assert as_bool(value) is False


def test_optional_bool_keeps_null():
    assert as_optional_bool(None) is None
    assert as_optional_bool(0) is False


def test_json_text_is_parsed():
    assert parse_json_object('{"protein": "11g"}') == {"protein": "11g"}


def test_already_parsed_json_passes_through():
    value = {"fiber": "8g"}
    assert parse_json_object(value) is value


@pytest.mark.parametrize("raw", [None, "", b""])
def test_empty_json_becomes_empty_object(raw):
    assert parse_json_object(raw) == {}


def test_malformed_json_becomes_empty_object():
    assert parse_json_object("{not json", context={"product_id": 7}) == {}


@dataclass(frozen=True)
class Child:
    id: int


@dataclass(frozen=True)
class Parent:
    id: int
    children: Tuple[Child, ...] = ()


def test_shape_lists_parents_in_order_as_dicts():
    grouped = {2: Parent(2, (Child(5),)), 1: Parent(1)}
    assert shape(grouped) == [
        {"id": 2, "children": ({"id": 5},)},
        {"id": 1, "children": ()},
    ]


def test_to_wire_leaves_plain_values_alone():
    assert to_wire({"a": 1}) == {"a": 1}
