from decimal import Decimal

from src.shared.partial_update import changed_fields, is_provided, merge, provided, same_value, to_storage
from src.subscription.domain.plan import PLAN_FIELDS

STORED = {
    "id": 1,
    "name": "Gold",
    "description": "Yearly plan",
    "price": Decimal("499.00"),
    "currency": "INR",
    "duration_days": 365,
    "is_active": 1,
}


def test_null_and_empty_values_are_not_provided():
    assert not is_provided(None)
    assert not is_provided("")
    assert is_provided(0)
    assert is_provided(False)


def test_merge_keeps_stored_value_for_missing_null_or_empty():
    merged = merge(STORED, {"name": "", "description": None, "currency": "USD"}, PLAN_FIELDS)
    assert merged["name"] == "Gold"
    assert merged["description"] == "Yearly plan"
    assert merged["currency"] == "USD"


def test_numbers_compare_by_value():
    assert same_value(Decimal("499.00"), "499")
    assert same_value(365, "365")
    assert not same_value(Decimal("499.00"), 599)


def test_flags_compare_as_booleans():
    assert same_value(1, True)
    assert not same_value(1, False)


def test_no_effective_change_detected():
    merged = merge(STORED, {"price": "499", "is_active": True, "name": "Gold"}, PLAN_FIELDS)
    assert changed_fields(STORED, merged, PLAN_FIELDS) == ()


def test_changed_fields_in_column_order():
    merged = merge(STORED, {"is_active": False, "name": "Platinum"}, PLAN_FIELDS)
    assert changed_fields(STORED, merged, PLAN_FIELDS) == ("name", "is_active")


def test_provided_filters_to_known_fields():
    assert provided({"name": "X", "price": "", "unknown": 1}, PLAN_FIELDS) == {"name": "X"}


def test_booleans_stored_as_flags():
    assert to_storage({"is_active": False, "name": "Gold"}) == {"is_active": 0, "name": "Gold"}
