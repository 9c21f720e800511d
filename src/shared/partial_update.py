"""
Partial-update rules for PUT bodies whose fields are all optional.

A submitted value replaces the stored one only when it is present, not null and
not an empty string. The merged record is compared field by field with what is
stored; numbers compare by decimal value and flags as 0/1, so "499.00" vs 499
is not a change.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Sequence, Tuple

from src.shared.aggregation import as_bool


def is_provided(value: Any) -> bool:
    return value is not None and value != ""


def provided(changes: Mapping[str, Any], fields: Sequence[str]) -> Dict[str, Any]:
    return {name: changes[name] for name in fields if is_provided(changes.get(name))}


def merge(current: Mapping[str, Any], changes: Mapping[str, Any], fields: Sequence[str]) -> Dict[str, Any]:
    return {
        name: changes[name] if is_provided(changes.get(name)) else current.get(name)
        for name in fields
    }


def same_value(stored: Any, proposed: Any) -> bool:
    if stored is None or proposed is None:
        return stored is None and proposed is None
    if isinstance(stored, bool) or isinstance(proposed, bool):
        return as_bool(stored) == as_bool(proposed)
    if isinstance(stored, str) and isinstance(proposed, str):
        return stored == proposed
    try:
        return Decimal(str(stored)) == Decimal(str(proposed))
    except InvalidOperation:
        return str(stored) == str(proposed)


def changed_fields(current: Mapping[str, Any], merged: Mapping[str, Any], fields: Sequence[str]) -> Tuple[str, ...]:
    return tuple(name for name in fields if not same_value(current.get(name), merged.get(name)))


def to_storage(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Booleans are persisted as 0/1 flags."""
    return {name: int(value) if isinstance(value, bool) else value for name, value in values.items()}
