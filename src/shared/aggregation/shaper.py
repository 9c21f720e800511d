"""Response Shaper: storage representations to wire values."""

from __future__ import annotations

import dataclasses
import json
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from src.shared.logging import get_logger

log = get_logger("aggregation")

_TRUE_STRINGS = {"1", "true", "t", "yes", "y"}


def as_bool(value: Any) -> bool:
    """0/1 flags (ints, strings, single bytes) and real booleans to bool; None is False."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    if isinstance(value, (bytes, bytearray)):
        return any(value)
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def as_optional_bool(value: Any) -> Optional[bool]:
    """Tri-state flag: None stays None (e.g. doctor verification still pending)."""
    return None if value is None else as_bool(value)


def parse_json_object(raw: Any, *, context: Optional[Mapping[str, Any]] = None) -> Any:
    """
    JSON text column to a parsed structure.

    Already-decoded values (drivers that map JSON columns natively) pass through.
    Empty values and malformed text become {}; the latter is logged, never raised.
    """
    if raw is None or raw == "" or raw == b"":
        return {}
    if isinstance(raw, (dict, list)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        log.warning("json_column_unparseable", error=str(e), **dict(context or {}))
        return {}


def to_wire(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def shape(grouped: Mapping[Any, Any]) -> List[Dict[str, Any]]:
    """Grouped parents in insertion order, as plain dicts."""
    return [to_wire(parent) for parent in grouped.values()]
