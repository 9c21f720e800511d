"""
Deduplication policy for nested collections.

Collections are tuples (tens of elements at most), so a linear scan is used.
The first entity seen for a key wins; later duplicates are dropped, never merged.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Callable, Hashable, Optional, Tuple, TypeVar

T = TypeVar("T")
KeyFn = Callable[[T], Hashable]


def append_unique(items: Tuple[T, ...], candidate: Optional[T], key: KeyFn) -> Tuple[T, ...]:
    """Return `items` plus `candidate` unless it is None or its key is already present."""
    if candidate is None:
        return items
    wanted = key(candidate)
    if any(key(item) == wanted for item in items):
        return items
    return items + (candidate,)


def upsert_unique(
    items: Tuple[T, ...],
    candidate: Optional[T],
    key: KeyFn,
    update: Callable[[T], T],
) -> Tuple[T, ...]:
    """
    Insert `candidate` when its key is absent; otherwise replace the existing member
    with `update(existing)`. Used to grow a member's own nested collection (e.g. a
    clinic's schedules) while keeping the first-seen member's fields.
    """
    if candidate is None:
        return items
    wanted = key(candidate)
    for index, item in enumerate(items):
        if key(item) == wanted:
            return items[:index] + (update(item),) + items[index + 1:]
    return items + (candidate,)


by_id: KeyFn = attrgetter("id")


def by_fields(*names: str) -> KeyFn:
    """Natural/compound key over several attributes, e.g. by_fields("degree_name", "institution")."""
    return attrgetter(*names)
