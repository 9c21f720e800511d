"""
Row Mapper: folds flat joined rows into one parent object per distinct id.

A join across a parent table and N child tables yields one row per
(parent x child combination). `group_rows` walks that sequence once and keeps,
per parent id, the value returned by `fold(parent, row)`. Parents are meant to
be immutable (frozen dataclasses with tuple collections); each fold step returns
a new parent instead of mutating the previous one.

Ordering: the returned dict is keyed in first-occurrence order of each parent id,
which is the order the response will list them in.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, Mapping, Optional, TypeVar

P = TypeVar("P")
Row = Mapping[str, Any]


def _unchanged(parent: P, row: Row) -> P:
    return parent


def group_rows(
    rows: Iterable[Row],
    key: str,
    build: Callable[[Row], P],
    fold: Optional[Callable[[P, Row], P]] = None,
) -> Dict[Hashable, P]:
    """
    Args:
        rows: result rows as mappings (column name -> value)
        key: column holding the parent id; must be present and non-null in every row
        build: creates the parent (with empty nested collections) from its first row
        fold: merges one row into the parent, returning the new parent

    Raises:
        KeyError: a row lacks the key column
        ValueError: a row carries a null parent id
    """
    step = fold or _unchanged
    grouped: Dict[Hashable, P] = {}
    for row in rows:
        parent_id = row[key]
        if parent_id is None:
            raise ValueError(f"row has a null {key!r}; the query must filter these out")
        current = grouped[parent_id] if parent_id in grouped else build(row)
        grouped[parent_id] = step(current, row)
    return grouped
