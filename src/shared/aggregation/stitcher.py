"""
Multi-Query Stitcher: enriches grouped parents with secondary queries.

After the main query has produced the parent map, each ChildQuery runs once,
scoped to the known parent ids through an expanding `IN :ids` parameter, and its
rows are folded into the parent they reference. Queries run one after another on
the same handle; the first failure propagates and nothing partial is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Mapping, Sequence, TypeVar

from sqlalchemy import bindparam, text

from src.shared.logging import get_logger

log = get_logger("aggregation")

P = TypeVar("P")
Row = Mapping[str, Any]


@dataclass(frozen=True)
class ChildQuery(Generic[P]):
    """
    name: label used in logs
    sql: SELECT with an `IN :ids` filter on the parent id column
    parent_key: column in the result holding the parent id
    fold: merges one child row into its parent, returning the new parent
    """
    name: str
    sql: str
    parent_key: str
    fold: Callable[[P, Row], P]
    params: Mapping[str, Any] = field(default_factory=dict)


async def stitch(db, parents: Dict[Hashable, P], queries: Sequence[ChildQuery[P]]) -> Dict[Hashable, P]:
    if not parents:
        return parents

    ids = list(parents)
    stitched = dict(parents)
    for query in queries:
        statement = text(query.sql).bindparams(bindparam("ids", expanding=True))
        rows = await db.fetch_all(statement, {**query.params, "ids": ids})
        for row in rows:
            parent_id = row[query.parent_key]
            if parent_id in stitched:
                stitched[parent_id] = query.fold(stitched[parent_id], row)
        log.debug("child_query_stitched", query=query.name, rows=len(rows), parents=len(ids))
    return stitched
