"""
database.py: the data-access handle used by every repository.

`Database` wraps an AsyncEngine and exposes a small query surface over raw,
parameterized SQL (`sqlalchemy.text`):

  - fetch_all / fetch_one / fetch_value for reads (rows come back as plain dicts)
  - execute for writes (returns the affected row count)
  - insert for `INSERT ... RETURNING id` statements (returns the generated id)
  - transaction(): an async context manager yielding a handle bound to one
    checked-out connection; commit on success, rollback on any exception,
    connection released on every exit path.

The handle is created once per application (see src/main.py) and injected
through FastAPI dependencies; nothing here is a module-level singleton, so tests
can hand in a handle over a SQLite engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Dict, List, Mapping, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql.elements import TextClause
import structlog

logger = structlog.get_logger(__name__)

Statement = Union[str, TextClause]
Params = Optional[Mapping[str, Any]]
Row = Dict[str, Any]


def _statement(sql: Statement) -> TextClause:
    return text(sql) if isinstance(sql, str) else sql


def _rows(result: Result) -> List[Row]:
    return [dict(row) for row in result.mappings().all()]


class _Queries(ABC):
    """Query surface shared by the pooled handle and the transaction-bound handle."""

    @abstractmethod
    def _connection(self, *, write: bool) -> AsyncContextManager[AsyncConnection]:
        """Connection to run one statement on."""

    async def fetch_all(self, sql: Statement, params: Params = None) -> List[Row]:
        async with self._connection(write=False) as conn:
            result = await conn.execute(_statement(sql), dict(params or {}))
            return _rows(result)

    async def fetch_one(self, sql: Statement, params: Params = None) -> Optional[Row]:
        async with self._connection(write=False) as conn:
            result = await conn.execute(_statement(sql), dict(params or {}))
            row = result.mappings().first()
            return dict(row) if row is not None else None

    async def fetch_value(self, sql: Statement, params: Params = None) -> Any:
        async with self._connection(write=False) as conn:
            result = await conn.execute(_statement(sql), dict(params or {}))
            return result.scalar()

    async def execute(self, sql: Statement, params: Params = None) -> int:
        async with self._connection(write=True) as conn:
            result = await conn.execute(_statement(sql), dict(params or {}))
            return result.rowcount

    async def insert(self, sql: Statement, params: Params = None) -> Any:
        """Run an `INSERT ... RETURNING id` and return the generated id."""
        async with self._connection(write=True) as conn:
            result = await conn.execute(_statement(sql), dict(params or {}))
            return result.scalar_one()


class Transaction(_Queries):
    """Handle bound to a single connection inside an open transaction."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    @asynccontextmanager
    async def _connection(self, *, write: bool) -> AsyncIterator[AsyncConnection]:
        yield self._conn


class Database(_Queries):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def _connection(self, *, write: bool) -> AsyncIterator[AsyncConnection]:
        if write:
            async with self._engine.begin() as conn:
                yield conn
        else:
            async with self._engine.connect() as conn:
                yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """
        Usage:
            async with db.transaction() as tx:
                blog_id = await tx.insert("INSERT INTO blogs ... RETURNING id", {...})
                await tx.execute("INSERT INTO blog_images ...", {...})
        """
        async with self._engine.connect() as conn:
            trans = await conn.begin()
            try:
                yield Transaction(conn)
            except BaseException as e:
                await trans.rollback()
                logger.warning("transaction_rolled_back", error_type=e.__class__.__name__, error=str(e))
                raise
            else:
                await trans.commit()

    async def ping(self) -> None:
        await self.fetch_value("SELECT 1")
