"""Record store: the single SQLite connection and its query primitives."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import aiosqlite

from . import schema
from .errors import QueryError, StoreNotInitialized

logger = logging.getLogger(__name__)

Params = Sequence[Any]


class StoreState(Enum):
    """Lifecycle of a Store."""

    NEW = 1
    READY = 2
    FAILED = 3
    CLOSED = 4


@dataclass
class ExecResult:
    """Outcome of a write statement."""

    rows_affected: int
    inserted_id: Optional[int] = None


class Store:
    """
    Owner of the journal's database connection.

    The connection is opened by ensure_schema() and held until close().
    Every operation goes through one asyncio.Lock, so at most one
    statement is in flight against the connection at any time.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()
        self._state = StoreState.NEW

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is StoreState.READY

    async def ensure_schema(self) -> None:
        """
        Open the database and make sure all tables and columns exist.

        Safe to call repeatedly: once the store is ready, later calls
        return without touching the database. A store left FAILED by a
        reset is re-initialized.
        """
        async with self._lock:
            if self._state is StoreState.READY:
                logger.debug("Store already initialized: %s", self.path)
                return
            if self._state is StoreState.CLOSED:
                raise StoreNotInitialized(f"Store {self.path} has been closed")

            try:
                if self._conn is None:
                    self._conn = await aiosqlite.connect(self.path)
                    self._conn.row_factory = aiosqlite.Row
                await schema.create_tables(self._conn)
                await schema.apply_migrations(self._conn)
                version = await schema.schema_version(self._conn)
            except aiosqlite.Error as e:
                self._state = StoreState.FAILED
                logger.error("Database initialization failed: %s", e)
                raise QueryError(f"Could not initialize {self.path}: {e}") from e

            if version < schema.SCHEMA_VERSION:
                logger.warning(
                    "Schema of %s is at version %s, expected %s; migrations will be retried",
                    self.path, version, schema.SCHEMA_VERSION,
                )
            self._state = StoreState.READY
            logger.info("Database initialized: %s (schema version %s)", self.path, version)

    async def execute(self, sql: str, params: Params = ()) -> ExecResult:
        """Run an INSERT, UPDATE or DDL statement and commit it."""
        async with self._lock:
            conn = self._require_ready()
            logger.debug("execute: %s %r", sql, params)
            try:
                async with conn.execute(sql, tuple(params)) as cursor:
                    result = ExecResult(
                        rows_affected=cursor.rowcount,
                        inserted_id=cursor.lastrowid,
                    )
                await conn.commit()
            except aiosqlite.Error as e:
                logger.error("SQL error: %s (%s)", e, sql)
                raise QueryError(f"Statement failed: {e}", sql=sql) from e
            return result

    async def query(self, sql: str, params: Params = ()) -> List[Dict[str, Any]]:
        """Run a SELECT and return its rows as column-name -> value dicts."""
        async with self._lock:
            conn = self._require_ready()
            logger.debug("query: %s %r", sql, params)
            try:
                async with conn.execute(sql, tuple(params)) as cursor:
                    rows = await cursor.fetchall()
            except aiosqlite.Error as e:
                logger.error("Select query error: %s (%s)", e, sql)
                raise QueryError(f"Query failed: {e}", sql=sql) from e
            return [dict(zip(row.keys(), row)) for row in rows]

    async def reset_all(self) -> None:
        """
        Drop and recreate every table.

        If anything fails after the drop, the store is marked FAILED and
        refuses further work until ensure_schema() succeeds.
        """
        async with self._lock:
            conn = self._require_ready()
            logger.info("Resetting database: %s", self.path)
            try:
                await schema.drop_tables(conn)
                await schema.create_tables(conn)
                await schema.apply_migrations(conn)
            except aiosqlite.Error as e:
                self._state = StoreState.FAILED
                logger.error("Database reset failed: %s", e)
                raise QueryError(f"Reset failed: {e}") from e

    async def close(self) -> None:
        """Close the connection. The store cannot be used afterwards."""
        async with self._lock:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
            self._state = StoreState.CLOSED

    def _require_ready(self) -> aiosqlite.Connection:
        if self._state is not StoreState.READY or self._conn is None:
            raise StoreNotInitialized(
                f"Database not initialized ({self._state.name.lower()}): {self.path}"
            )
        return self._conn
