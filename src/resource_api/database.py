"""Database connection and query handling.

The store owns a single SQLite file through an async SQLAlchemy engine.
Every statement goes through `text()` with bound parameters.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .exceptions import StorageError
from .logging_config import get_logger

logger = get_logger(__name__)

Row = dict[str, Any]
Params = Mapping[str, Any]

# ISO-8601 UTC with millisecond precision, e.g. 2025-01-31T09:15:02.123Z
SQL_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

CREATE_TABLES_SQL = (
    f"""
CREATE TABLE IF NOT EXISTS resources (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT 'General',
    status TEXT NOT NULL DEFAULT 'active' CHECK(status IN ('active', 'inactive')),
    created_at TEXT NOT NULL DEFAULT ({SQL_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({SQL_NOW})
)
""",
    "CREATE INDEX IF NOT EXISTS idx_resources_status ON resources(status)",
    "CREATE INDEX IF NOT EXISTS idx_resources_created_at ON resources(created_at)",
)


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a write statement."""

    last_insert_id: int | None
    rows_affected: int


def _driver_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class Store:
    """Embedded relational store for resources.

    The schema is created lazily on first use and only once per instance;
    `CREATE ... IF NOT EXISTS` keeps repeated startups on the same file safe.
    """

    def __init__(self, database_url: str, *, echo: bool = False):
        self.database_url = database_url
        self._ensure_parent_dir()
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    def _ensure_parent_dir(self) -> None:
        database = make_url(self.database_url).database
        if database and database != ":memory:" and not database.startswith("file:"):
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with self.engine.begin() as conn:
                    for statement in CREATE_TABLES_SQL:
                        await conn.execute(text(statement))
            except SQLAlchemyError as e:
                logger.error("schema_creation_failed", error=_driver_message(e), exc_info=True)
                raise StorageError(_driver_message(e)) from e
            self._schema_ready = True
            logger.info("schema_ready", database_url=self.database_url)

    async def execute(self, sql: str, params: Params | None = None) -> ExecuteResult:
        """Run a write statement inside its own transaction."""
        await self._ensure_schema()
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                return ExecuteResult(
                    last_insert_id=result.lastrowid,
                    rows_affected=result.rowcount,
                )
        except SQLAlchemyError as e:
            raise StorageError(_driver_message(e)) from e

    async def query_one(self, sql: str, params: Params | None = None) -> Row | None:
        """Return the first matching row, or None."""
        await self._ensure_schema()
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                row = result.mappings().first()
        except SQLAlchemyError as e:
            raise StorageError(_driver_message(e)) from e
        return dict(row) if row is not None else None

    async def query_all(self, sql: str, params: Params | None = None) -> list[Row]:
        """Return every matching row."""
        await self._ensure_schema()
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise StorageError(_driver_message(e)) from e
        return [dict(row) for row in rows]

    async def clear_all(self) -> int:
        """Delete every resource and reset id generation.

        Returns the number of removed rows. Raises StorageError on failure.
        """
        await self._ensure_schema()
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text("DELETE FROM resources"))
                await conn.execute(
                    text("DELETE FROM sqlite_sequence WHERE name = :name"),
                    {"name": "resources"},
                )
        except SQLAlchemyError as e:
            logger.error("store_clear_failed", error=_driver_message(e))
            raise StorageError(_driver_message(e)) from e
        logger.info("store_cleared", rows=result.rowcount)
        return result.rowcount

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        await self.engine.dispose()
