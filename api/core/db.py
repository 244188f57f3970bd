"""
Async database access helpers (raw SQL) using asyncpg.

A single `Database` (one connection pool) is created in the FastAPI lifespan
and closed on shutdown (see `api/main.py`). Routes receive it via `get_db`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from .config import Settings

logger = logging.getLogger(__name__)

MAINTENANCE_DATABASE = "postgres"


class PoolExhaustedError(RuntimeError):
    """No pooled connection became free within the acquire timeout."""


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url(settings: Settings) -> str:
    if settings.database_url:
        return _sanitize_database_url(settings.database_url)

    credentials = quote(settings.db_user, safe="")
    if settings.db_password:
        credentials += ":" + quote(settings.db_password, safe="")
    return (
        f"postgresql://{credentials}@{settings.db_host}:{settings.db_port}/"
        f"{quote(settings.db_name, safe='')}"
    )


def database_name(url: str) -> str:
    name = urlsplit(url).path.lstrip("/")
    if not name:
        raise RuntimeError("Database URL does not name a database.")
    return name


def _with_database(url: str, name: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, "/" + name, parts.query, parts.fragment))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, pool: asyncpg.Pool, *, acquire_timeout: float) -> None:
        self._pool = pool
        self.acquire_timeout = acquire_timeout

    @classmethod
    async def connect(cls, settings: Settings) -> Database:
        # min_size=0 opens connections on demand, so the app can start
        # before the database itself has been created via /createdb.
        pool = await asyncpg.create_pool(
            dsn=database_url(settings),
            min_size=0,
            max_size=settings.db_pool_size,
            command_timeout=settings.db_command_timeout,
        )
        return cls(pool, acquire_timeout=settings.db_pool_timeout)

    async def close(self) -> None:
        await self._pool.close()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        try:
            conn = await self._pool.acquire(timeout=self.acquire_timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("DB pool exhausted after %.1fs wait.", self.acquire_timeout)
            raise PoolExhaustedError("No database connection available.") from exc
        try:
            yield conn
        finally:
            await self._pool.release(conn)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.connection() as conn:
            row = await conn.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.connection() as conn:
            rows = await conn.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        async with self.connection() as conn:
            await conn.execute(sql, *args)


async def create_database_if_missing(settings: Settings) -> bool:
    """
    Create the configured database unless it exists. Returns True if created.

    CREATE DATABASE cannot run inside the target database (it may not exist
    yet), so this goes through a one-off connection to `postgres`.
    """
    url = database_url(settings)
    name = database_name(url)
    conn = await asyncpg.connect(
        dsn=_with_database(url, MAINTENANCE_DATABASE),
        timeout=settings.db_pool_timeout,
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", name)
        if exists:
            return False
        quoted = '"' + name.replace('"', '""') + '"'
        await conn.execute(f"CREATE DATABASE {quoted}")
    finally:
        await conn.close()
    logger.info("Created database %s.", name)
    return True


def get_db(request: Request) -> Database:
    return request.app.state.db
