"""
Storage gateway — the only path to the relational store.

Design notes
------------
- One gateway instance is created by whoever performs startup (the
  FastAPI lifespan, the seed script, a test fixture) and passed to the
  repository explicitly.  There is no module-level connection.
- ``StaticPool`` keeps exactly one DBAPI connection for the life of the
  engine; this is also what makes ``sqlite:///:memory:`` usable, because
  an in-memory database is scoped to its connection.
- Every statement unit runs under an ``asyncio.Lock`` so that concurrent
  requests never interleave on the shared connection.  In particular
  ``insert_returning_id`` reads ``last_insert_rowid()`` on the same
  connection and inside the same unit as its INSERT.
- All primitives take positional ``?`` parameters and hand them to the
  driver untouched via ``exec_driver_sql``.
- Statements issued through the primitives are tallied in
  ``statement_count_var`` for the request diagnostics headers.  Schema
  setup and seeding run outside the primitives and are not counted.
"""
import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from board.exceptions import StorageInitError, StorageQueryError
from board.models import metadata
from board.seed import INSERT_POST_SQL, build_seed_rows

logger = logging.getLogger(__name__)

# Statements run through the gateway primitives in the current context.
statement_count_var: ContextVar[int] = ContextVar("statement_count", default=0)


async def _run(conn: AsyncConnection, sql: str, params: Sequence[Any] = ()):
    statement_count_var.set(statement_count_var.get() + 1)
    return await conn.exec_driver_sql(sql, tuple(params))


class StorageGateway:
    """Owns the engine and exposes parameterized execute/query primitives."""

    def __init__(self, database_url: str, *, echo: bool = False, seed_on_empty: bool = True) -> None:
        self.database_url = database_url
        self.echo = echo
        self.seed_on_empty = seed_on_empty
        self.engine: AsyncEngine | None = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _create_engine(self) -> AsyncEngine:
        logger.debug("Creating database engine for %s", self.database_url)
        return create_async_engine(
            self.database_url,
            echo=self.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    async def initialize(self) -> None:
        """
        Create the ``posts`` table if needed and seed it when empty.

        Safe to call again on a populated store: the second call only
        re-checks the schema and the row count.
        """
        if self.engine is None:
            try:
                self.engine = self._create_engine()
            except (SQLAlchemyError, ValueError) as exc:
                raise StorageInitError(f"Cannot create engine for {self.database_url}: {exc}") from exc

        try:
            async with self._lock:
                async with self.engine.begin() as conn:
                    await conn.run_sync(metadata.create_all)
                    result = await conn.exec_driver_sql("SELECT COUNT(*) FROM posts")
                    count = result.scalar_one()
                    if count == 0 and self.seed_on_empty:
                        rows = build_seed_rows()
                        await conn.exec_driver_sql(INSERT_POST_SQL, rows)
                        logger.info("Seeded posts table with %d sample rows.", len(rows))
        except (SQLAlchemyError, OSError) as exc:
            await self.shutdown()
            raise StorageInitError(f"Cannot initialise database at {self.database_url}: {exc}") from exc

    async def shutdown(self) -> None:
        """Release the connection.  Repeated calls are no-ops; errors are logged only."""
        engine, self.engine = self.engine, None
        if engine is None:
            return
        try:
            await engine.dispose()
        except Exception as exc:
            logger.warning("Error while closing database connection: %s", exc)

    # ------------------------------------------------------------------
    # Statement primitives
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _unit(self) -> AsyncIterator[AsyncConnection]:
        """Run one committed unit of work on the shared connection."""
        if self.engine is None:
            raise StorageQueryError("Storage gateway is not initialised")
        async with self._lock:
            try:
                async with self.engine.begin() as conn:
                    yield conn
            # OverflowError: an int too large to bind as SQLite INTEGER.
            except (SQLAlchemyError, OverflowError) as exc:
                logger.error("Database statement failed: %s", exc)
                raise StorageQueryError(str(exc)) from exc

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a mutating statement."""
        async with self._unit() as conn:
            await _run(conn, sql, params)

    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> dict | None:
        """Run a read statement and return the first row, or None."""
        async with self._unit() as conn:
            result = await _run(conn, sql, params)
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def query_many(self, sql: str, params: Sequence[Any] = ()) -> list[dict]:
        """Run a read statement and return every row."""
        async with self._unit() as conn:
            result = await _run(conn, sql, params)
            rows = result.mappings().all()
        return [dict(row) for row in rows]

    async def insert_returning_id(self, sql: str, params: Sequence[Any] = ()) -> int:
        """
        Run an INSERT and return the id the store generated for it.

        The id lookup shares the INSERT's transaction and connection, and
        the gateway lock keeps any other statement from running between
        the two.
        """
        async with self._unit() as conn:
            await _run(conn, sql, params)
            result = await _run(conn, "SELECT last_insert_rowid()")
            return int(result.scalar_one())


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

def get_db(request: Request) -> StorageGateway:
    """Return the gateway opened by the application lifespan."""
    return request.app.state.db
