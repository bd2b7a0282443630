"""
Showroom database engine - async SQLite via aiosqlite.

Provides:
- Database: async connection manager with retry on connect
- Scoped ``transaction()`` context manager (commit on success, rollback on
  any exception, nested calls join the outer transaction)
- Parameterised execution raising ``QueryFault`` instead of bare exceptions

The engine owns one aiosqlite connection. Use of that connection is
serialised by an ``asyncio.Lock``: an open transaction holds the lock from
BEGIN to COMMIT/ROLLBACK, statements outside a transaction take it per
statement. Statements issued by the task that owns the transaction run
inside it without re-acquiring the lock.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence

import aiosqlite

from ..faults import DatabaseConnectionFault, Fault, QueryFault

logger = logging.getLogger("showroom.db")


class Database:
    """
    Async database engine.

    Usage:
        db = Database("sqlite:///showroom.sqlite3")
        await db.connect()
        rows = await db.fetch_all("SELECT * FROM brands WHERE status = ?", ["A"])

        async with db.transaction():
            await db.execute("INSERT INTO brands ...", [...])
            await db.execute("UPDATE products ...", [...])

        await db.disconnect()
    """

    __slots__ = (
        "_url",
        "_path",
        "_connection",
        "_connected",
        "_lock",
        "_conn_lock",
        "_in_tx",
        "_connect_retries",
        "_connect_retry_delay",
    )

    def __init__(self, url: str = "sqlite:///showroom.sqlite3", **options: Any):
        """
        Initialize database engine.

        Args:
            url: Database URL. Supported schemes:
                 - sqlite:///path/to/db.sqlite3
                 - sqlite:///:memory:
            **options:
                connect_retries (int): Number of connection retries (default 3).
                connect_retry_delay (float): Seconds between retries (default 0.5).
        """
        if not url.startswith("sqlite"):
            raise DatabaseConnectionFault(
                url=url,
                reason=f"Unsupported database URL scheme: {url}",
            )
        self._url = url
        self._path = self._parse_url(url)
        self._connection: Optional[aiosqlite.Connection] = None
        self._connected = False
        self._lock = asyncio.Lock()
        self._conn_lock = asyncio.Lock()
        self._in_tx: ContextVar[bool] = ContextVar(f"showroom_tx_{id(self)}", default=False)
        self._connect_retries = int(options.pop("connect_retries", 3))
        self._connect_retry_delay = float(options.pop("connect_retry_delay", 0.5))

    @staticmethod
    def _parse_url(url: str) -> str:
        """Extract file path from sqlite URL."""
        for prefix in ("sqlite:///", "sqlite://"):
            if url.startswith(prefix):
                path = url[len(prefix):]
                return path or ":memory:"
        return url.replace("sqlite:", "").lstrip("/") or ":memory:"

    # ── Connection management ────────────────────────────────────────

    async def connect(self) -> None:
        """Open database connection with retry logic."""
        if self._connected:
            return

        async with self._lock:
            if self._connected:
                return

            last_exc: Optional[Exception] = None
            for attempt in range(1, self._connect_retries + 1):
                try:
                    # isolation_level=None: BEGIN/COMMIT are issued explicitly
                    self._connection = await aiosqlite.connect(self._path, isolation_level=None)
                    self._connection.row_factory = aiosqlite.Row
                    await self._connection.execute("PRAGMA foreign_keys=ON")
                    if self._path != ":memory:":
                        await self._connection.execute("PRAGMA journal_mode=WAL")
                    self._connected = True
                    logger.info(f"Database connected ({self._path}), attempt {attempt}")
                    return
                except Exception as exc:
                    last_exc = exc
                    if attempt < self._connect_retries:
                        logger.warning(
                            f"Connection attempt {attempt} failed: {exc}, "
                            f"retrying in {self._connect_retry_delay}s..."
                        )
                        await asyncio.sleep(self._connect_retry_delay)

            raise DatabaseConnectionFault(
                url=self._url,
                reason=f"Failed after {self._connect_retries} attempts: {last_exc}",
            )

    async def disconnect(self) -> None:
        """Close database connection."""
        if not self._connected:
            return
        async with self._lock:
            if not self._connected:
                return
            try:
                await self._connection.close()
                logger.info("Database disconnected")
            except Exception as exc:
                raise DatabaseConnectionFault(
                    url=self._url,
                    reason=f"Disconnect failed: {exc}",
                ) from exc
            finally:
                self._connection = None
                self._connected = False

    async def ensure_connected(self) -> None:
        if not self._connected:
            await self.connect()

    # ── Transactions ─────────────────────────────────────────────────

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """
        Async context manager for transactions.

        The transaction is closed on every exit path: committed when the
        block finishes, rolled back when it raises (cancellation included).
        A ``transaction()`` opened while the current task already owns one
        joins it.

        Usage:
            async with db.transaction():
                await db.execute("INSERT INTO ...")
                await db.execute("UPDATE ...")
        """
        if self._in_tx.get():
            yield
            return

        await self.ensure_connected()
        async with self._conn_lock:
            token = self._in_tx.set(True)
            try:
                await self._raw("BEGIN")
                try:
                    yield
                except BaseException:
                    await self._raw("ROLLBACK")
                    logger.debug("Rolled back transaction")
                    raise
                try:
                    await self._raw("COMMIT")
                except Exception as exc:
                    await self._raw("ROLLBACK")
                    raise QueryFault(
                        model="<transaction>",
                        operation="commit",
                        reason=str(exc),
                    ) from exc
                logger.debug("Committed transaction")
            finally:
                self._in_tx.reset(token)

    async def _raw(self, sql: str) -> None:
        await self._connection.execute(sql)

    # ── Query execution ──────────────────────────────────────────────

    async def _run(
        self,
        operation: str,
        sql: str,
        params: Optional[Sequence[Any]],
        fn: Callable[[str, Sequence[Any]], Awaitable[Any]],
    ) -> Any:
        await self.ensure_connected()
        if params is None:
            params = []
        try:
            if self._in_tx.get():
                return await fn(sql, params)
            async with self._conn_lock:
                return await fn(sql, params)
        except Fault:
            raise
        except Exception as exc:
            raise QueryFault(
                model="<raw>",
                operation=operation,
                reason=str(exc),
                metadata={"sql": sql[:200]},
            ) from exc

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Execute a SQL statement.

        Returns:
            Cursor (exposes lastrowid, rowcount)

        Raises:
            QueryFault: When query execution fails
        """
        async def _execute(sql: str, params: Sequence[Any]) -> Any:
            return await self._connection.execute(sql, params)

        return await self._run("execute", sql, params, _execute)

    async def fetch_all(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        """Execute query and return all rows as dicts."""
        async def _fetch_all(sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
            cursor = await self._connection.execute(sql, params)
            rows = await cursor.fetchall()
            await cursor.close()
            return [dict(row) for row in rows]

        return await self._run("fetch_all", sql, params, _fetch_all)

    async def fetch_one(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Execute query and return first row as dict, or None."""
        async def _fetch_one(sql: str, params: Sequence[Any]) -> Optional[Dict[str, Any]]:
            cursor = await self._connection.execute(sql, params)
            row = await cursor.fetchone()
            await cursor.close()
            return dict(row) if row is not None else None

        return await self._run("fetch_one", sql, params, _fetch_one)

    async def fetch_val(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Execute query and return the first column of the first row."""
        row = await self.fetch_one(sql, params)
        if row is None:
            return None
        return next(iter(row.values()))
