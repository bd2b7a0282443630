"""
Database engine: connection, statements, scoped transactions.
"""

import asyncio

import pytest
import pytest_asyncio

from showroom.db import Database
from showroom.faults import DatabaseConnectionFault, QueryFault


@pytest_asyncio.fixture
async def db(database):
    await database.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    return database


async def names(db):
    return [row["name"] for row in await db.fetch_all("SELECT name FROM items ORDER BY id")]


class TestConnection:

    def test_rejects_other_schemes(self):
        with pytest.raises(DatabaseConnectionFault):
            Database("postgresql://localhost/showroom")

    def test_memory_url(self):
        assert Database._parse_url("sqlite:///:memory:") == ":memory:"
        assert Database._parse_url("sqlite://") == ":memory:"
        assert Database._parse_url("sqlite:///data/showroom.sqlite3") == "data/showroom.sqlite3"

    @pytest.mark.asyncio
    async def test_connect_disconnect(self):
        db = Database("sqlite:///:memory:")
        await db.connect()
        await db.connect()  # idempotent
        assert await db.fetch_val("SELECT 1") == 1
        await db.disconnect()
        await db.disconnect()

    @pytest.mark.asyncio
    async def test_file_database(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path / 'showroom.sqlite3'}")
        await db.connect()
        await db.execute("CREATE TABLE t (x INTEGER)")
        tables = await db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
        assert tables == [{"name": "t"}]
        await db.disconnect()
        assert (tmp_path / "showroom.sqlite3").exists()

    @pytest.mark.asyncio
    async def test_lazy_connect(self):
        db = Database("sqlite:///:memory:")
        assert await db.fetch_val("SELECT 1") == 1
        await db.disconnect()


class TestStatements:

    @pytest.mark.asyncio
    async def test_execute_and_fetch(self, db):
        cursor = await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
        assert cursor.lastrowid == 1
        assert await db.fetch_one("SELECT * FROM items WHERE id = ?", [1]) == {"id": 1, "name": "a"}
        assert await db.fetch_one("SELECT * FROM items WHERE id = ?", [2]) is None
        assert await db.fetch_val("SELECT COUNT(*) FROM items") == 1

    @pytest.mark.asyncio
    async def test_bad_sql_raises_query_fault(self, db):
        with pytest.raises(QueryFault) as exc_info:
            await db.execute("INSERT INTO nowhere VALUES (1)")
        assert exc_info.value.metadata["operation"] == "execute"
        assert "nowhere" in exc_info.value.metadata["sql"]


class TestTransactions:

    @pytest.mark.asyncio
    async def test_commit(self, db):
        async with db.transaction():
            await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
            await db.execute("INSERT INTO items (name) VALUES (?)", ["b"])
        assert await names(db) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, db):
        with pytest.raises(RuntimeError):
            async with db.transaction():
                await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
                raise RuntimeError("boom")
        assert await names(db) == []

    @pytest.mark.asyncio
    async def test_rollback_on_query_fault(self, db):
        with pytest.raises(QueryFault):
            async with db.transaction():
                await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
                await db.execute("INSERT INTO items (name) VALUES (NULL)")
        assert await names(db) == []

    @pytest.mark.asyncio
    async def test_nested_joins_outer(self, db):
        with pytest.raises(RuntimeError):
            async with db.transaction():
                await db.execute("INSERT INTO items (name) VALUES (?)", ["outer"])
                async with db.transaction():
                    await db.execute("INSERT INTO items (name) VALUES (?)", ["inner"])
                raise RuntimeError("abort outer")
        assert await names(db) == []

    @pytest.mark.asyncio
    async def test_other_task_waits_for_commit(self, db):
        inserted = asyncio.Event()
        seen = []

        async def writer():
            async with db.transaction():
                await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
                inserted.set()
                await asyncio.sleep(0.05)
                await db.execute("INSERT INTO items (name) VALUES (?)", ["b"])

        async def reader():
            await inserted.wait()
            seen.extend(await names(db))

        await asyncio.gather(writer(), reader())
        assert seen == ["a", "b"]

    @pytest.mark.asyncio
    async def test_cancellation_rolls_back(self, db):
        started = asyncio.Event()

        async def writer():
            async with db.transaction():
                await db.execute("INSERT INTO items (name) VALUES (?)", ["a"])
                started.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(writer())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert await names(db) == []
