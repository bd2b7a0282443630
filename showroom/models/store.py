"""
Entity store - typed record access over the database engine.

Filters are keyword arguments:
    status="A"                       exact match
    category_name_en__iexact="tv"    case-insensitive match
    role_name__in=["admin", "staff"] membership
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from ..db import Database
from ..faults import QueryFault, SchemaFault
from .base import Record, primary_key, to_db_value, utcnow
from .entities import ALL_MODELS

logger = logging.getLogger("showroom.models.store")

R = TypeVar("R", bound=Record)


SCHEMA = {
    "roles": """
        CREATE TABLE IF NOT EXISTS roles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            role_id INTEGER NOT NULL,
            role_name TEXT NOT NULL,
            end_points TEXT NOT NULL DEFAULT '[]',
            status TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        )""",
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            password TEXT,
            roles TEXT NOT NULL DEFAULT '[]',
            status TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        )""",
    "categories": """
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category_name_en TEXT NOT NULL,
            category_name_zh TEXT,
            status TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        )""",
    "brands": """
        CREATE TABLE IF NOT EXISTS brands (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            brand_name_en TEXT NOT NULL,
            brand_name_zh TEXT,
            status TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        )""",
    "products": """
        CREATE TABLE IF NOT EXISTS products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            model_no TEXT NOT NULL,
            price REAL NOT NULL,
            discount_price REAL,
            prod_desc_en TEXT NOT NULL,
            prod_desc_zh TEXT,
            prod_name_en TEXT NOT NULL,
            prod_name_zh TEXT,
            image_url TEXT,
            category_id INTEGER NOT NULL REFERENCES categories(id),
            brand_id INTEGER NOT NULL REFERENCES brands(id),
            release_date TEXT,
            status TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        )""",
}

INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_products_category ON products (category_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_users_user_id ON users (user_id, status)",
)


class EntityStore:
    """
    Durable storage for catalog records.

    Usage:
        store = EntityStore(db)
        await store.create_schema()

        brand = await store.create(Brand, brand_name_en="Sony")
        async with store.transaction():
            brand.brand_name_zh = "索尼"
            await store.save(brand)
    """

    def __init__(self, db: Database):
        self.db = db

    def transaction(self):
        """Scoped transaction; see ``Database.transaction``."""
        return self.db.transaction()

    # ── Schema ───────────────────────────────────────────────────────

    async def create_schema(self) -> List[str]:
        """Create all tables (idempotent). Returns the table names."""
        tables = [model.__table__ for model in ALL_MODELS]
        for table in tables:
            try:
                await self.db.execute(SCHEMA[table])
            except QueryFault as exc:
                raise SchemaFault(table=table, reason=exc.metadata.get("reason", str(exc))) from exc
        for ddl in INDEXES:
            await self.db.execute(ddl)
        logger.info(f"Schema ready: {', '.join(tables)}")
        return tables

    # ── Reads ────────────────────────────────────────────────────────

    async def find(
        self,
        model: Type[R],
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[R]:
        """
        All records matching ``filters``.

        Without ``order_by`` records come back in natural scan order
        (insertion order). Ties on ``order_by`` fall back to that order.

        Raises:
            ValueError: unknown filter field or sort key
        """
        where, params = self._where(model, filters)
        sql = f"SELECT * FROM {model.__table__}{where}"
        if order_by is not None:
            self._check_column(model, order_by)
            direction = "DESC" if descending else "ASC"
            sql += f' ORDER BY "{order_by}" {direction}, id {direction}'
        else:
            sql += " ORDER BY id"
        rows = await self.db.fetch_all(sql, params)
        return [model.from_row(row) for row in rows]

    async def find_one(self, model: Type[R], **filters: Any) -> Optional[R]:
        """First record (natural order) matching ``filters``, or None."""
        where, params = self._where(model, filters)
        row = await self.db.fetch_one(
            f"SELECT * FROM {model.__table__}{where} ORDER BY id LIMIT 1", params
        )
        return model.from_row(row) if row is not None else None

    async def find_by_id(self, model: Type[R], id: Any) -> Optional[R]:
        """Record by primary key regardless of status, or None (also for a malformed id)."""
        pk = primary_key(id)
        if pk is None:
            return None
        return await self.find_one(model, id=pk)

    async def count(self, model: Type[R], **filters: Any) -> int:
        where, params = self._where(model, filters)
        return await self.db.fetch_val(f"SELECT COUNT(*) FROM {model.__table__}{where}", params)

    async def populate(self, records: Sequence[Record], attr: str) -> None:
        """
        Materialise the ``attr`` reference on each record with one query.

        A reference whose target row no longer exists is left as None.
        """
        if not records:
            return
        fk_column, target = type(records[0]).__relations__[attr]
        ids = sorted({getattr(r, fk_column) for r in records if getattr(r, fk_column) is not None})
        related = {obj.id: obj for obj in await self.find(target, id__in=ids)}
        for record in records:
            setattr(record, attr, related.get(getattr(record, fk_column)))

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, model: Type[R], **fields: Any) -> R:
        """Insert a new record and return it with ``id`` and timestamps set."""
        record = model(**fields)
        now = utcnow()
        record.created_at = now
        record.updated_at = now
        row = record.to_row()
        row.pop("id", None)
        columns = ", ".join(f'"{c}"' for c in row)
        placeholders = ", ".join("?" for _ in row)
        cursor = await self.db.execute(
            f"INSERT INTO {model.__table__} ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )
        record.id = cursor.lastrowid
        logger.debug(f"Created {model.__name__} id={record.id}")
        return record

    async def save(self, record: Record) -> None:
        """Overwrite every persisted column of an existing record."""
        if record.id is None:
            raise QueryFault(
                model=type(record).__name__,
                operation="save",
                reason="record has no id",
            )
        record.updated_at = utcnow()
        row = record.to_row()
        pk = row.pop("id")
        row.pop("created_at", None)
        assignments = ", ".join(f'"{c}" = ?' for c in row)
        cursor = await self.db.execute(
            f"UPDATE {record.__table__} SET {assignments} WHERE id = ?",
            [*row.values(), pk],
        )
        if cursor.rowcount == 0:
            raise QueryFault(
                model=type(record).__name__,
                operation="save",
                reason=f"no row with id {pk}",
            )
        logger.debug(f"Saved {type(record).__name__} id={pk}")

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _check_column(model: Type[Record], name: str) -> None:
        if name not in model.columns():
            raise ValueError(f"{model.__name__} has no field '{name}'")

    def _where(self, model: Type[Record], filters: Dict[str, Any]) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for key, value in filters.items():
            name, _, lookup = key.partition("__")
            self._check_column(model, name)
            if lookup == "":
                clauses.append(f'"{name}" = ?')
                params.append(to_db_value(model, name, value))
            elif lookup == "iexact":
                clauses.append(f'LOWER("{name}") = LOWER(?)')
                params.append(to_db_value(model, name, value))
            elif lookup == "in":
                values = list(_iter_values(value))
                if not values:
                    clauses.append("0")
                    continue
                clauses.append(f'"{name}" IN ({", ".join("?" for _ in values)})')
                params.extend(to_db_value(model, name, v) for v in values)
            else:
                raise ValueError(f"Unsupported lookup '{lookup}' on {model.__name__}.{name}")
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params


def _iter_values(value: Any) -> Iterable[Any]:
    if isinstance(value, (str, bytes)):
        return [value]
    return value


__all__ = ["EntityStore", "SCHEMA"]
