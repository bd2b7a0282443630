"""
Service layer building blocks.

- ``operation``: boundary decorator; nothing raised inside a service
  operation escapes it, unexpected failures become ``ServiceResult.internal()``
- ``SoftDeleteService``: Create / Update / Get / Delete for soft-deletable
  entities, each mutation running in one store transaction
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, ClassVar, Dict, Optional, Tuple, Type, Union

from ..faults import ServiceResult
from ..models import EntityStore, Record, Status

SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_KEY = "created_at"

Prepared = Union[Dict[str, Any], ServiceResult]


def operation(func: Callable[..., Awaitable[ServiceResult]]) -> Callable[..., Awaitable[ServiceResult]]:
    """
    Mark a coroutine method as a service operation.

    Any exception escaping ``func`` is logged with its traceback on the
    service's logger and reported as ``ServiceResult.internal()``.
    """

    @functools.wraps(func)
    async def wrapper(self, *args: Any, **kwargs: Any) -> ServiceResult:
        name = f"{type(self).__name__}.{func.__name__}"
        self.logger.debug(f"{name} started")
        try:
            result = await func(self, *args, **kwargs)
        except Exception:
            self.logger.exception(f"{name} failed")
            return ServiceResult.internal()
        if not result.ok:
            self.logger.info(f"{name} -> {result.kind.name}: {result.message}")
        return result

    return wrapper


class SoftDeleteService:
    """
    Generic service for a soft-deletable entity.

    Subclasses set the class attributes below and may override the hooks:
    ``prepare_fields`` runs before the transaction (slow work such as
    password hashing), ``prepare_create`` / ``prepare_update`` run inside it
    to resolve references or transform fields before they are written.
    """

    model: ClassVar[Type[Record]]
    label: ClassVar[str]                 # "Category": "<label> already exists"
    noun: ClassVar[str]                  # "category": "No <noun> found"
    payload_key: ClassVar[str]           # "categories"
    unique_field: ClassVar[str]
    unique_lookup: ClassVar[str] = "iexact"
    key_field: ClassVar[str] = "id"
    sortable: ClassVar[Tuple[str, ...]] = ()

    logger: logging.Logger

    def __init__(self, store: EntityStore):
        self.store = store

    # ── Messages ─────────────────────────────────────────────────────

    @property
    def already_exists(self) -> str:
        return f"{self.label} already exists"

    @property
    def does_not_exist(self) -> str:
        return f"{self.label} does not exist"

    @property
    def none_found(self) -> str:
        return f"No {self.noun} found"

    # ── Hooks ────────────────────────────────────────────────────────

    async def prepare_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Runs before the transaction opens, outside the connection lock."""
        return fields

    async def prepare_create(self, fields: Dict[str, Any]) -> Prepared:
        return fields

    async def prepare_update(self, record: Record, fields: Dict[str, Any]) -> Prepared:
        return fields

    def serialize(self, record: Record) -> Dict[str, Any]:
        return record.to_dict()

    # ── Lookups ──────────────────────────────────────────────────────

    async def find_active(self, key: Any) -> Optional[Record]:
        """Active record by key; missing and Deleted are the same None."""
        if key is None or key == "":
            return None
        if self.key_field == "id":
            record = await self.store.find_by_id(self.model, key)
            return record if record is not None and record.is_active else None
        return await self.store.find_one(
            self.model, **{self.key_field: key, "status": Status.ACTIVE}
        )

    async def is_duplicate(self, value: Any) -> bool:
        lookup = f"{self.unique_field}__{self.unique_lookup}" if self.unique_lookup else self.unique_field
        existing = await self.store.find_one(self.model, **{lookup: value, "status": Status.ACTIVE})
        return existing is not None

    # ── Operations ───────────────────────────────────────────────────

    @operation
    async def create(self, **fields: Any) -> ServiceResult:
        fields = await self.prepare_fields(fields)
        async with self.store.transaction():
            if await self.is_duplicate(fields.get(self.unique_field)):
                return ServiceResult.conflict(self.already_exists)

            prepared = await self.prepare_create(fields)
            if isinstance(prepared, ServiceResult):
                return prepared

            record = await self.store.create(self.model, status=Status.ACTIVE, **prepared)

        self.logger.info(f"{self.label} {record.id} created")
        return ServiceResult.success(id=record.id)

    @operation
    async def update(self, key: Any, **fields: Any) -> ServiceResult:
        fields = await self.prepare_fields(fields)
        async with self.store.transaction():
            record = await self.find_active(key)
            if record is None:
                return ServiceResult.not_found(self.does_not_exist)

            prepared = await self.prepare_update(record, fields)
            if isinstance(prepared, ServiceResult):
                return prepared

            for name, value in prepared.items():
                setattr(record, name, value)
            await self.store.save(record)

        self.logger.info(f"{self.label} {record.id} updated")
        return ServiceResult.success(id=record.id)

    @operation
    async def get(
        self,
        key: Any = None,
        *,
        order_by: Optional[str] = None,
        order: Optional[str] = None,
        **filters: Any,
    ) -> ServiceResult:
        return await self._get(key, order_by, order, filters)

    async def _get(
        self,
        key: Any,
        order_by: Optional[str],
        order: Optional[str],
        filters: Dict[str, Any],
    ) -> ServiceResult:
        if key is not None and key != "":
            record = await self.find_active(key)
            if record is None:
                return ServiceResult.not_found(self.none_found)
            return ServiceResult.success(**{self.payload_key: [self.serialize(record)]})

        order_by = order_by or DEFAULT_SORT_KEY
        if order_by not in self.sortable:
            return ServiceResult.invalid(f"Invalid sort key '{order_by}'")
        order = (order or "asc").lower()
        if order not in SORT_ORDERS:
            return ServiceResult.invalid(f"Invalid sort order '{order}'")

        records = await self.store.find(
            self.model,
            order_by=order_by,
            descending=order == "desc",
            status=Status.ACTIVE,
            **filters,
        )
        if not records:
            return ServiceResult.not_found(self.none_found)
        return ServiceResult.success(**{self.payload_key: [self.serialize(r) for r in records]})

    @operation
    async def delete(self, key: Any) -> ServiceResult:
        async with self.store.transaction():
            record = await self.find_active(key)
            if record is None:
                return ServiceResult.not_found(self.none_found)
            record.mark_deleted()
            await self.store.save(record)

        self.logger.info(f"{self.label} {record.id} deleted")
        return ServiceResult.success(id=record.id)


def sortable_fields(model: Type[Record], exclude: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    return tuple(name for name in model.columns() if name not in exclude)


__all__ = [
    "operation",
    "SoftDeleteService",
    "sortable_fields",
    "SORT_ORDERS",
    "DEFAULT_SORT_KEY",
]
