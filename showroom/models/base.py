"""
Record base - shared columns, status flag and row conversion.

Every entity carries an integer ``id`` assigned by the store, a soft-delete
``status`` and store-assigned ``created_at`` / ``updated_at`` timestamps.
Records are never physically removed: deletion flips ``status`` from
``Status.ACTIVE`` to ``Status.DELETED``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar


R = TypeVar("R", bound="Record")


class Status(str, Enum):
    """
    Soft-delete status flag.

    Usage:
        Status.ACTIVE.value   # "A"
        Status.DELETED.label  # "Deleted"
    """

    ACTIVE = "A"
    DELETED = "D"

    @property
    def label(self) -> str:
        return self.name.title()


def utcnow() -> str:
    """Current UTC time as ISO-8601 text (the persisted timestamp format)."""
    return datetime.now(timezone.utc).isoformat()


def primary_key(value: Any) -> Optional[int]:
    """
    Integer id from a JSON number or a digit string, else None.

    Booleans and fractional numbers are not ids.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


@dataclass(kw_only=True, eq=False)
class Record:
    """
    Base for persisted entities.

    Subclasses declare:
        __table__: table name
        __json_fields__: list-valued columns stored as JSON text
        __relations__: ``{attr: (fk_column, model)}`` non-persisted references
            that ``EntityStore.populate`` can materialise
        __hidden__: columns never included in ``to_dict``
        __wire_names__: ``{column: key}`` overrides for ``to_dict``
    """

    __table__: ClassVar[str] = ""
    __json_fields__: ClassVar[Tuple[str, ...]] = ()
    __relations__: ClassVar[Dict[str, Tuple[str, Type["Record"]]]] = {}
    __hidden__: ClassVar[Tuple[str, ...]] = ()
    __wire_names__: ClassVar[Dict[str, str]] = {}

    id: Optional[int] = None
    status: Status = Status.ACTIVE
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def columns(cls) -> List[str]:
        """Persisted column names, in declaration order."""
        return [f.name for f in fields(cls) if f.metadata.get("persist", True)]

    @property
    def is_active(self) -> bool:
        return self.status == Status.ACTIVE

    def mark_deleted(self) -> None:
        self.status = Status.DELETED

    def to_row(self) -> Dict[str, Any]:
        """Column values ready to bind as SQL parameters."""
        row: Dict[str, Any] = {}
        for name in self.columns():
            row[name] = to_db_value(self, name, getattr(self, name))
        return row

    @classmethod
    def from_row(cls: Type[R], row: Dict[str, Any]) -> R:
        values: Dict[str, Any] = {}
        for name in cls.columns():
            if name not in row:
                continue
            value = row[name]
            if name == "status":
                value = Status(value)
            elif name in cls.__json_fields__:
                value = json.loads(value) if value else []
            values[name] = value
        return cls(**values)

    def to_dict(self, exclude: Tuple[str, ...] = ()) -> Dict[str, Any]:
        """
        Wire representation with camelCase keys.

        Fields listed in ``__hidden__`` and ``exclude`` are left out;
        ``__wire_names__`` renames individual fields.
        """
        data: Dict[str, Any] = {}
        skip = set(self.__hidden__) | set(exclude)
        for name in self.columns():
            if name in skip:
                continue
            key = self.__wire_names__.get(name) or camel_case(name)
            value = getattr(self, name)
            data[key] = value.value if isinstance(value, Enum) else value
        return data

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id} status={self.status.value}>"


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_db_value(model: Any, name: str, value: Any) -> Any:
    """Convert a Python value of ``model.name`` into its SQLite form."""
    if isinstance(value, Enum):
        return value.value
    if name in model.__json_fields__:
        return json.dumps(list(value or []))
    return value


def relation() -> Any:
    """Declare a non-persisted attribute filled in by ``EntityStore.populate``."""
    return field(default=None, metadata={"persist": False})
