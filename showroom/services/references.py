"""
Reference resolution - validates that referenced records exist and are Active.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Type, TypeVar

from ..models import Brand, Category, EntityStore, Record, Role, Status

logger = logging.getLogger("showroom.services.references")

R = TypeVar("R", bound=Record)


class ReferenceResolver:
    """
    Looks up referenced records for writes.

    Category and brand references are strict by-id lookups. Role references
    are a set lookup by name: every Active role whose name was requested is
    returned, unknown names are dropped.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def resolve(self, model: Type[R], id: Any) -> Optional[R]:
        """Active record of ``model`` with ``id``, or None if absent or Deleted."""
        record = await self.store.find_by_id(model, id)
        if record is None or not record.is_active:
            return None
        return record

    async def category(self, id: Any) -> Optional[Category]:
        return await self.resolve(Category, id)

    async def brand(self, id: Any) -> Optional[Brand]:
        return await self.resolve(Brand, id)

    async def roles(self, names: Iterable[str]) -> List[Role]:
        requested = [n for n in dict.fromkeys(names) if n]
        roles = await self.store.find(Role, role_name__in=requested, status=Status.ACTIVE)
        if roles and len(roles) < len(requested):
            found = {r.role_name for r in roles}
            logger.warning(
                f"Unknown role name(s) ignored: {', '.join(n for n in requested if n not in found)}"
            )
        return roles
