"""
User and role services.

Users are addressed by their ``user_id`` string. The roles a user holds are
resolved by name when the user is created and are not re-synced afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from ..auth import PasswordHasher
from ..faults import ServiceResult
from ..models import EntityStore, Role, Status, User
from .base import Prepared, SoftDeleteService, operation, sortable_fields
from .references import ReferenceResolver

DEFAULT_ROLE_NAMES = ("staff",)


class UserService(SoftDeleteService):
    model = User
    label = "User"
    noun = "user"
    payload_key = "users"
    unique_field = "user_id"
    key_field = "user_id"
    sortable = sortable_fields(User, exclude=("password", "roles"))

    logger = logging.getLogger("showroom.services.user")

    def __init__(self, store: EntityStore, hasher: PasswordHasher):
        super().__init__(store)
        self.hasher = hasher
        self.references = ReferenceResolver(store)

    async def hash_password(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.hasher.hash, password)

    async def prepare_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        password = fields.get("password")
        if password:
            fields = {**fields, "password": await self.hash_password(password)}
        return fields

    async def prepare_create(self, fields: Dict[str, Any]) -> Prepared:
        """
        Resolve ``role_names``; the password is already hashed.

        Unknown role names are dropped; the user keeps the roles that
        resolve. Creation fails only when none of them does.
        """
        roles = await self.references.roles(fields.pop("role_names", None) or DEFAULT_ROLE_NAMES)
        if not roles:
            return ServiceResult.conflict("Role does not exist")
        return {
            **fields,
            "password": fields.get("password") or None,
            "roles": [role.id for role in roles],
        }

    async def prepare_update(self, record: User, fields: Dict[str, Any]) -> Prepared:
        # Password is the only mutable field; the previous one is not checked
        if not fields.get("password"):
            return ServiceResult.invalid("Please provide a new password")
        return {"password": fields["password"]}


class RoleService:
    """Role listing, and role creation for the operator command line."""

    logger = logging.getLogger("showroom.services.role")

    def __init__(self, store: EntityStore):
        self.store = store

    @operation
    async def list_roles(self) -> ServiceResult:
        roles = await self.store.find(Role, status=Status.ACTIVE)
        if not roles:
            return ServiceResult.not_found("No role found")
        return ServiceResult.success(roles=[role.to_dict() for role in roles])

    @operation
    async def create_role(
        self, role_id: int, role_name: str, end_points: Optional[Iterable[str]] = None
    ) -> ServiceResult:
        async with self.store.transaction():
            existing = await self.store.find_one(
                Role, role_name=role_name, status=Status.ACTIVE
            )
            if existing is not None:
                return ServiceResult.conflict("Role already exists")
            role = await self.store.create(
                Role,
                role_id=role_id,
                role_name=role_name,
                end_points=list(end_points or ()),
                status=Status.ACTIVE,
            )
        self.logger.info(f"Role {role.role_name} created")
        return ServiceResult.success(id=role.id)
