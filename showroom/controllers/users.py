"""
User and role endpoints.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from ..http import DELETE, GET, PATCH, POST, Controller, Request, Response, ValidationFault
from ..services import DEFAULT_ROLE_NAMES, RoleService, UserService
from .base import require, respond, snake_case


def check_passwords(data: Mapping[str, Any]) -> str:
    password = data.get("password")
    if not password or not isinstance(password, str) or password != data.get("reEntryPassword"):
        raise ValidationFault("Password does not match")
    return password


def role_names(value: Any) -> List[str]:
    """``roleNames`` as a list; form bodies may send a comma separated string."""
    if not value:
        return list(DEFAULT_ROLE_NAMES)
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
        raise ValidationFault("Role names are not valid", field="roleNames")
    return value


class UserController(Controller):
    prefix = "/user"
    tags = ["Users"]

    def __init__(self, users: UserService):
        self.users = users

    @GET()
    async def list(self, request: Request) -> Response:
        """All Active users, or the one with ``?userId=``."""
        params = request.query_params
        order_by = params.get("orderBy")
        result = await self.users.get(
            params.get("userId"),
            order_by=snake_case(order_by) if order_by else None,
            order=params.get("order"),
        )
        return respond(result, body=lambda r: {"users": r.get("users")})

    @POST()
    async def create(self, request: Request) -> Response:
        data, _ = await request.data()
        password = check_passwords(data)
        user_id = require(data, "userId", "Please enter userId")
        result = await self.users.create(
            user_id=user_id,
            password=password,
            role_names=role_names(data.get("roleNames")),
        )
        return respond(result, 201, message="User Created")

    @PATCH()
    async def update(self, request: Request) -> Response:
        """Replace the user's password."""
        data, _ = await request.data()
        password = check_passwords(data)
        user_id = require(data, "userId", "Please enter userId")
        result = await self.users.update(user_id, password=password)
        return respond(result, message="User updated")

    @DELETE()
    async def delete(self, request: Request) -> Response:
        data, _ = await request.data()
        user_id = require(data, "userId", "Please enter userId")
        result = await self.users.delete(user_id)
        return respond(result, message="User Deleted")


class RoleController(Controller):
    prefix = "/role"
    tags = ["Users"]

    def __init__(self, roles: RoleService):
        self.roles = roles

    @GET()
    async def list(self, request: Request) -> Response:
        result = await self.roles.list_roles()
        return respond(result, body=lambda r: {"roles": r.get("roles")})
