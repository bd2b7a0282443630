"""
Authentication service - login with user id and password, logout.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..auth import PasswordHasher, TokenSigner
from ..faults import ServiceResult, TokenFault
from ..models import EntityStore, Role, Status, User
from .base import operation

INVALID_CREDENTIALS = "Invalid user id and password"


class AuthService:
    logger = logging.getLogger("showroom.services.auth")

    def __init__(self, store: EntityStore, hasher: PasswordHasher, signer: TokenSigner):
        self.store = store
        self.hasher = hasher
        self.signer = signer

    @operation
    async def login(self, user_id: Optional[str], password: Optional[str]) -> ServiceResult:
        """
        Verify credentials and issue a session token.

        Success payload: ``refreshToken``, ``userId`` and ``roles`` (role names).
        A user stored without a password hash is let in without a password check.
        """
        if not user_id or not isinstance(user_id, str):
            return ServiceResult.unauthorized(INVALID_CREDENTIALS)
        if not isinstance(password, str):
            password = ""

        user = await self.store.find_one(User, user_id=user_id, status=Status.ACTIVE)
        if user is None:
            return ServiceResult.unauthorized(INVALID_CREDENTIALS)

        if user.password:
            loop = asyncio.get_running_loop()
            matches = await loop.run_in_executor(
                None, self.hasher.verify, user.password, password
            )
            if not matches:
                return ServiceResult.unauthorized(INVALID_CREDENTIALS)

        roles = {role.id: role for role in await self.store.find(Role, id__in=user.roles)}
        token = self.signer.sign({"userId": user.user_id})

        self.logger.info(f"User {user.user_id} logged in")
        return ServiceResult.success(
            refreshToken=token,
            userId=user.user_id,
            roles=[roles[role_id].role_name for role_id in user.roles if role_id in roles],
        )

    @operation
    async def logout(self, token: Optional[str]) -> ServiceResult:
        """End a session. Missing or invalid tokens are ignored; the cookie is cleared either way."""
        if token:
            try:
                claims = self.signer.verify(token)
            except TokenFault as fault:
                self.logger.debug(f"Logout with unusable token: {fault.message}")
            else:
                self.logger.info(f"User {claims.get('userId')} logged out")
        return ServiceResult.success()
