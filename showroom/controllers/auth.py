"""
Authentication endpoints - login issues the ``jwt`` cookie, logout clears it.
"""

from __future__ import annotations

from ..auth import DEFAULT_TTL
from ..http import POST, Controller, Request, Response
from ..services import AuthService
from .base import respond

COOKIE_NAME = "jwt"


class AuthController(Controller):
    prefix = "/auth"
    tags = ["Authentication"]

    def __init__(self, auth: AuthService, *, cookie_secure: bool = False, token_ttl: int = DEFAULT_TTL):
        self.auth = auth
        self.cookie_secure = cookie_secure
        self.token_ttl = token_ttl

    @POST("/login")
    async def login(self, request: Request) -> Response:
        """Authenticate and receive the session cookie."""
        data, _ = await request.data()
        result = await self.auth.login(data.get("userId"), data.get("password"))
        if not result.ok:
            return respond(result)

        response = Response.json({"userId": result.get("userId"), "roles": result.get("roles")})
        response.set_cookie(
            COOKIE_NAME,
            result.get("refreshToken"),
            max_age=self.token_ttl,
            secure=self.cookie_secure,
            httponly=True,
            samesite="Lax",
        )
        return response

    @POST("/logout")
    async def logout(self, request: Request) -> Response:
        await self.auth.logout(request.cookies.get(COOKIE_NAME))
        response = Response.json({"message": "Logout successfully"})
        response.delete_cookie(COOKIE_NAME, secure=self.cookie_secure, httponly=True, samesite="Lax")
        return response
