"""
HTTP response - JSON bodies (orjson), cookies, ASGI send.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import formatdate
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

import orjson


class Response:
    """
    Buffered HTTP response.

    Usage:
        response = Response.json({"message": "Brand Created"}, status=201)
        response.set_cookie("jwt", token, max_age=86400)
        await response.send_asgi(send)
    """

    def __init__(
        self,
        content: bytes = b"",
        status: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
    ):
        self.content = content
        self.status = status
        self._headers: List[Tuple[str, str]] = []
        for name, value in (headers or {}).items():
            self.add_header(name, value)
        if media_type:
            self.add_header("content-type", media_type)

    @classmethod
    def json(
        cls,
        obj: Any,
        status: int = 200,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "Response":
        """Create JSON response."""
        return cls(
            content=orjson.dumps(obj, default=_json_default_serializer),
            status=status,
            headers=headers,
            media_type="application/json; charset=utf-8",
        )

    @classmethod
    def error(
        cls, message: str, status: int, *, headers: Optional[Mapping[str, str]] = None
    ) -> "Response":
        """Error body: ``{"message": ...}``."""
        return cls.json({"message": message}, status=status, headers=headers)

    # ── Headers ──────────────────────────────────────────────────────

    def add_header(self, name: str, value: str) -> None:
        self._headers.append((name.lower(), value))

    @property
    def headers(self) -> List[Tuple[str, str]]:
        return list(self._headers)

    def set_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: Optional[int] = None,
        expires: Optional[datetime] = None,
        path: str = "/",
        secure: bool = True,
        httponly: bool = True,
        samesite: Optional[str] = "Lax",
    ) -> None:
        cookie_parts = [f"{name}={value}"]
        if max_age is not None:
            cookie_parts.append(f"Max-Age={max_age}")
        if expires:
            cookie_parts.append(f"Expires={formatdate(expires.timestamp(), usegmt=True)}")
        cookie_parts.append(f"Path={path}")
        if secure:
            cookie_parts.append("Secure")
        if httponly:
            cookie_parts.append("HttpOnly")
        if samesite:
            cookie_parts.append(f"SameSite={samesite}")
        self.add_header("set-cookie", "; ".join(cookie_parts))

    def delete_cookie(self, name: str, path: str = "/", **options: Any) -> None:
        """Delete a cookie by setting Max-Age=0."""
        self.set_cookie(
            name,
            "",
            max_age=0,
            expires=datetime.fromtimestamp(0, tz=timezone.utc),
            path=path,
            **options,
        )

    # ── ASGI ─────────────────────────────────────────────────────────

    async def send_asgi(self, send: Callable[[dict], Awaitable[None]]) -> None:
        headers = [(k.encode("latin-1"), v.encode("latin-1")) for k, v in self._headers]
        headers.append((b"content-length", str(len(self.content)).encode("latin-1")))
        await send({"type": "http.response.start", "status": self.status, "headers": headers})
        await send({"type": "http.response.body", "body": self.content})


def _json_default_serializer(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
