"""
ASGI application - routing table, lifespan hooks and error mapping.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

import aiofiles

from ..faults import INTERNAL_ERROR_MESSAGE
from .controller import Controller
from .request import Request, RequestFault
from .response import Response

Handler = Callable[[Request], Awaitable[Response]]
Hook = Callable[[], Awaitable[None]]


class Router:
    """Exact-path routing table: ``path -> method -> handler``."""

    def __init__(self):
        self.routes: Dict[str, Dict[str, Handler]] = {}

    def add(self, method: str, path: str, handler: Handler) -> None:
        methods = self.routes.setdefault(path.rstrip("/") or "/", {})
        if method.upper() in methods:
            raise ValueError(f"Route already registered: {method.upper()} {path}")
        methods[method.upper()] = handler

    def include(self, controller: Controller) -> None:
        for method, path, handler in controller.routes():
            self.add(method, path, handler)

    def match(self, method: str, path: str) -> Response | Handler:
        """The handler for ``method path``, or a 404 / 405 response."""
        methods = self.routes.get(path.rstrip("/") or "/")
        if methods is None:
            return Response.error("Not Found", 404)
        handler = methods.get(method.upper())
        if handler is None:
            return Response.error(
                "Method Not Allowed", 405, headers={"allow": ", ".join(sorted(methods))}
            )
        return handler


class StaticFiles:
    """Serves files below ``directory`` for GET requests under ``prefix``."""

    def __init__(self, prefix: str, directory: str | Path):
        self.prefix = prefix.rstrip("/") + "/"
        self.directory = Path(directory).resolve()

    def handles(self, path: str) -> bool:
        return path.startswith(self.prefix)

    async def serve(self, request: Request) -> Response:
        if request.method not in ("GET", "HEAD"):
            return Response.error("Method Not Allowed", 405, headers={"allow": "GET, HEAD"})
        target = (self.directory / request.path[len(self.prefix):]).resolve()
        if self.directory not in target.parents or not target.is_file():
            return Response.error("Not Found", 404)
        async with aiofiles.open(target, "rb") as f:
            content = await f.read()
        media_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
        return Response(content, media_type=media_type)


class ShowroomApp:
    """
    ASGI entry point.

    Startup hooks run on ``lifespan.startup`` (or an explicit ``startup()``
    call), shutdown hooks on ``lifespan.shutdown``.
    """

    def __init__(self, router: Router, *, static: Optional[StaticFiles] = None):
        self.router = router
        self.static = static
        self.on_startup: List[Hook] = []
        self.on_shutdown: List[Hook] = []
        self.state: Dict[str, object] = {}
        self.logger = logging.getLogger("showroom.http")
        self._started = False

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] == "http":
            await self.handle_http(scope, receive, send)
        elif scope["type"] == "lifespan":
            await self.handle_lifespan(scope, receive, send)

    async def startup(self) -> None:
        if self._started:
            return
        for hook in self.on_startup:
            await hook()
        self._started = True

    async def shutdown(self) -> None:
        if not self._started:
            return
        for hook in reversed(self.on_shutdown):
            await hook()
        self._started = False

    async def handle_http(self, scope: dict, receive: Callable, send: Callable) -> None:
        request = Request(scope, receive)
        response = await self.dispatch(request)
        self.logger.debug(f"{request.method} {request.path} -> {response.status}")
        await response.send_asgi(send)

    async def dispatch(self, request: Request) -> Response:
        try:
            if self.static is not None and self.static.handles(request.path):
                return await self.static.serve(request)
            matched = self.router.match(request.method, request.path)
            if isinstance(matched, Response):
                return matched
            return await matched(request)
        except RequestFault as fault:
            return Response.error(fault.message, fault.status)
        except Exception:
            self.logger.exception(f"Unhandled error in {request.method} {request.path}")
            return Response.error(INTERNAL_ERROR_MESSAGE, 500)

    async def handle_lifespan(self, scope: dict, receive: Callable, send: Callable) -> None:
        """Handle ASGI lifespan events."""
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as e:
                    self.logger.error(f"Startup error: {e}", exc_info=True)
                    await send({"type": "lifespan.startup.failed", "message": str(e)})
                    raise

            elif message["type"] == "lifespan.shutdown":
                try:
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                except Exception as e:
                    self.logger.error(f"Shutdown error: {e}", exc_info=True)
                    await send({"type": "lifespan.shutdown.failed", "message": str(e)})
                break
