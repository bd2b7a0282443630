"""
Controller Method Decorators

HTTP method decorators for controller methods.
Attach metadata without import-time side effects; ``Router.include``
collects it when a controller instance is mounted.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterator, List, Optional, Tuple, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class RouteDecorator:
    """
    Base route decorator.

    ``path`` is joined to the controller ``prefix``; ``None`` mounts the
    method on the prefix itself.
    """

    method: str = ""

    def __init__(self, path: Optional[str] = None, *, summary: Optional[str] = None):
        self.path = path
        self.summary = summary

    def __call__(self, func: F) -> F:
        if not hasattr(func, "__route_metadata__"):
            func.__route_metadata__ = []

        func.__route_metadata__.append({
            "http_method": self.method,
            "path": self.path,
            "summary": self.summary or func.__name__.replace("_", " ").title(),
            "description": inspect.getdoc(func) or "",
            "func_name": func.__name__,
        })
        return func


class GET(RouteDecorator):
    """GET request decorator."""
    method = "GET"


class POST(RouteDecorator):
    """POST request decorator."""
    method = "POST"


class PATCH(RouteDecorator):
    """PATCH request decorator."""
    method = "PATCH"


class DELETE(RouteDecorator):
    """DELETE request decorator."""
    method = "DELETE"


class Controller:
    """
    Base Controller class.

    Class Attributes:
        prefix: URL prefix for all routes (e.g., "/category")
        tags: grouping labels, informational only

    Example:
        class MenuController(Controller):
            prefix = "/menu"

            def __init__(self, menu: MenuService):
                self.menu = menu

            @GET()
            async def get_menu(self, request):
                ...
    """

    prefix: str = ""
    tags: List[str] = []

    def routes(self) -> Iterator[Tuple[str, str, Callable[..., Any]]]:
        """Yield ``(method, path, bound handler)`` for every decorated method."""
        for name, func in inspect.getmembers(type(self), inspect.isfunction):
            for metadata in getattr(func, "__route_metadata__", ()):
                path = self.prefix.rstrip("/") + (metadata["path"] or "")
                yield metadata["http_method"], path or "/", getattr(self, name)
