"""
Showroom HTTP layer - a small ASGI application.
"""

from .app import Router, ShowroomApp, StaticFiles
from .controller import DELETE, GET, PATCH, POST, Controller
from .request import (
    BadRequest,
    InvalidJSON,
    PayloadTooLarge,
    Request,
    RequestFault,
    UnsupportedMediaType,
    ValidationFault,
)
from .response import Response

__all__ = [
    "Router",
    "ShowroomApp",
    "StaticFiles",
    "Controller",
    "GET",
    "POST",
    "PATCH",
    "DELETE",
    "BadRequest",
    "InvalidJSON",
    "PayloadTooLarge",
    "Request",
    "RequestFault",
    "UnsupportedMediaType",
    "ValidationFault",
    "Response",
]
