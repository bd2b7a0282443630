"""
HTTP request wrapper over an ASGI scope.

Supports query parameters, cookies, and JSON,
``application/x-www-form-urlencoded`` and ``multipart/form-data`` bodies.
"""

from __future__ import annotations

import json
import os
from http.cookies import SimpleCookie
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl

from python_multipart import MultipartParser
from python_multipart.multipart import parse_options_header

from ..faults import Fault, FaultDomain, Severity
from ..uploads import UploadFile


# ============================================================================
# Request Faults
# ============================================================================

class RequestFault(Fault):
    """Base class for request-related faults. ``status`` is the HTTP status."""

    domain = FaultDomain.IO
    status = 400

    def __init__(self, message: Optional[str] = None, **metadata: Any):
        super().__init__(
            code=self.code,
            message=message or self.message,
            severity=Severity.WARN,
            public=True,
            metadata=metadata,
        )


class BadRequest(RequestFault):
    """Malformed request (400)."""
    code = "BAD_REQUEST"
    message = "Bad request"


class InvalidJSON(RequestFault):
    """Invalid JSON payload (400)."""
    code = "INVALID_JSON"
    message = "Invalid JSON"


class ValidationFault(RequestFault):
    """Missing or malformed input field (400)."""
    code = "VALIDATION_FAILED"
    message = "Validation failed"


class PayloadTooLarge(RequestFault):
    """Request payload exceeds limits (413)."""
    code = "PAYLOAD_TOO_LARGE"
    message = "Payload too large"
    status = 413


class UnsupportedMediaType(RequestFault):
    """Unsupported Content-Type (415)."""
    code = "UNSUPPORTED_MEDIA_TYPE"
    message = "Unsupported media type"
    status = 415


FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ============================================================================
# Request
# ============================================================================

class Request:
    """
    Request object handed to controllers.

    Body accessors cache their result so a body can be read more than once.
    """

    def __init__(
        self,
        scope: Mapping[str, Any],
        receive: Callable[[], Awaitable[dict]],
        *,
        max_body_size: int = 10_485_760,  # 10 MiB
    ):
        self.scope = scope
        self._receive = receive
        self.max_body_size = max_body_size

        self._body: Optional[bytes] = None
        self._json: Any = None
        self._form: Optional[Tuple[Dict[str, str], Dict[str, UploadFile]]] = None
        self._headers: Optional[Dict[str, str]] = None

    # ── Basic properties ─────────────────────────────────────────────

    @property
    def method(self) -> str:
        return self.scope["method"].upper()

    @property
    def path(self) -> str:
        return self.scope["path"]

    @property
    def query_params(self) -> Dict[str, str]:
        """Query parameters; for repeated keys the last value wins."""
        qs = self.scope.get("query_string", b"").decode("latin-1")
        return dict(parse_qsl(qs, keep_blank_values=True))

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.query_params.get(name, default)

    @property
    def headers(self) -> Dict[str, str]:
        if self._headers is None:
            self._headers = {
                k.decode("latin-1").lower(): v.decode("latin-1")
                for k, v in self.scope.get("headers", [])
            }
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def cookies(self) -> Dict[str, str]:
        raw = self.header("cookie")
        if not raw:
            return {}
        jar = SimpleCookie()
        jar.load(raw)
        return {key: morsel.value for key, morsel in jar.items()}

    def media_type(self) -> str:
        content_type = self.header("content-type") or ""
        return content_type.split(";", 1)[0].strip().lower()

    # ── Body ─────────────────────────────────────────────────────────

    async def body(self) -> bytes:
        """Read full request body (idempotent)."""
        if self._body is not None:
            return self._body

        chunks: List[bytes] = []
        total_size = 0
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            total_size += len(chunk)
            if total_size > self.max_body_size:
                raise PayloadTooLarge(max_allowed=self.max_body_size, actual=total_size)
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        self._body = b"".join(chunks)
        return self._body

    async def json(self) -> Any:
        if self._json is not None:
            return self._json
        body_bytes = await self.body()
        if not body_bytes:
            return {}
        try:
            self._json = json.loads(body_bytes.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidJSON(f"Invalid UTF-8 in JSON payload: {e}")
        except json.JSONDecodeError as e:
            raise InvalidJSON(f"Invalid JSON: {e}")
        return self._json

    async def form(self) -> Tuple[Dict[str, str], Dict[str, UploadFile]]:
        """Form fields and uploaded files (urlencoded or multipart)."""
        if self._form is not None:
            return self._form

        media_type = self.media_type()
        if media_type == "application/x-www-form-urlencoded":
            body_str = (await self.body()).decode("utf-8", errors="replace")
            self._form = dict(parse_qsl(body_str, keep_blank_values=True)), {}
        elif media_type == "multipart/form-data":
            _, options = parse_options_header(self.header("content-type"))
            boundary = options.get(b"boundary")
            if not boundary:
                raise BadRequest("No boundary in multipart Content-Type")
            self._form = await self._parse_multipart(boundary)
        else:
            raise UnsupportedMediaType(f"Expected form data, got {media_type or 'nothing'}")
        return self._form

    async def data(self) -> Tuple[Dict[str, Any], Dict[str, UploadFile]]:
        """
        Request payload as ``(fields, files)`` whatever the body encoding.

        JSON bodies must be objects. An empty body yields empty mappings.
        """
        media_type = self.media_type()
        if media_type in FORM_TYPES:
            return await self.form()
        if not await self.body():
            return {}, {}
        payload = await self.json()
        if not isinstance(payload, dict):
            raise InvalidJSON("Expected a JSON object")
        return payload, {}

    async def _parse_multipart(
        self, boundary: bytes
    ) -> Tuple[Dict[str, str], Dict[str, UploadFile]]:
        fields: Dict[str, str] = {}
        files: Dict[str, UploadFile] = {}
        state: Dict[str, Any] = {}

        def on_part_begin():
            state.update(
                headers={}, header_field=bytearray(), header_value=bytearray(),
                data=bytearray(), name=None, filename=None, content_type="text/plain",
            )

        def on_header_field(data: bytes, start: int, end: int):
            state["header_field"].extend(data[start:end])

        def on_header_value(data: bytes, start: int, end: int):
            state["header_value"].extend(data[start:end])

        def on_header_end():
            name = state["header_field"].decode("utf-8", errors="replace").lower()
            state["headers"][name] = state["header_value"].decode("utf-8", errors="replace")
            state["header_field"] = bytearray()
            state["header_value"] = bytearray()

        def on_headers_finished():
            _, options = parse_options_header(state["headers"].get("content-disposition", ""))
            name = options.get(b"name")
            state["name"] = name.decode("utf-8") if name else None
            filename = options.get(b"filename")
            if filename:
                state["filename"] = os.path.basename(filename.decode("utf-8"))
            state["content_type"] = state["headers"].get("content-type", state["content_type"])

        def on_part_data(data: bytes, start: int, end: int):
            state["data"].extend(data[start:end])

        def on_part_end():
            if not state["name"]:
                return
            if state["filename"] is not None:
                files[state["name"]] = UploadFile(
                    filename=state["filename"],
                    content_type=state["content_type"],
                    content=bytes(state["data"]),
                )
            else:
                fields[state["name"]] = state["data"].decode("utf-8", errors="replace")

        callbacks = {
            "on_part_begin": on_part_begin,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
            "on_header_end": on_header_end,
            "on_headers_finished": on_headers_finished,
        }

        parser = MultipartParser(boundary, callbacks)
        try:
            parser.write(await self.body())
            parser.finalize()
        except Fault:
            raise
        except Exception as e:
            raise BadRequest(f"Multipart parsing failed: {e}")
        return fields, files
