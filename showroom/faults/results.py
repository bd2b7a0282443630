"""
Service results - the value every service operation returns.

A service never lets an exception escape. It returns a ``ServiceResult``
that is either a success carrying a payload, or a failure tagged with one
``ErrorKind``. Request handlers translate the kind into an HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional


INTERNAL_ERROR_MESSAGE = "Error Occurs"


class ErrorKind(IntEnum):
    """Failure taxonomy. Values are the HTTP-like codes reported to callers."""

    VALIDATION_FAILED = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500


@dataclass(frozen=True)
class ServiceResult:
    """
    Outcome of a service operation.

    Attributes:
        kind: ``None`` on success, otherwise the failure kind
        message: Human-readable failure message (empty on success)
        payload: Operation output (e.g. ``{"products": [...]}``)
    """

    kind: Optional[ErrorKind] = None
    message: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    # ── Constructors ─────────────────────────────────────────────────

    @classmethod
    def success(cls, **payload: Any) -> ServiceResult:
        return cls(payload=payload)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> ServiceResult:
        return cls(kind=kind, message=message)

    @classmethod
    def invalid(cls, message: str) -> ServiceResult:
        return cls.fail(ErrorKind.VALIDATION_FAILED, message)

    @classmethod
    def unauthorized(cls, message: str) -> ServiceResult:
        return cls.fail(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def not_found(cls, message: str) -> ServiceResult:
        return cls.fail(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> ServiceResult:
        return cls.fail(ErrorKind.CONFLICT, message)

    @classmethod
    def internal(cls) -> ServiceResult:
        """Generic failure; the root cause is logged, never reported."""
        return cls.fail(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def error_code(self) -> int:
        return 0 if self.kind is None else int(self.kind)

    @property
    def error_message(self) -> str:
        return self.message

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: ``{"errorCode", "errorMessage", **payload}``."""
        return {
            "errorCode": self.error_code,
            "errorMessage": self.error_message,
            **self.payload,
        }

    def __repr__(self) -> str:
        if self.ok:
            return f"ServiceResult(ok, keys={sorted(self.payload)})"
        return f"ServiceResult({self.kind.name}, {self.message!r})"
