"""
Domain-specific fault types raised by the infrastructure layers.
"""

from __future__ import annotations

from typing import Any

from .core import Fault, FaultDomain, Severity


# ============================================================================
# STORAGE Faults
# ============================================================================

class StorageFault(Fault):
    """Base class for database / entity store faults."""

    domain = FaultDomain.STORAGE


class QueryFault(StorageFault):
    """Query execution failed."""

    def __init__(self, model: str, operation: str, reason: str, **kwargs: Any):
        super().__init__(
            code="QUERY_FAILED",
            message=f"Query on '{model}' ({operation}) failed: {reason}",
            domain=FaultDomain.STORAGE,
            retryable=True,
            metadata={"model": model, "operation": operation, "reason": reason, **kwargs.get("metadata", {})},
        )


class DatabaseConnectionFault(StorageFault):
    """Database connection failed."""

    def __init__(self, url: str, reason: str, **kwargs: Any):
        super().__init__(
            code="DB_CONNECTION_FAILED",
            message=f"Database connection failed ({url}): {reason}",
            domain=FaultDomain.STORAGE,
            severity=Severity.FATAL,
            retryable=True,
            metadata={"url": url, "reason": reason, **kwargs.get("metadata", {})},
        )


class SchemaFault(StorageFault):
    """Schema creation failed."""

    def __init__(self, table: str, reason: str, **kwargs: Any):
        super().__init__(
            code="SCHEMA_FAULT",
            message=f"Schema error for table '{table}': {reason}",
            domain=FaultDomain.STORAGE,
            severity=Severity.FATAL,
            metadata={"table": table, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# IO Faults
# ============================================================================

class UploadFault(Fault):
    """Binary object could not be stored."""

    def __init__(self, reason: str, *, filename: str | None = None):
        super().__init__(
            code="IMAGE_UPLOAD_FAILED",
            message=f"Image upload failed: {reason}",
            domain=FaultDomain.IO,
            metadata={"filename": filename} if filename else {},
        )


class UnsupportedMediaTypeFault(Fault):
    """Upload payload has a MIME type outside the accepted set."""

    def __init__(self, content_type: str):
        super().__init__(
            code="UNSUPPORTED_MEDIA_TYPE",
            message="Invalid mime type!",
            domain=FaultDomain.IO,
            severity=Severity.WARN,
            retryable=False,
            public=True,
            metadata={"content_type": content_type},
        )


# ============================================================================
# SECURITY Faults
# ============================================================================

class TokenFault(Fault):
    """Token could not be decoded or failed validation."""

    def __init__(self, reason: str):
        super().__init__(
            code="INVALID_TOKEN",
            message=reason,
            domain=FaultDomain.SECURITY,
            severity=Severity.WARN,
            public=True,
        )
