"""
Showroom faults.

Structured fault types raised by infrastructure code, and the
``ServiceResult`` / ``ErrorKind`` pair returned by every service operation.
"""

from .core import (
    DOMAIN_DEFAULTS,
    Fault,
    FaultDomain,
    Severity,
)
from .domains import (
    DatabaseConnectionFault,
    QueryFault,
    SchemaFault,
    StorageFault,
    TokenFault,
    UnsupportedMediaTypeFault,
    UploadFault,
)
from .results import (
    INTERNAL_ERROR_MESSAGE,
    ErrorKind,
    ServiceResult,
)

__all__ = [
    "DOMAIN_DEFAULTS",
    "Fault",
    "FaultDomain",
    "Severity",
    "DatabaseConnectionFault",
    "QueryFault",
    "SchemaFault",
    "StorageFault",
    "TokenFault",
    "UnsupportedMediaTypeFault",
    "UploadFault",
    "INTERNAL_ERROR_MESSAGE",
    "ErrorKind",
    "ServiceResult",
]
