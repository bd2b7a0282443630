"""
Mail faults - typed failures of the outbound mail subsystem.
"""

from __future__ import annotations

from typing import Any, Optional

from ..faults.core import Fault, FaultDomain, Severity


FaultDomain.MAIL = FaultDomain("mail", "Email sending and templating faults")


class MailFault(Fault):
    """Base class for all mail-subsystem faults."""

    domain = FaultDomain.MAIL

    def __init__(
        self,
        message: str,
        *,
        code: str = "MAIL_ERROR",
        severity: Severity = Severity.ERROR,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        super().__init__(
            message=message,
            code=code,
            domain=FaultDomain.MAIL,
            severity=severity,
            retryable=recoverable,
            metadata=details or {},
        )


class MailSendFault(MailFault):
    """Provider-level send failure (transient or permanent)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        transient: bool = True,
        message_id: Optional[str] = None,
    ):
        self.provider = provider
        self.transient = transient
        super().__init__(
            message=message,
            code="MAIL_SEND_TRANSIENT" if transient else "MAIL_SEND_PERMANENT",
            severity=Severity.WARN if transient else Severity.ERROR,
            details={"provider": provider, "transient": transient, "message_id": message_id},
            recoverable=transient,
        )
