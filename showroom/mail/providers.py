"""
Mail providers.

- ConsoleProvider: logs messages instead of sending them (development)
- SMTPProvider: async SMTP delivery via aiosmtplib

Providers return a message id on success and raise ``MailSendFault`` on
failure.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import aiosmtplib

from .faults import MailSendFault
from .message import MailMessage

logger = logging.getLogger("showroom.mail.providers")


class MailProvider(Protocol):
    name: str

    async def send(self, message: MailMessage) -> str:
        ...


class ConsoleProvider:
    """Provider that logs emails instead of sending them."""

    name: str = "console"

    def __init__(self, name: str = "console"):
        self.name = name
        self.outbox: list[MailMessage] = []

    async def send(self, message: MailMessage) -> str:
        separator = "=" * 72
        output = (
            f"\n{separator}\n"
            f"  CONSOLE MAIL (not actually sent)\n"
            f"{separator}\n"
            f"  ID:      {message.id}\n"
            f"  From:    {message.from_email}\n"
            f"  To:      {', '.join(message.to)}\n"
            f"  Subject: {message.subject}\n"
            f"  Date:    {message.created_at}\n"
            f"{'-' * 72}\n"
        )
        if message.body_text:
            output += f"{message.body_text}\n"
        if message.body_html:
            output += f"{'-' * 72}\n[HTML]\n{message.body_html}\n"
        output += separator

        self.outbox.append(message)
        logger.info(output)
        return message.id


class SMTPProvider:
    """
    Async SMTP mail provider backed by aiosmtplib.

    Usage::

        provider = SMTPProvider(
            host="smtp.example.com",
            port=587,
            username="user@example.com",
            password="secret",
            use_tls=True,
        )
        await provider.send(message)
    """

    name: str = "smtp"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, message: MailMessage) -> str:
        mime = message.to_mime()
        try:
            await aiosmtplib.send(
                mime,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.use_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPResponseException as exc:
            # 5xx replies are permanent, everything else may succeed on retry
            raise MailSendFault(
                f"SMTP send failed: {exc.code} {exc.message}",
                provider=self.name,
                transient=exc.code < 500,
                message_id=message.id,
            ) from exc
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise MailSendFault(
                f"SMTP send failed: {exc}",
                provider=self.name,
                message_id=message.id,
            ) from exc

        logger.info(f"SMTP sent via {self.host}:{self.port}: {message.id} -> {message.to}")
        return message.id
