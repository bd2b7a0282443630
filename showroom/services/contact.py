"""
Contact mail service - forwards a subject/message pair to the shop inbox.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..faults import ServiceResult
from ..mail import CONTACT_TEMPLATE, MailMessage, MailProvider, render
from .base import operation


class ContactService:
    logger = logging.getLogger("showroom.services.contact")

    def __init__(self, provider: MailProvider, sender: str, recipient: str):
        self.provider = provider
        self.sender = sender
        self.recipient = recipient

    @operation
    async def send_contact_email(
        self, subject: Optional[str], message: Optional[str]
    ) -> ServiceResult:
        if not subject or not isinstance(subject, str):
            return ServiceResult.invalid("Missing subject")
        if not message or not isinstance(message, str):
            return ServiceResult.invalid("Missing message")

        mail = MailMessage(
            from_email=self.sender,
            to=[self.recipient],
            subject=subject,
            body_text=message,
            body_html=render(CONTACT_TEMPLATE, subject=subject, message=message),
        )
        message_id = await self.provider.send(mail)

        self.logger.info(f"Contact email {message_id} sent via {self.provider.name}")
        return ServiceResult.success(messageId=message_id)
