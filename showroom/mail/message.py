"""
Outbound mail message.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional

from ..models import utcnow


@dataclass
class MailMessage:
    """A single email: sender, recipients, subject and HTML/text bodies."""

    from_email: str
    to: List[str]
    subject: str
    body_html: Optional[str] = None
    body_text: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=utcnow)

    def to_mime(self) -> EmailMessage:
        """Build the MIME message (plain text with an HTML alternative)."""
        mime = EmailMessage()
        mime["From"] = self.from_email
        mime["To"] = ", ".join(self.to)
        mime["Subject"] = self.subject
        mime["Message-ID"] = f"<{self.id}@showroom>"
        mime.set_content(self.body_text or "")
        if self.body_html:
            mime.add_alternative(self.body_html, subtype="html")
        return mime
