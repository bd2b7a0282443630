"""
Showroom mail - outbound email (console and SMTP providers).
"""

from .faults import MailFault, MailSendFault
from .message import MailMessage
from .providers import ConsoleProvider, MailProvider, SMTPProvider
from .templates import CONTACT_TEMPLATE, render

__all__ = [
    "MailFault",
    "MailSendFault",
    "MailMessage",
    "ConsoleProvider",
    "MailProvider",
    "SMTPProvider",
    "CONTACT_TEMPLATE",
    "render",
]
