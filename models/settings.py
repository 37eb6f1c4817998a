"""
Settings records: notification templates.
"""

from enum import Enum

from models.base import FinManagerModel


class NotificationChannel(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"


class NotificationTemplate(FinManagerModel):
    """
    Message template sent on invoice and payment events.

    Subject and body may reference placeholders such as {{invoiceNumber}},
    {{clientName}} and {{companyName}}; they are filled in by the backend.
    """
    id: str
    code: str
    channel: NotificationChannel = NotificationChannel.EMAIL
    subject: str = ""
    body: str = ""
    updated_at: str = ""
