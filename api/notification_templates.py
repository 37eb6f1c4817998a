"""
Notification templates.

There is no backend endpoint yet: the templates are seeded locally and edits
are kept in the console session.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from models.settings import NotificationTemplate
from stores.session_store import SessionState
from utils.error_handling import ApiError

logger = logging.getLogger(__name__)

_SESSION_KEY = "notification-templates"

SEED_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "1",
        "code": "INVOICE_SENT",
        "channel": "EMAIL",
        "subject": "Invoice {{invoiceNumber}} from {{companyName}}",
        "body": "Dear {{clientName}},\n\nYour invoice {{invoiceNumber}} is ready...",
        "updated_at": "2025-01-20T10:00:00Z",
    },
    {
        "id": "2",
        "code": "PAYMENT_RECEIVED",
        "channel": "EMAIL",
        "subject": "Payment Received - Invoice {{invoiceNumber}}",
        "body": "Dear {{clientName}},\n\nWe have received your payment...",
        "updated_at": "2025-01-20T10:00:00Z",
    },
]


class NotificationTemplateService:

    def __init__(self, session: SessionState):
        self.session = session

    def _load(self) -> List[Dict[str, Any]]:
        stored = self.session.get(_SESSION_KEY)
        if stored is None:
            return [dict(t) for t in SEED_TEMPLATES]
        return list(stored)

    def list(self) -> List[NotificationTemplate]:
        return [NotificationTemplate.model_validate(t) for t in self._load()]

    def get(self, template_id: str) -> NotificationTemplate:
        for template in self.list():
            if template.id == str(template_id):
                return template
        raise ApiError(f"Template {template_id} not found", status_code=404,
                       method="GET", path=f"/notification-templates/{template_id}")

    def update(self, template_id: str, subject: str, body: str) -> NotificationTemplate:
        """Replace a template's subject and body."""
        templates = self._load()
        for template in templates:
            if template["id"] == str(template_id):
                template["subject"] = subject
                template["body"] = body
                template["updated_at"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
                self.session.set(_SESSION_KEY, templates)
                logger.info(f"Updated notification template {template['code']}")
                return NotificationTemplate.model_validate(template)
        raise ApiError(f"Template {template_id} not found", status_code=404,
                       method="PATCH", path=f"/notification-templates/{template_id}")
