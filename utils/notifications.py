"""
Toast notifications queued per console session.

A page action queues notifications; the next rendered page (or the CLI prompt)
drains and shows them.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from stores.session_store import SessionState

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Operation failed. Please try again."
DEFAULT_DURATION = 3.5

_SESSION_KEY = "notifications"


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class Notification(BaseModel):
    title: str
    description: Optional[str] = None
    type: NotificationType = NotificationType.INFO
    duration: float = DEFAULT_DURATION


class NotificationCenter:
    """Queue of pending notifications kept in the session state."""

    def __init__(self, session: SessionState):
        self.session = session

    def notify(self, title: str, description: Optional[str] = None,
               type: NotificationType = NotificationType.INFO,
               duration: float = DEFAULT_DURATION) -> Notification:
        notification = Notification(title=title, description=description, type=type, duration=duration)
        queue: List[Dict[str, Any]] = list(self.session.get(_SESSION_KEY) or [])
        queue.append(notification.model_dump(mode="json"))
        self.session.set(_SESSION_KEY, queue)
        logger.debug(f"Queued {notification.type.value} notification: {title}")
        return notification

    def success(self, title: str, description: Optional[str] = None) -> Notification:
        return self.notify(title, description, NotificationType.SUCCESS)

    def error(self, title: str, description: Optional[str] = None) -> Notification:
        return self.notify(title, description, NotificationType.ERROR)

    def info(self, title: str, description: Optional[str] = None) -> Notification:
        return self.notify(title, description, NotificationType.INFO)

    def warning(self, title: str, description: Optional[str] = None) -> Notification:
        return self.notify(title, description, NotificationType.WARNING)

    def pending(self) -> List[Notification]:
        """Queued notifications, left in place."""
        return [Notification.model_validate(item) for item in self.session.get(_SESSION_KEY) or []]

    def drain(self) -> List[Notification]:
        """Return and clear the queued notifications."""
        notifications = self.pending()
        self.session.delete(_SESSION_KEY)
        return notifications
