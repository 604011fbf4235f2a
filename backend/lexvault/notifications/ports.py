"""
NotificationSender - Port interface for notification delivery

Domain services depend only on this port. The default adapter stores an
in-app Notification row (notifications.service.DatabaseNotificationSender);
other channels plug in by implementing the same interface.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID


class NotificationError(Exception):
    """
    Raised by NotificationSender implementations when delivery fails.

    Notification failures are non-fatal for the calling workflow: callers
    catch this, log it and report it, but keep the primary change.
    """
    pass


class NotificationSender(ABC):
    """Abstract interface for sending a notification to one recipient."""

    @abstractmethod
    def send(
        self,
        recipient_id: UUID,
        title: str,
        message: str,
        notification_type: str = "info",
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> None:
        """Deliver a notification.

        Args:
            recipient_id: User receiving the notification
            title: Short title
            message: Body text
            notification_type: Category (e.g. "assignment")
            entity_type: Type of the related entity
            entity_id: ID of the related entity

        Raises:
            NotificationError: If delivery fails
        """
        pass
