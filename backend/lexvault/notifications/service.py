"""Notification service - in-app notification storage and inbox operations."""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.base import utcnow
from ..models.notification import Notification
from .ports import NotificationSender, NotificationError

logger = logging.getLogger(__name__)


class DatabaseNotificationSender(NotificationSender):
    """Stores notifications as rows the recipient reads from their inbox.

    Each send runs in a SAVEPOINT so a failed insert is rolled back on its own
    and leaves the surrounding transaction usable.
    """

    def __init__(self, db: Session):
        self.db = db

    def send(
        self,
        recipient_id: UUID,
        title: str,
        message: str,
        notification_type: str = "info",
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> None:
        try:
            with self.db.begin_nested():
                self.db.add(Notification(
                    user_id=recipient_id,
                    title=title,
                    message=message,
                    type=notification_type,
                    entity_type=entity_type,
                    entity_id=entity_id,
                ))
        except SQLAlchemyError as e:
            raise NotificationError(f"Could not store notification for {recipient_id}: {e}") from e


class NotificationService:
    """Inbox operations for the current user."""

    def __init__(self, db: Session):
        self.db = db

    def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Notification], int, int]:
        """List a user's notifications, newest first.

        Returns:
            Tuple of (notifications, total count, unread count)
        """
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        unread = query.filter(Notification.is_read.is_(False)).count()
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))

        total = query.count()
        notifications = (
            query.order_by(desc(Notification.created_at))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return notifications, total, unread

    def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).first()
        if not notification:
            raise NotFoundError(f"Notification {notification_id} not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            self.db.flush()
        return notification

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of the user as read.

        Returns:
            Number of notifications updated
        """
        marked = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False)
        ).update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
        self.db.flush()
        logger.info(f"Marked {marked} notifications read", extra={"actor_id": user_id})
        return marked
