"""
Notification Repository
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_approval.models.base.enums import NotificationType
from leave_approval.models.notification.notification import Notification
from leave_approval.repositories.base.base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository."""

    def __init__(self, session: Session):
        super().__init__(Notification, session)

    def create_notification(
        self,
        user_id: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        related_leave_id: Optional[str] = None,
    ) -> Notification:
        """Create a notification record (flushed, not committed)."""
        notification = Notification(
            user_id=user_id,
            message=message,
            notification_type=notification_type,
            related_leave_id=related_leave_id,
            is_read=False,
        )
        return self.create(notification)

    def find_by_user(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        """Notifications of a user, newest first."""
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
        return self._scalars(stmt)

    def find_by_leave(self, leave_id: str) -> List[Notification]:
        """Notifications about a leave request, oldest first."""
        stmt = (
            select(Notification)
            .where(Notification.related_leave_id == leave_id)
            .order_by(Notification.created_at.asc(), Notification.id.asc())
        )
        return self._scalars(stmt)
