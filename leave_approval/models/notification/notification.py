"""
Notification database model.
"""

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from leave_approval.models.base.base_model import TimestampModel, enum_column
from leave_approval.models.base.enums import NotificationType

__all__ = ["Notification"]


class Notification(TimestampModel):
    """In-app notification directed at a single user."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_id", "user_id"),
        {"comment": "Directed user notifications"}
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Recipient"
    )

    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Notification text"
    )

    notification_type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType, "notification_type"),
        nullable=False,
        default=NotificationType.INFO,
        comment="info, success, warning or error"
    )

    is_read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Read flag"
    )

    related_leave_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("leave_requests.id", ondelete="SET NULL"),
        nullable=True,
        comment="Leave request the notification is about"
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id})>"
