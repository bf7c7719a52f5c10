"""
Notification schemas.
"""

from typing import Optional

from leave_approval.models.base.enums import NotificationType
from leave_approval.schemas.common.base import BaseResponseSchema

__all__ = ["NotificationResponse"]


class NotificationResponse(BaseResponseSchema):
    """Notification as shown to its recipient."""

    user_id: str
    message: str
    notification_type: NotificationType
    is_read: bool
    related_leave_id: Optional[str] = None
