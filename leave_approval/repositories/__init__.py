"""
Data access layer.
"""

from leave_approval.repositories.base.base_repository import BaseRepository
from leave_approval.repositories.leave.leave_approval_repository import LeaveApprovalRepository
from leave_approval.repositories.leave.leave_request_repository import LeaveRequestRepository
from leave_approval.repositories.notification.notification_repository import NotificationRepository
from leave_approval.repositories.user.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "LeaveApprovalRepository",
    "LeaveRequestRepository",
    "NotificationRepository",
    "UserRepository",
]
