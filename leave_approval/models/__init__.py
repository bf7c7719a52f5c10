"""
SQLAlchemy models for the leave approval workflow.

Importing this package registers every table on `Base.metadata`.
"""

from leave_approval.models.base import Base, BaseModel, TimestampModel
from leave_approval.models.leave import LeaveApproval, LeaveRequest
from leave_approval.models.notification import Notification
from leave_approval.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "LeaveApproval",
    "LeaveRequest",
    "Notification",
    "User",
]
