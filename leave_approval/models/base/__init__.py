from leave_approval.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    enum_column,
    utcnow,
)
from leave_approval.models.base.enums import (
    LeaveAction,
    LeaveStage,
    LeaveStatus,
    LeaveType,
    NotificationType,
    UserRole,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "enum_column",
    "utcnow",
    "LeaveAction",
    "LeaveStage",
    "LeaveStatus",
    "LeaveType",
    "NotificationType",
    "UserRole",
]
