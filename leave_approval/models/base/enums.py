"""
Database enums for the leave approval workflow.

Provides SQLAlchemy-compatible enum definitions that match
the Pydantic schema enums for consistency.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "student"
    MENTOR = "mentor"
    HOD = "hod"
    PRINCIPAL = "principal"
    WARDEN = "warden"
    ADMIN = "admin"


class LeaveStage(str, enum.Enum):
    """Approval stage a leave request can sit at."""
    MENTOR = "mentor"
    HOD = "hod"
    PRINCIPAL = "principal"
    WARDEN = "warden"

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]

    @property
    def approver_role(self) -> UserRole:
        """Role whose holders act at this stage."""
        return _STAGE_ROLES[self]


_STAGE_LABELS = {
    LeaveStage.MENTOR: "Mentor",
    LeaveStage.HOD: "HOD",
    LeaveStage.PRINCIPAL: "Principal",
    LeaveStage.WARDEN: "Warden",
}

_STAGE_ROLES = {
    LeaveStage.MENTOR: UserRole.MENTOR,
    LeaveStage.HOD: UserRole.HOD,
    LeaveStage.PRINCIPAL: UserRole.PRINCIPAL,
    LeaveStage.WARDEN: UserRole.WARDEN,
}


class LeaveStatus(str, enum.Enum):
    """Leave request status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, enum.Enum):
    """Leave type categorization."""
    MEDICAL = "medical"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    OTHER = "other"


class LeaveAction(str, enum.Enum):
    """Decision an approver submits."""
    APPROVE = "approve"
    REJECT = "reject"


class NotificationType(str, enum.Enum):
    """Notification severity shown to the recipient."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
