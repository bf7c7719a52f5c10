from leave_approval.schemas.leave.leave_request import (
    LeaveActionRequest,
    LeaveApprovalResponse,
    LeavePassVerification,
    LeaveRequestCreate,
    LeaveRequestResponse,
)
from leave_approval.schemas.leave.leave_statistics import LeaveStatistics

__all__ = [
    "LeaveActionRequest",
    "LeaveApprovalResponse",
    "LeavePassVerification",
    "LeaveRequestCreate",
    "LeaveRequestResponse",
    "LeaveStatistics",
]
