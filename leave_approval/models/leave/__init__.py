"""
Leave workflow models.
"""

from leave_approval.models.leave.leave_approval import LeaveApproval
from leave_approval.models.leave.leave_request import LeaveRequest

__all__ = [
    "LeaveApproval",
    "LeaveRequest",
]
