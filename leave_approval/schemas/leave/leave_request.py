"""
Leave request schemas.

Create and action payloads, and the views handed back to students,
approvers and pass verifiers. The frozen stage sequence stays internal
and is never part of a response.
"""

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from leave_approval.models.base.enums import (
    LeaveAction,
    LeaveStage,
    LeaveStatus,
    LeaveType,
)
from leave_approval.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
)

__all__ = [
    "LeaveRequestCreate",
    "LeaveActionRequest",
    "LeaveRequestResponse",
    "LeaveApprovalResponse",
    "LeavePassVerification",
]


class LeaveRequestCreate(BaseCreateSchema):
    """
    Student leave application.

    Date ordering is checked by the lifecycle service so that the
    failure carries its own error code.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "student_id": "123e4567-e89b-12d3-a456-426614174000",
                "leave_type": "medical",
                "reason": "Medical",
                "start_date": "2024-01-15",
                "end_date": "2024-01-16",
            }
        }
    )

    student_id: str = Field(..., min_length=1, description="Applying student")
    leave_type: LeaveType = Field(default=LeaveType.OTHER)
    reason: str = Field(..., min_length=1, max_length=2000)
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave, inclusive")
    emergency_contact: Union[str, None] = Field(None, max_length=100)
    supporting_docs: Union[str, None] = Field(None, max_length=2000)

    @field_validator("emergency_contact", "supporting_docs")
    @classmethod
    def blank_to_none(cls, v: Union[str, None]) -> Union[str, None]:
        if v is not None and not v.strip():
            return None
        return v


class LeaveActionRequest(BaseCreateSchema):
    """Approve or reject decision submitted by an approver."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "actor_stage": "mentor",
                "action": "reject",
                "comments": "Insufficient documentation",
            }
        }
    )

    actor_stage: LeaveStage = Field(..., description="Stage the actor acts at")
    action: LeaveAction
    comments: Union[str, None] = Field(None, max_length=1000)
    actor_id: Union[str, None] = Field(None, description="Acting user, when known")

    @field_validator("comments")
    @classmethod
    def normalize_comments(cls, v: Union[str, None]) -> Union[str, None]:
        if v is not None:
            v = v.strip()
            return v if v else None
        return None


class LeaveRequestResponse(BaseResponseSchema):
    """Leave request as shown to students and approvers."""

    student_id: str
    leave_type: LeaveType
    reason: str
    start_date: date
    end_date: date
    emergency_contact: Optional[str] = None
    supporting_docs: Optional[str] = None
    is_hostel_student: bool
    status: LeaveStatus
    current_stage: LeaveStage
    comments: Optional[str] = None
    final_artifact_ref: Optional[str] = None
    updated_at: datetime


class LeaveApprovalResponse(BaseSchema):
    """One entry of a request's approval trail."""

    stage: LeaveStage
    action: LeaveAction
    approver_id: Optional[str] = None
    approver_name: Optional[str] = None
    comments: Optional[str] = None
    decided_at: datetime


class LeavePassVerification(BaseSchema):
    """Public view returned when a leave pass QR code is scanned."""

    leave_id: str
    student_name: str
    roll_number: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    is_hostel_student: bool
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    current_stage: LeaveStage
    is_valid: bool = Field(..., description="True only for fully approved requests")
    approvals: List[LeaveApprovalResponse] = Field(default_factory=list)
