"""
Leave statistics schemas.
"""

from typing import Optional

from pydantic import Field

from leave_approval.models.base.enums import LeaveStage
from leave_approval.schemas.common.base import BaseSchema

__all__ = ["LeaveStatistics"]


class LeaveStatistics(BaseSchema):
    """Counters derived from a set of leave requests."""

    total: int = Field(0, ge=0)
    approved: int = Field(0, ge=0)
    pending: int = Field(0, ge=0)
    rejected: int = Field(0, ge=0)
    days_used: int = Field(0, ge=0, description="Inclusive days over approved requests")
    student_id: Optional[str] = None
    stage: Optional[LeaveStage] = None
    department: Optional[str] = None
