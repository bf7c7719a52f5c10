"""
Leave request database model.

The workflow subject: one row per student application, moved
through its frozen stage sequence by approver actions.
"""

from datetime import date
from typing import List

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from leave_approval.models.base.base_model import TimestampModel, enum_column
from leave_approval.models.base.enums import (
    LeaveStage,
    LeaveStatus,
    LeaveType,
)

__all__ = ["LeaveRequest"]


class LeaveRequest(TimestampModel):
    """
    Student leave request.

    `stage_sequence` is resolved once at creation and never rewritten.
    `current_stage` stays at the last acted stage once the request is
    terminal; `final_artifact_ref` is written in the same update that
    makes the request terminal.
    """

    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_requests_student_id", "student_id"),
        Index("ix_leave_requests_status_stage", "status", "current_stage"),
        Index("ix_leave_requests_created_at", "created_at"),
        {"comment": "Student leave requests and workflow state"}
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning student"
    )

    leave_type: Mapped[LeaveType] = mapped_column(
        enum_column(LeaveType, "leave_type"),
        nullable=False,
        default=LeaveType.OTHER,
        comment="Leave category"
    )

    reason: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Reason given by the student"
    )

    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day of leave"
    )

    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Last day of leave (inclusive)"
    )

    emergency_contact: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Contact during leave"
    )

    supporting_docs: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Reference to supporting documents"
    )

    is_hostel_student: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Hostel residency captured at creation"
    )

    # Workflow state
    stage_sequence: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered approval stages frozen at creation"
    )

    status: Mapped[LeaveStatus] = mapped_column(
        enum_column(LeaveStatus, "leave_status"),
        nullable=False,
        default=LeaveStatus.PENDING,
        comment="pending, approved or rejected"
    )

    current_stage: Mapped[LeaveStage] = mapped_column(
        enum_column(LeaveStage, "leave_stage"),
        nullable=False,
        comment="Stage awaiting action, frozen once terminal"
    )

    comments: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Last note left by the most recent actor"
    )

    final_artifact_ref: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Leave pass QR artifact, set at the terminal transition"
    )

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest(id={self.id}, student_id={self.student_id}, "
            f"status={self.status.value}, stage={self.current_stage.value})>"
        )

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1
