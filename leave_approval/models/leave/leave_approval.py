"""
Leave approval history model.

One row per successful approve/reject action, written in the same
transaction as the state change it records.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from leave_approval.models.base.base_model import BaseModel, enum_column, utcnow
from leave_approval.models.base.enums import LeaveAction, LeaveStage

__all__ = ["LeaveApproval"]


class LeaveApproval(BaseModel):
    """Approval decision recorded against a leave request."""

    __tablename__ = "leave_approvals"
    __table_args__ = (
        Index("ix_leave_approvals_leave_id", "leave_id"),
        {"comment": "Leave approval decisions"}
    )

    leave_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("leave_requests.id", ondelete="CASCADE"),
        nullable=False,
        comment="Leave request acted on"
    )

    stage: Mapped[LeaveStage] = mapped_column(
        enum_column(LeaveStage, "approval_stage"),
        nullable=False,
        comment="Stage the decision was made at"
    )

    action: Mapped[LeaveAction] = mapped_column(
        enum_column(LeaveAction, "approval_action"),
        nullable=False,
        comment="approve or reject"
    )

    approver_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="User making the decision, when known"
    )

    approver_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Approver name at time of decision"
    )

    comments: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Decision notes"
    )

    decided_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Decision timestamp"
    )

    def __repr__(self) -> str:
        return (
            f"<LeaveApproval(leave_id={self.leave_id}, stage={self.stage.value}, "
            f"action={self.action.value})>"
        )
