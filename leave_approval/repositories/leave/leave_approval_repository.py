"""
Leave Approval Repository

Approval history records written alongside each state transition.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_approval.models.base.base_model import utcnow
from leave_approval.models.base.enums import LeaveAction, LeaveStage
from leave_approval.models.leave.leave_approval import LeaveApproval
from leave_approval.repositories.base.base_repository import BaseRepository


class LeaveApprovalRepository(BaseRepository[LeaveApproval]):
    """Leave approval repository."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        super().__init__(LeaveApproval, session)

    def record_decision(
        self,
        leave_id: str,
        stage: LeaveStage,
        action: LeaveAction,
        approver_id: Optional[str] = None,
        approver_name: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> LeaveApproval:
        """
        Create an approval decision record (flushed, not committed).

        Args:
            leave_id: Leave request ID
            stage: Stage the decision was made at
            action: approve or reject
            approver_id: User making the decision
            approver_name: Name shown in the approval trail
            comments: Decision notes
        """
        approval = LeaveApproval(
            leave_id=leave_id,
            stage=stage,
            action=action,
            approver_id=approver_id,
            approver_name=approver_name,
            comments=comments,
            decided_at=utcnow(),
        )
        return self.create(approval)

    def find_by_leave(self, leave_id: str) -> List[LeaveApproval]:
        """Approval trail of a request in decision order."""
        stmt = (
            select(LeaveApproval)
            .where(LeaveApproval.leave_id == leave_id)
            .order_by(LeaveApproval.decided_at.asc(), LeaveApproval.id.asc())
        )
        return self._scalars(stmt)
