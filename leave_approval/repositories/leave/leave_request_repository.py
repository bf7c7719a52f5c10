"""
Leave Request Repository

Persistence for leave requests, including the conditional update that
makes concurrent approval actions safe.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_approval.core.exceptions import RepositoryError, StateConflictError
from leave_approval.core.logging import get_logger
from leave_approval.models.base.base_model import utcnow
from leave_approval.models.base.enums import LeaveStage, LeaveStatus
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.models.user.user import User
from leave_approval.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


class LeaveRequestRepository(BaseRepository[LeaveRequest]):
    """
    Leave request repository.

    Features:
    - Student history and current-request lookups
    - Approver queues by stage with department filtering
    - Compare-and-set state transitions
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        super().__init__(LeaveRequest, session)

    # ============================================================================
    # FINDER METHODS
    # ============================================================================

    def find_by_student(self, student_id: str) -> List[LeaveRequest]:
        """All requests of a student, newest first."""
        stmt = (
            select(LeaveRequest)
            .where(LeaveRequest.student_id == student_id)
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        )
        return self._scalars(stmt)

    def find_pending_by_student(self, student_id: str) -> List[LeaveRequest]:
        """Pending requests of a student, newest first."""
        stmt = (
            select(LeaveRequest)
            .where(
                LeaveRequest.student_id == student_id,
                LeaveRequest.status == LeaveStatus.PENDING,
            )
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        )
        return self._scalars(stmt)

    def find_current_for_student(self, student_id: str) -> Optional[LeaveRequest]:
        """Most recently created pending request of a student, if any."""
        pending = self.find_pending_by_student(student_id)
        return pending[0] if pending else None

    def find_pending_by_stage(
        self,
        stage: LeaveStage,
        department: Optional[str] = None,
    ) -> List[LeaveRequest]:
        """
        Pending requests sitting at a stage, oldest first.

        Args:
            stage: Stage the requests must be waiting at
            department: Only requests of students in this department
        """
        stmt = select(LeaveRequest).where(
            LeaveRequest.status == LeaveStatus.PENDING,
            LeaveRequest.current_stage == stage,
        )
        if department:
            stmt = stmt.join(User, User.id == LeaveRequest.student_id).where(
                User.department == department
            )
        stmt = stmt.order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())
        return self._scalars(stmt)

    def find_all(self) -> List[LeaveRequest]:
        """Every request, newest first."""
        stmt = select(LeaveRequest).order_by(
            LeaveRequest.created_at.desc(), LeaveRequest.id.desc()
        )
        return self._scalars(stmt)

    def find_by_department(self, department: str) -> List[LeaveRequest]:
        """Requests of students in a department, newest first."""
        stmt = (
            select(LeaveRequest)
            .join(User, User.id == LeaveRequest.student_id)
            .where(User.department == department)
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        )
        return self._scalars(stmt)

    # ============================================================================
    # STATE TRANSITIONS
    # ============================================================================

    def conditional_update(
        self,
        leave_id: str,
        expected_status: LeaveStatus,
        expected_stage: LeaveStage,
        values: Dict[str, Any],
    ) -> None:
        """
        Apply `values` only if the row still has the expected status and stage.

        A single UPDATE guarded by the pre-transition state: of several
        callers racing from the same state, exactly one matches a row.

        Raises:
            StateConflictError: If the row no longer matches the expected state
            RepositoryError: On database failure
        """
        values = dict(values)
        values.setdefault("updated_at", utcnow())

        stmt = (
            update(LeaveRequest)
            .where(
                LeaveRequest.id == leave_id,
                LeaveRequest.status == expected_status,
                LeaveRequest.current_stage == expected_stage,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Conditional update failed: {str(e)}") from e

        if result.rowcount != 1:
            logger.warning(
                "Conditional update matched no row",
                extra={
                    "leave_id": leave_id,
                    "expected_status": expected_status.value,
                    "expected_stage": expected_stage.value,
                },
            )
            raise StateConflictError(
                leave_id=leave_id,
                expected_stage=expected_stage.value,
            )
