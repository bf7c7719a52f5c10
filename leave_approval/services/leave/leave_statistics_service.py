"""
Leave statistics.

Counters derived on demand from the persisted request set, per student
and per approval stage. Nothing here is cached or written back.
"""

from datetime import date
from typing import Iterable, Optional, Union

from sqlalchemy.orm import Session

from leave_approval.core.exceptions import (
    InternalConsistencyError,
    UserNotFoundError,
    ValidationError,
)
from leave_approval.models.base.enums import LeaveStage, LeaveStatus
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.repositories.leave.leave_request_repository import LeaveRequestRepository
from leave_approval.repositories.user.user_repository import UserRepository
from leave_approval.schemas.leave.leave_statistics import LeaveStatistics
from leave_approval.services.base.base_service import BaseService
from leave_approval.services.base.service_result import ServiceResult
from leave_approval.services.leave.stage_sequencer import StageSequencer

DateLike = Union[date, str, None]


def _to_date(value: DateLike) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def inclusive_days(start: DateLike, end: DateLike) -> Optional[int]:
    """
    Days covered by a leave, counting both ends.

    Returns None when either date is missing, unparseable, or the range
    is reversed.
    """
    start_date, end_date = _to_date(start), _to_date(end)
    if start_date is None or end_date is None or end_date < start_date:
        return None
    return (end_date - start_date).days + 1


def compute_statistics(requests: Iterable) -> LeaveStatistics:
    """
    Count requests by status and sum the days of approved ones.

    Works on anything exposing `status`, `start_date` and `end_date`.
    Approved requests without usable dates are counted but add no days.
    """
    stats = {"total": 0, "approved": 0, "pending": 0, "rejected": 0, "days_used": 0}
    for request in requests:
        status = LeaveStatus(request.status)
        stats["total"] += 1
        stats[status.value] += 1
        if status == LeaveStatus.APPROVED:
            days = inclusive_days(request.start_date, request.end_date)
            if days is not None:
                stats["days_used"] += days
    return LeaveStatistics(**stats)


class LeaveStatisticsService(BaseService[LeaveRequest, LeaveRequestRepository]):
    """Student and approver dashboard counters."""

    def __init__(
        self,
        repository: LeaveRequestRepository,
        db_session: Session,
        user_repository: UserRepository,
        stage_sequencer: StageSequencer,
    ):
        super().__init__(repository, db_session)
        self.users = user_repository
        self.sequencer = stage_sequencer

    def student_statistics(self, student_id: str) -> ServiceResult[LeaveStatistics]:
        try:
            if self.users.get_by_id(student_id) is None:
                raise UserNotFoundError(student_id)

            stats = compute_statistics(self.repository.find_by_student(student_id))
            stats.student_id = student_id
            return ServiceResult.success(stats)
        except Exception as e:
            return self._handle_exception(e, "compute student statistics", student_id)

    def stage_statistics(
        self,
        stage: Union[LeaveStage, str],
        department: Optional[str] = None,
    ) -> ServiceResult[LeaveStatistics]:
        """
        Counters over the requests that reached `stage`.

        A request reached a stage when the stage appears in its frozen
        sequence at or before its current stage; for terminal requests the
        current stage is the stage that decided it.
        """
        try:
            try:
                stage = LeaveStage(stage)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid stage: {stage}",
                    field_errors={"stage": [f"Must be one of: {', '.join(s.value for s in LeaveStage)}"]},
                ) from e
            requests = (
                self.repository.find_by_department(department)
                if department
                else self.repository.find_all()
            )
            reached = [r for r in requests if self._has_reached(r, stage)]

            stats = compute_statistics(reached)
            stats.stage = stage
            stats.department = department
            return ServiceResult.success(stats)
        except Exception as e:
            return self._handle_exception(e, "compute stage statistics", str(stage))

    def _has_reached(self, leave_request: LeaveRequest, stage: LeaveStage) -> bool:
        try:
            sequence = self.sequencer.sequence_for(leave_request)
        except InternalConsistencyError:
            self._logger.error(
                "Skipping leave request with an unreadable stage sequence",
                extra={"leave_id": leave_request.id},
            )
            return False
        return self.sequencer.has_reached(sequence, leave_request.current_stage, stage)
