"""
Approver directory.

Resolves which users may act on a request at a given stage. Resolution
only reads user records. An empty result is reported, not raised:
the request still waits at that stage, but nobody is told about it.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from leave_approval.core.logging import get_logger
from leave_approval.models.base.enums import LeaveStage, UserRole
from leave_approval.models.user.user import User
from leave_approval.repositories.user.user_repository import UserRepository

__all__ = [
    "ApproverDirectory",
    "ApproverResolution",
    "MentorStrategy",
    "assigned_mentor",
    "mentors_by_department_and_year",
    "mentors_by_department",
    "DEFAULT_MENTOR_STRATEGIES",
]

logger = get_logger(__name__)

MentorStrategy = Callable[[User, UserRepository], List[User]]


def assigned_mentor(student: User, users: UserRepository) -> List[User]:
    """The student's explicitly assigned mentor, if that user is a mentor."""
    if not student.assigned_mentor_id:
        return []
    mentor = users.get_by_id(student.assigned_mentor_id)
    if mentor is None or mentor.role != UserRole.MENTOR:
        return []
    return [mentor]


def mentors_by_department_and_year(student: User, users: UserRepository) -> List[User]:
    """Mentors sharing both the student's department and year."""
    if not student.department or not student.year:
        return []
    return users.find_by_role_and_department(UserRole.MENTOR, student.department, student.year)


def mentors_by_department(student: User, users: UserRepository) -> List[User]:
    """Mentors sharing the student's department."""
    if not student.department:
        return []
    return users.find_by_role_and_department(UserRole.MENTOR, student.department)


DEFAULT_MENTOR_STRATEGIES: Tuple[MentorStrategy, ...] = (
    assigned_mentor,
    mentors_by_department_and_year,
    mentors_by_department,
)


@dataclass(frozen=True)
class ApproverResolution:
    """Approvers found for a stage, and the strategy that found them."""

    stage: LeaveStage
    approver_ids: Tuple[str, ...]
    strategy: Optional[str] = None

    @property
    def configuration_gap(self) -> bool:
        """No approver exists for the stage."""
        return not self.approver_ids


class ApproverDirectory:
    """
    Stage to approver resolution.

    mentor: first non-empty result of `mentor_strategies`
    hod: HODs of the student's department
    principal, warden: every user holding the role
    """

    def __init__(
        self,
        user_repository: UserRepository,
        mentor_strategies: Sequence[MentorStrategy] = DEFAULT_MENTOR_STRATEGIES,
    ):
        self.users = user_repository
        self.mentor_strategies = tuple(mentor_strategies)

    def resolve(self, stage: LeaveStage, student: User) -> ApproverResolution:
        """
        Approvers for `stage` on behalf of `student`.

        Args:
            stage: Approval stage
            student: Owning student of the request
        """
        approvers, strategy = self._find(stage, student)
        resolution = ApproverResolution(
            stage=stage,
            approver_ids=tuple(user.id for user in approvers),
            strategy=strategy,
        )

        if resolution.configuration_gap:
            logger.warning(
                "No approvers configured for stage",
                extra={
                    "event_type": "configuration_gap",
                    "stage": stage.value,
                    "student_id": student.id,
                    "department": student.department,
                    "year": student.year,
                },
            )
        return resolution

    def can_act(self, actor: User, stage: LeaveStage) -> bool:
        """Whether `actor`'s role entitles them to act at `stage`."""
        return actor.role in (stage.approver_role, UserRole.ADMIN)

    def _find(self, stage: LeaveStage, student: User) -> Tuple[List[User], Optional[str]]:
        if stage == LeaveStage.MENTOR:
            for strategy in self.mentor_strategies:
                mentors = strategy(student, self.users)
                if mentors:
                    return mentors, strategy.__name__
            return [], None

        if stage == LeaveStage.HOD:
            if not student.department:
                return [], None
            return (
                self.users.find_by_role_and_department(UserRole.HOD, student.department),
                "department",
            )

        return self.users.find_by_role(stage.approver_role), "role"
