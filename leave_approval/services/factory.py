"""
Service wiring.

Builds every service around one database session, so that a request
handler or a test gets a consistent set of collaborators.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from leave_approval.repositories import (
    LeaveApprovalRepository,
    LeaveRequestRepository,
    NotificationRepository,
    UserRepository,
)
from leave_approval.services.leave.approver_directory import (
    DEFAULT_MENTOR_STRATEGIES,
    ApproverDirectory,
    MentorStrategy,
)
from leave_approval.services.leave.leave_artifact_service import QRCodeArtifactGenerator
from leave_approval.services.leave.leave_notification_service import LeaveNotificationService
from leave_approval.services.leave.leave_pass_service import LeavePassService
from leave_approval.services.leave.leave_request_service import LeaveRequestService
from leave_approval.services.leave.leave_statistics_service import LeaveStatisticsService
from leave_approval.services.leave.stage_sequencer import StageSequencer
from leave_approval.services.user.user_service import UserService


@dataclass
class LeaveServices:
    users: UserService
    leave_requests: LeaveRequestService
    notifications: LeaveNotificationService
    statistics: LeaveStatisticsService
    passes: LeavePassService


def build_services(
    db_session: Session,
    stage_sequencer: Optional[StageSequencer] = None,
    artifact_generator: Optional[QRCodeArtifactGenerator] = None,
    mentor_strategies: Sequence[MentorStrategy] = DEFAULT_MENTOR_STRATEGIES,
    allow_multiple_pending: Optional[bool] = None,
) -> LeaveServices:
    """
    Wire repositories and services on `db_session`.

    Args:
        db_session: Session shared by every repository
        stage_sequencer: Stage policy, defaults to the configured stages
        artifact_generator: Leave pass artifact generator
        mentor_strategies: Ordered mentor resolution strategies
        allow_multiple_pending: Overrides LEAVE_ALLOW_MULTIPLE_PENDING
    """
    user_repository = UserRepository(db_session)
    leave_repository = LeaveRequestRepository(db_session)
    approval_repository = LeaveApprovalRepository(db_session)
    notification_repository = NotificationRepository(db_session)

    sequencer = stage_sequencer or StageSequencer()
    directory = ApproverDirectory(user_repository, mentor_strategies=mentor_strategies)
    notifications = LeaveNotificationService(notification_repository, db_session, directory)

    return LeaveServices(
        users=UserService(user_repository, db_session),
        leave_requests=LeaveRequestService(
            leave_repository,
            db_session,
            user_repository=user_repository,
            approval_repository=approval_repository,
            stage_sequencer=sequencer,
            approver_directory=directory,
            notification_service=notifications,
            artifact_generator=artifact_generator,
            allow_multiple_pending=allow_multiple_pending,
        ),
        notifications=notifications,
        statistics=LeaveStatisticsService(leave_repository, db_session, user_repository, sequencer),
        passes=LeavePassService(leave_repository, db_session, user_repository, approval_repository),
    )
