"""
Leave notification service.

Tells approvers when a request reaches their stage and tells students
how their request moved. Each dispatch commits on its own, after the
state transition it reports has already been committed.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leave_approval.core.exceptions import NotificationNotFoundError
from leave_approval.models.base.enums import LeaveStage, NotificationType
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.models.notification.notification import Notification
from leave_approval.models.user.user import User
from leave_approval.repositories.notification.notification_repository import NotificationRepository
from leave_approval.schemas.notification.notification import NotificationResponse
from leave_approval.services.base.base_service import BaseService
from leave_approval.services.base.service_result import ServiceResult
from leave_approval.services.leave.approver_directory import ApproverDirectory

APPROVAL_REQUIRED_MESSAGE = "New leave application requires your approval"


class LeaveNotificationService(BaseService[Notification, NotificationRepository]):
    """
    Notification dispatch for the leave workflow.

    Approver notifications go to whoever the approver directory resolves
    for the stage. A stage without approvers is logged by the directory
    and reported through the `configuration_gap` metadata key.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        db_session: Session,
        approver_directory: ApproverDirectory,
    ):
        super().__init__(repository, db_session)
        self.approver_directory = approver_directory

    # -------------------------------------------------------------------------
    # Workflow notifications
    # -------------------------------------------------------------------------

    def notify_stage_approvers(
        self,
        leave_request: LeaveRequest,
        stage: LeaveStage,
        student: User,
    ) -> ServiceResult[List[NotificationResponse]]:
        """Notify every approver of `stage` that `leave_request` awaits them."""
        try:
            resolution = self.approver_directory.resolve(stage, student)
            notifications = [
                self.repository.create_notification(
                    user_id=approver_id,
                    message=APPROVAL_REQUIRED_MESSAGE,
                    notification_type=NotificationType.INFO,
                    related_leave_id=leave_request.id,
                )
                for approver_id in resolution.approver_ids
            ]
            self._commit()

            self._logger.info(
                f"Notified {len(notifications)} approver(s)",
                extra={
                    "leave_id": leave_request.id,
                    "stage": stage.value,
                    "strategy": resolution.strategy,
                },
            )
            return ServiceResult.success(
                [NotificationResponse.model_validate(n) for n in notifications],
                metadata={
                    "stage": stage.value,
                    "configuration_gap": resolution.configuration_gap,
                },
            )
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "notify stage approvers", leave_request.id)

    def notify_student_advanced(
        self,
        leave_request: LeaveRequest,
        approved_stage: LeaveStage,
        next_stage: LeaveStage,
        comments: Optional[str] = None,
    ) -> ServiceResult[NotificationResponse]:
        message = (
            f"Your leave application was approved by the {approved_stage.label} "
            f"and is now awaiting {next_stage.label} approval."
        )
        if comments:
            message += f" Comments: {comments}"
        return self.send(leave_request.student_id, message, NotificationType.INFO, leave_request.id)

    def notify_student_approved(
        self,
        leave_request: LeaveRequest,
        comments: Optional[str] = None,
    ) -> ServiceResult[NotificationResponse]:
        message = "Your leave application has been fully approved. Your leave pass is ready."
        if comments:
            message += f" Comments: {comments}"
        return self.send(leave_request.student_id, message, NotificationType.SUCCESS, leave_request.id)

    def notify_student_rejected(
        self,
        leave_request: LeaveRequest,
        rejected_stage: LeaveStage,
        comments: Optional[str] = None,
    ) -> ServiceResult[NotificationResponse]:
        message = f"Your leave application was rejected by the {rejected_stage.label}."
        if comments:
            message += f" Reason: {comments}"
        return self.send(leave_request.student_id, message, NotificationType.ERROR, leave_request.id)

    # -------------------------------------------------------------------------
    # Generic operations
    # -------------------------------------------------------------------------

    def send(
        self,
        user_id: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        related_leave_id: Optional[str] = None,
    ) -> ServiceResult[NotificationResponse]:
        """Create and commit a single notification."""
        try:
            notification = self.repository.create_notification(
                user_id=user_id,
                message=message,
                notification_type=notification_type,
                related_leave_id=related_leave_id,
            )
            self._commit()
            return ServiceResult.success(NotificationResponse.model_validate(notification))
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "send notification", user_id)

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> ServiceResult[List[NotificationResponse]]:
        """Notifications of a user, newest first."""
        try:
            notifications = self.repository.find_by_user(user_id, unread_only=unread_only)
            return ServiceResult.success(
                [NotificationResponse.model_validate(n) for n in notifications],
                metadata={"count": len(notifications)},
            )
        except Exception as e:
            return self._handle_exception(e, "list notifications", user_id)

    def mark_notification_read(self, notification_id: str) -> ServiceResult[NotificationResponse]:
        try:
            notification = self.repository.get_by_id(notification_id)
            if notification is None:
                raise NotificationNotFoundError(notification_id)

            if not notification.is_read:
                self.repository.update(notification, {"is_read": True})
                self._commit()
            return ServiceResult.success(NotificationResponse.model_validate(notification))
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "mark notification read", notification_id)
