"""
Leave request lifecycle service.

Creates leave requests, applies approve/reject decisions stage by
stage, and answers the read-side queries used by students, approvers
and pass verifiers.

Every decision is applied through a conditional update guarded by the
request's pre-transition status and stage, so of several concurrent
decisions on the same request exactly one wins and the others fail
with a state conflict. Notifications are dispatched only after the
transition is committed and never affect its outcome.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from leave_approval.config.settings import settings
from leave_approval.core.exceptions import (
    ApproverNotAuthorizedError,
    InvalidDateRangeError,
    LeaveRequestNotFoundError,
    PendingRequestExistsError,
    StateConflictError,
    UserNotFoundError,
    ValidationError,
    validation_error_from_pydantic,
)
from leave_approval.models.base.enums import LeaveAction, LeaveStage, LeaveStatus
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.models.user.user import User
from leave_approval.repositories.leave.leave_approval_repository import LeaveApprovalRepository
from leave_approval.repositories.leave.leave_request_repository import LeaveRequestRepository
from leave_approval.repositories.user.user_repository import UserRepository
from leave_approval.schemas.leave.leave_request import (
    LeaveActionRequest,
    LeaveApprovalResponse,
    LeavePassVerification,
    LeaveRequestCreate,
    LeaveRequestResponse,
)
from leave_approval.services.base.base_service import BaseService
from leave_approval.services.base.service_result import ServiceResult
from leave_approval.services.leave.approver_directory import ApproverDirectory
from leave_approval.services.leave.leave_artifact_service import (
    ArtifactSummary,
    QRCodeArtifactGenerator,
)
from leave_approval.services.leave.leave_notification_service import LeaveNotificationService
from leave_approval.services.leave.stage_sequencer import StageSequencer

DEFAULT_REJECTION_COMMENT = "Application rejected"
DEFAULT_FINAL_APPROVAL_COMMENT = "Application approved"


class LeaveRequestService(BaseService[LeaveRequest, LeaveRequestRepository]):
    """
    Multi-stage leave request workflow.

    Collaborators are injected so that the stage policy, approver
    resolution, artifact generation and notification dispatch can each
    be replaced independently.
    """

    def __init__(
        self,
        repository: LeaveRequestRepository,
        db_session: Session,
        user_repository: UserRepository,
        approval_repository: LeaveApprovalRepository,
        stage_sequencer: StageSequencer,
        approver_directory: ApproverDirectory,
        notification_service: LeaveNotificationService,
        artifact_generator: Optional[QRCodeArtifactGenerator] = None,
        allow_multiple_pending: Optional[bool] = None,
    ):
        super().__init__(repository, db_session)
        self.users = user_repository
        self.approvals = approval_repository
        self.sequencer = stage_sequencer
        self.approver_directory = approver_directory
        self.notifications = notification_service
        self.artifact_generator = artifact_generator or QRCodeArtifactGenerator()
        self.allow_multiple_pending = (
            settings.LEAVE_ALLOW_MULTIPLE_PENDING
            if allow_multiple_pending is None
            else allow_multiple_pending
        )

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_leave_request(
        self,
        payload: Union[LeaveRequestCreate, Dict[str, Any]],
    ) -> ServiceResult[LeaveRequestResponse]:
        """
        Submit a leave request on behalf of a student.

        The stage sequence is resolved from the student's hostel residency
        at this moment and frozen on the request.

        Args:
            payload: Application data

        Returns:
            ServiceResult containing the created request
        """
        student_id = payload.get("student_id") if isinstance(payload, dict) else getattr(payload, "student_id", None)
        try:
            data = self._parse(LeaveRequestCreate, payload)
            if data.end_date < data.start_date:
                raise InvalidDateRangeError(
                    start_date=data.start_date.isoformat(),
                    end_date=data.end_date.isoformat(),
                )

            student = self.users.get_by_id(data.student_id)
            if student is None:
                raise UserNotFoundError(data.student_id)
            if not student.is_student:
                raise ValidationError(
                    "Only students can apply for leave",
                    field_errors={"student_id": ["User is not a student"]},
                )

            if not self.allow_multiple_pending:
                existing = self.repository.find_current_for_student(student.id)
                if existing is not None:
                    raise PendingRequestExistsError(student.id, existing.id)

            sequence = self.sequencer.resolve_sequence(student)
            leave_request = LeaveRequest(
                student_id=student.id,
                leave_type=data.leave_type,
                reason=data.reason,
                start_date=data.start_date,
                end_date=data.end_date,
                emergency_contact=data.emergency_contact,
                supporting_docs=data.supporting_docs,
                is_hostel_student=bool(student.hostel_resident),
                stage_sequence=[stage.value for stage in sequence],
                status=LeaveStatus.PENDING,
                current_stage=sequence[0],
            )
            self.repository.create(leave_request)
            self._commit()
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "create leave request", student_id)

        self._logger.info(
            f"Leave request created: {leave_request.id}",
            extra={
                "leave_id": leave_request.id,
                "student_id": student.id,
                "stage": leave_request.current_stage.value,
                "stages": list(leave_request.stage_sequence),
            },
        )

        response = LeaveRequestResponse.model_validate(leave_request)
        self._dispatch(
            "notify stage approvers",
            self.notifications.notify_stage_approvers,
            leave_request,
            leave_request.current_stage,
            student,
        )
        return ServiceResult.success(
            response,
            message="Leave request submitted",
            metadata={"leave_id": response.id},
        )

    # -------------------------------------------------------------------------
    # Decisions
    # -------------------------------------------------------------------------

    def act(
        self,
        leave_id: str,
        actor_stage: Union[LeaveStage, str],
        action: Union[LeaveAction, str],
        comments: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> ServiceResult[LeaveRequestResponse]:
        """
        Apply an approver's decision at `actor_stage`.

        Approval advances the request to the next stage of its frozen
        sequence, or finalizes it as approved at the last stage.
        Rejection at any stage finalizes it as rejected. Terminal
        decisions carry a leave pass artifact.

        Returns:
            ServiceResult containing the updated request. A request that
            is no longer pending at `actor_stage` yields a STATE_CONFLICT
            failure and is left unchanged.
        """
        try:
            stage = self._coerce(LeaveStage, actor_stage, "actor_stage")
            decision = self._coerce(LeaveAction, action, "action")
            comments = comments.strip() if comments and comments.strip() else None

            leave_request = self.repository.get_by_id(leave_id)
            if leave_request is None:
                raise LeaveRequestNotFoundError(leave_id)

            if not leave_request.is_pending or leave_request.current_stage != stage:
                raise StateConflictError(
                    leave_id=leave_id,
                    expected_stage=stage.value,
                    current_stage=leave_request.current_stage.value,
                    current_status=leave_request.status.value,
                )

            actor = self._verify_actor(actor_id, stage)
            student = self.users.get_by_id(leave_request.student_id)
            if student is None:
                raise UserNotFoundError(leave_request.student_id)

            sequence = self.sequencer.sequence_for(leave_request)
            transition = self.sequencer.next_stage(sequence, stage)
            decided_by = actor.name if actor is not None else stage.label

            if decision == LeaveAction.REJECT:
                final_comments = comments or DEFAULT_REJECTION_COMMENT
                values = {
                    "status": LeaveStatus.REJECTED,
                    "comments": final_comments,
                    "final_artifact_ref": self._artifact(
                        leave_request, LeaveStatus.REJECTED, stage, decided_by, final_comments
                    ),
                }
            elif transition.is_final:
                final_comments = comments or DEFAULT_FINAL_APPROVAL_COMMENT
                values = {
                    "status": LeaveStatus.APPROVED,
                    "comments": final_comments,
                    "final_artifact_ref": self._artifact(
                        leave_request, LeaveStatus.APPROVED, stage, decided_by, final_comments
                    ),
                }
            else:
                final_comments = comments or f"Approved by {stage.label}"
                values = {
                    "current_stage": transition.next_stage,
                    "comments": final_comments,
                }

            self.repository.conditional_update(leave_id, LeaveStatus.PENDING, stage, values)
            self.approvals.record_decision(
                leave_id=leave_id,
                stage=stage,
                action=decision,
                approver_id=actor.id if actor is not None else None,
                approver_name=decided_by,
                comments=final_comments,
            )
            self._commit()
        except Exception as e:
            self._rollback()
            return self._handle_exception(
                e,
                "act on leave request",
                leave_id,
                {"stage": str(actor_stage), "action": str(action), "actor_id": actor_id},
            )

        # Conditional updates bypass the identity map
        self.db.refresh(leave_request)
        self._logger.info(
            f"Leave request {leave_request.id} {decision.value}d at {stage.value}",
            extra={
                "leave_id": leave_request.id,
                "stage": stage.value,
                "action": decision.value,
                "status": leave_request.status.value,
                "current_stage": leave_request.current_stage.value,
                "actor_id": actor_id,
            },
        )

        response = LeaveRequestResponse.model_validate(leave_request)
        if decision == LeaveAction.REJECT:
            self._dispatch(
                "notify student of rejection",
                self.notifications.notify_student_rejected,
                leave_request,
                stage,
                final_comments,
            )
        elif transition.is_final:
            self._dispatch(
                "notify student of approval",
                self.notifications.notify_student_approved,
                leave_request,
                comments,
            )
        else:
            self._dispatch(
                "notify student of progress",
                self.notifications.notify_student_advanced,
                leave_request,
                stage,
                transition.next_stage,
                comments,
            )
            self._dispatch(
                "notify stage approvers",
                self.notifications.notify_stage_approvers,
                leave_request,
                transition.next_stage,
                student,
            )

        return ServiceResult.success(
            response,
            message=f"Leave request {decision.value}d",
            metadata={
                "leave_id": response.id,
                "status": response.status.value,
                "current_stage": response.current_stage.value,
            },
        )

    def apply_action(self, leave_id: str, request: LeaveActionRequest) -> ServiceResult[LeaveRequestResponse]:
        return self.act(
            leave_id,
            request.actor_stage,
            request.action,
            comments=request.comments,
            actor_id=request.actor_id,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_leave_request(self, leave_id: str) -> ServiceResult[LeaveRequestResponse]:
        try:
            return ServiceResult.success(LeaveRequestResponse.model_validate(self._get_or_raise(leave_id)))
        except Exception as e:
            return self._handle_exception(e, "get leave request", leave_id)

    def list_for_student(self, student_id: str) -> ServiceResult[List[LeaveRequestResponse]]:
        """All requests of a student, newest first."""
        try:
            requests = self.repository.find_by_student(student_id)
            return ServiceResult.success(
                [LeaveRequestResponse.model_validate(r) for r in requests],
                metadata={"count": len(requests)},
            )
        except Exception as e:
            return self._handle_exception(e, "list student leave requests", student_id)

    def get_current_for_student(self, student_id: str) -> ServiceResult[Optional[LeaveRequestResponse]]:
        """The student's most recently created pending request, if any."""
        try:
            current = self.repository.find_current_for_student(student_id)
            return ServiceResult.success(
                LeaveRequestResponse.model_validate(current) if current is not None else None
            )
        except Exception as e:
            return self._handle_exception(e, "get current leave request", student_id)

    def list_pending_by_stage(
        self,
        stage: Union[LeaveStage, str],
        department: Optional[str] = None,
    ) -> ServiceResult[List[LeaveRequestResponse]]:
        """Requests waiting at `stage`, oldest first, optionally within a department."""
        try:
            stage = self._coerce(LeaveStage, stage, "stage")
            requests = self.repository.find_pending_by_stage(stage, department=department)
            return ServiceResult.success(
                [LeaveRequestResponse.model_validate(r) for r in requests],
                metadata={"count": len(requests), "stage": stage.value, "department": department},
            )
        except Exception as e:
            return self._handle_exception(e, "list pending leave requests", str(stage))

    def list_all(self) -> ServiceResult[List[LeaveRequestResponse]]:
        try:
            requests = self.repository.find_all()
            return ServiceResult.success(
                [LeaveRequestResponse.model_validate(r) for r in requests],
                metadata={"count": len(requests)},
            )
        except Exception as e:
            return self._handle_exception(e, "list leave requests")

    def get_approval_history(self, leave_id: str) -> ServiceResult[List[LeaveApprovalResponse]]:
        """Decisions taken on a request, in the order they were made."""
        try:
            self._get_or_raise(leave_id)
            approvals = self.approvals.find_by_leave(leave_id)
            return ServiceResult.success([LeaveApprovalResponse.model_validate(a) for a in approvals])
        except Exception as e:
            return self._handle_exception(e, "get approval history", leave_id)

    def verify_pass(self, leave_id: str) -> ServiceResult[LeavePassVerification]:
        """
        Details shown when a leave pass is scanned.

        The pass is valid only while the request is fully approved.
        """
        try:
            leave_request = self._get_or_raise(leave_id)
            student = self.users.get_by_id(leave_request.student_id)
            if student is None:
                raise UserNotFoundError(leave_request.student_id)
            approvals = self.approvals.find_by_leave(leave_id)

            verification = LeavePassVerification(
                leave_id=leave_request.id,
                student_name=student.name,
                roll_number=student.roll_number,
                department=student.department,
                year=student.year,
                is_hostel_student=leave_request.is_hostel_student,
                leave_type=leave_request.leave_type,
                start_date=leave_request.start_date,
                end_date=leave_request.end_date,
                status=leave_request.status,
                current_stage=leave_request.current_stage,
                is_valid=leave_request.status == LeaveStatus.APPROVED,
                approvals=[LeaveApprovalResponse.model_validate(a) for a in approvals],
            )
            return ServiceResult.success(verification)
        except Exception as e:
            return self._handle_exception(e, "verify leave pass", leave_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_or_raise(self, leave_id: str) -> LeaveRequest:
        leave_request = self.repository.get_by_id(leave_id)
        if leave_request is None:
            raise LeaveRequestNotFoundError(leave_id)
        return leave_request

    def _verify_actor(self, actor_id: Optional[str], stage: LeaveStage) -> Optional[User]:
        """Load the acting user and check their role against `stage`."""
        if actor_id is None:
            return None
        actor = self.users.get_by_id(actor_id)
        if actor is None:
            raise UserNotFoundError(actor_id)
        if not self.approver_directory.can_act(actor, stage):
            raise ApproverNotAuthorizedError(actor_id, stage.value, actor.role.value)
        return actor

    def _artifact(
        self,
        leave_request: LeaveRequest,
        outcome: LeaveStatus,
        stage: LeaveStage,
        decided_by: str,
        comments: Optional[str],
    ) -> str:
        summary = ArtifactSummary(
            student_id=leave_request.student_id,
            leave_id=leave_request.id,
            outcome=outcome,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            decided_at_stage=stage,
            decided_by=decided_by,
            comments=comments,
        )
        return self.artifact_generator.generate_approval_artifact(summary)

    def _dispatch(self, description: str, func: Callable[..., ServiceResult], *args) -> None:
        """Run a notification call; failures are logged, never propagated."""
        try:
            result = func(*args)
        except Exception as e:
            self._logger.error(f"Failed to {description}: {e}", exc_info=True)
            return
        if result is not None and not result.is_success:
            self._logger.error(
                f"Failed to {description}: {result.message}",
                extra={"error_code": result.error.code.value if result.error else None},
            )

    @staticmethod
    def _parse(schema, payload):
        if isinstance(payload, schema):
            return payload
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e) from e

    @staticmethod
    def _coerce(enum_cls, value, field: str):
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError as e:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ValidationError(
                f"Invalid {field}: {value}",
                field_errors={field: [f"Must be one of: {allowed}"]},
            ) from e
