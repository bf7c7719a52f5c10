"""
Leave Service Layer

Business logic for the multi-stage leave approval workflow:
- Stage sequencing (base stages plus hostel stages)
- Approver resolution per stage
- Request lifecycle (create, approve/reject, queries, pass verification)
- Notifications to approvers and students
- Statistics for students and approval stages
- Leave pass artifacts (QR code) and printable PDF passes

All services return standardized ServiceResult responses.
"""

from leave_approval.services.leave.approver_directory import (
    ApproverDirectory,
    ApproverResolution,
)
from leave_approval.services.leave.leave_artifact_service import (
    ArtifactSummary,
    QRCodeArtifactGenerator,
)
from leave_approval.services.leave.leave_notification_service import LeaveNotificationService
from leave_approval.services.leave.leave_pass_service import LeavePassService
from leave_approval.services.leave.leave_request_service import LeaveRequestService
from leave_approval.services.leave.leave_statistics_service import (
    LeaveStatisticsService,
    compute_statistics,
)
from leave_approval.services.leave.stage_sequencer import StageSequencer, StageTransition

__all__ = [
    "ApproverDirectory",
    "ApproverResolution",
    "ArtifactSummary",
    "QRCodeArtifactGenerator",
    "LeaveNotificationService",
    "LeavePassService",
    "LeaveRequestService",
    "LeaveStatisticsService",
    "compute_statistics",
    "StageSequencer",
    "StageTransition",
]
