"""
Leave pass artifact generation.

A terminal decision produces a scannable QR code summarizing the
outcome. The image is encoded as a PNG data URI so it can be stored
on the request row and rendered directly by clients.
"""

import base64
import json
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Any, Dict, Optional

import qrcode

from leave_approval.config.settings import settings
from leave_approval.core.exceptions import ArtifactGenerationError
from leave_approval.core.logging import get_logger
from leave_approval.models.base.enums import LeaveStage, LeaveStatus

logger = get_logger(__name__)

DATA_URI_PREFIX = "data:image/png;base64,"


@dataclass(frozen=True)
class ArtifactSummary:
    """Facts encoded into a leave pass."""

    student_id: str
    leave_id: str
    outcome: LeaveStatus
    start_date: date
    end_date: date
    decided_at_stage: LeaveStage
    decided_by: Optional[str] = None
    comments: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        decided_by = self.decided_by or self.decided_at_stage.label
        if self.outcome == LeaveStatus.APPROVED:
            return {
                "studentId": self.student_id,
                "leaveId": self.leave_id,
                "status": "Approved",
                "fromDate": self.start_date.isoformat(),
                "toDate": self.end_date.isoformat(),
                "approvedBy": decided_by,
            }
        return {
            "studentId": self.student_id,
            "leaveId": self.leave_id,
            "status": "Not Approved",
            "rejectedBy": decided_by,
            "rejectionReason": self.comments,
        }


class QRCodeArtifactGenerator:
    """Encodes artifact summaries as QR code PNG data URIs."""

    def __init__(self, box_size: Optional[int] = None, border: Optional[int] = None):
        self.box_size = box_size or settings.QR_BOX_SIZE
        self.border = border if border is not None else settings.QR_BORDER

    def generate_approval_artifact(self, summary: ArtifactSummary) -> str:
        """
        Build the artifact reference for a terminal decision.

        Raises:
            ArtifactGenerationError: If the QR image cannot be produced
        """
        payload = json.dumps(summary.to_payload(), sort_keys=True)
        try:
            png = self.render_png(payload)
        except Exception as e:
            logger.error(
                f"Error generating leave pass QR code: {e}",
                extra={"leave_id": summary.leave_id},
            )
            raise ArtifactGenerationError(f"Failed to generate leave pass QR code: {e}") from e

        logger.debug(
            "Generated leave pass QR code",
            extra={"leave_id": summary.leave_id, "outcome": summary.outcome.value},
        )
        return DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")

    def render_png(self, data: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        img_io = BytesIO()
        img.save(img_io, "PNG")
        return img_io.getvalue()


def decode_data_uri(artifact_ref: Optional[str]) -> Optional[bytes]:
    """PNG bytes behind an artifact reference, or None if it is not a PNG data URI."""
    if not artifact_ref or not artifact_ref.startswith(DATA_URI_PREFIX):
        return None
    try:
        return base64.b64decode(artifact_ref[len(DATA_URI_PREFIX):], validate=True)
    except ValueError:
        return None
