"""
Leave pass PDF rendering.
"""

from datetime import datetime, timezone
from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm, inch
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from leave_approval.core.exceptions import (
    ArtifactGenerationError,
    LeaveRequestNotFoundError,
    UserNotFoundError,
)
from leave_approval.models.base.enums import LeaveStatus
from leave_approval.models.leave.leave_approval import LeaveApproval
from leave_approval.models.leave.leave_request import LeaveRequest
from leave_approval.models.user.user import User
from leave_approval.repositories.leave.leave_approval_repository import LeaveApprovalRepository
from leave_approval.repositories.leave.leave_request_repository import LeaveRequestRepository
from leave_approval.repositories.user.user_repository import UserRepository
from leave_approval.services.base.base_service import BaseService
from leave_approval.services.base.service_result import ServiceResult
from leave_approval.services.leave.leave_artifact_service import decode_data_uri

STATUS_COLORS = {
    LeaveStatus.APPROVED: "green",
    LeaveStatus.REJECTED: "red",
    LeaveStatus.PENDING: "orange",
}


class LeavePassService(BaseService[LeaveRequest, LeaveRequestRepository]):
    """Renders printable leave passes."""

    def __init__(
        self,
        repository: LeaveRequestRepository,
        db_session: Session,
        user_repository: UserRepository,
        approval_repository: LeaveApprovalRepository,
    ):
        super().__init__(repository, db_session)
        self.users = user_repository
        self.approvals = approval_repository
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='PassTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.darkblue,
            spaceAfter=20,
            alignment=TA_CENTER,
        ))
        self.styles.add(ParagraphStyle(
            name='PassHeading',
            parent=self.styles['Heading2'],
            fontSize=13,
            textColor=colors.darkblue,
            spaceBefore=12,
            spaceAfter=8,
        ))
        self.styles.add(ParagraphStyle(
            name='PassFooter',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.grey,
            alignment=TA_CENTER,
        ))

    def render_leave_pass(self, leave_id: str) -> ServiceResult[bytes]:
        """
        Render the leave pass of a request as PDF bytes.

        Pending requests render too, without a QR code, so that students
        can print a copy of what they submitted.
        """
        try:
            leave_request = self.repository.get_by_id(leave_id)
            if leave_request is None:
                raise LeaveRequestNotFoundError(leave_id)
            student = self.users.get_by_id(leave_request.student_id)
            if student is None:
                raise UserNotFoundError(leave_request.student_id)
            approvals = self.approvals.find_by_leave(leave_id)

            try:
                pdf = self._build_pdf(leave_request, student, approvals)
            except (ValueError, OSError) as e:
                raise ArtifactGenerationError(f"Failed to render leave pass: {e}") from e

            self._logger.info(
                "Rendered leave pass",
                extra={"leave_id": leave_id, "size_bytes": len(pdf)},
            )
            return ServiceResult.success(pdf, metadata={"filename": f"leave-pass-{leave_id}.pdf"})
        except Exception as e:
            return self._handle_exception(e, "render leave pass", leave_id)

    def _build_pdf(self, leave_request: LeaveRequest, student: User, approvals: List[LeaveApproval]) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
        )
        doc.title = "College Leave Pass"

        story = [Paragraph("College Leave Pass", self.styles['PassTitle'])]

        story.append(Paragraph("Student Information", self.styles['PassHeading']))
        story.append(self._info_table([
            ['Name:', student.name],
            ['Roll Number:', student.roll_number or '-'],
            ['Department:', student.department or '-'],
            ['Year:', student.year or '-'],
            ['Hostel Resident:', 'Yes' if leave_request.is_hostel_student else 'No'],
        ]))

        story.append(Paragraph("Leave Details", self.styles['PassHeading']))
        story.append(self._info_table([
            ['Leave ID:', leave_request.id],
            ['Leave Type:', leave_request.leave_type.value.title()],
            ['From:', leave_request.start_date.isoformat()],
            ['To:', leave_request.end_date.isoformat()],
            ['Total Days:', str(leave_request.total_days)],
            ['Reason:', leave_request.reason],
        ]))

        color = STATUS_COLORS.get(leave_request.status, "black")
        story.append(Spacer(1, 12))
        story.append(Paragraph(
            f'<b>Status:</b> <font color="{color}">{leave_request.status.value.upper()}</font>',
            self.styles['Normal'],
        ))
        if leave_request.comments:
            story.append(Paragraph(f"<b>Comments:</b> {escape(leave_request.comments)}", self.styles['Normal']))

        if approvals:
            story.append(Paragraph("Approval Trail", self.styles['PassHeading']))
            rows = [['Stage', 'Action', 'By', 'Date']]
            for approval in approvals:
                rows.append([
                    approval.stage.label,
                    approval.action.value.title(),
                    approval.approver_name or '-',
                    approval.decided_at.strftime('%Y-%m-%d %H:%M'),
                ])
            trail = Table(rows, colWidths=[1.3 * inch, 1 * inch, 2.2 * inch, 1.6 * inch])
            trail.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ]))
            story.append(trail)

        png = decode_data_uri(leave_request.final_artifact_ref)
        if png:
            story.append(Spacer(1, 20))
            story.append(Image(BytesIO(png), width=2 * inch, height=2 * inch))

        story.append(Spacer(1, 20))
        generated = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')
        story.append(Paragraph(
            f"This is a digitally generated leave pass. Generated on {generated}.",
            self.styles['PassFooter'],
        ))

        doc.build(story)
        return buffer.getvalue()

    @staticmethod
    def _info_table(rows: List[List[str]]) -> Table:
        table = Table(rows, colWidths=[1.8 * inch, 4.2 * inch])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ]))
        return table
