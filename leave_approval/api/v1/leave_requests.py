"""
Leave request endpoints.

Thin transport over LeaveRequestService, LeaveStatisticsService and
LeavePassService. Service failures are re-raised as typed exceptions
and rendered by the application's exception handler.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from leave_approval.api.deps import get_services
from leave_approval.models.base.enums import LeaveStage
from leave_approval.schemas.leave.leave_request import (
    LeaveActionRequest,
    LeaveApprovalResponse,
    LeavePassVerification,
    LeaveRequestCreate,
    LeaveRequestResponse,
)
from leave_approval.schemas.leave.leave_statistics import LeaveStatistics
from leave_approval.services.factory import LeaveServices

router = APIRouter()


@router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
def create_leave_request(payload: LeaveRequestCreate, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.create_leave_request(payload).raise_for_error().data


@router.get("", response_model=List[LeaveRequestResponse])
def list_leave_requests(services: LeaveServices = Depends(get_services)):
    return services.leave_requests.list_all().raise_for_error().data


@router.get("/student/{student_id}", response_model=List[LeaveRequestResponse])
def list_student_leave_requests(student_id: str, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.list_for_student(student_id).raise_for_error().data


@router.get("/current/{student_id}", response_model=Optional[LeaveRequestResponse])
def get_current_leave_request(student_id: str, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.get_current_for_student(student_id).raise_for_error().data


@router.get("/pending/{stage}", response_model=List[LeaveRequestResponse])
def list_pending_leave_requests(
    stage: LeaveStage,
    department: Optional[str] = Query(None, description="Restrict to a department"),
    services: LeaveServices = Depends(get_services),
):
    return services.leave_requests.list_pending_by_stage(stage, department=department).raise_for_error().data


@router.get("/stats/stage/{stage}", response_model=LeaveStatistics)
def get_stage_statistics(
    stage: LeaveStage,
    department: Optional[str] = Query(None),
    services: LeaveServices = Depends(get_services),
):
    return services.statistics.stage_statistics(stage, department=department).raise_for_error().data


@router.get("/stats/{student_id}", response_model=LeaveStatistics)
def get_student_statistics(student_id: str, services: LeaveServices = Depends(get_services)):
    return services.statistics.student_statistics(student_id).raise_for_error().data


@router.get("/{leave_id}", response_model=LeaveRequestResponse)
def get_leave_request(leave_id: str, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.get_leave_request(leave_id).raise_for_error().data


@router.post("/{leave_id}/actions", response_model=LeaveRequestResponse)
def act_on_leave_request(
    leave_id: str,
    payload: LeaveActionRequest,
    services: LeaveServices = Depends(get_services),
):
    """Approve or reject at the stage the request currently sits at."""
    return services.leave_requests.apply_action(leave_id, payload).raise_for_error().data


@router.get("/{leave_id}/history", response_model=List[LeaveApprovalResponse])
def get_approval_history(leave_id: str, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.get_approval_history(leave_id).raise_for_error().data


@router.get("/{leave_id}/verify", response_model=LeavePassVerification)
def verify_leave_pass(leave_id: str, services: LeaveServices = Depends(get_services)):
    return services.leave_requests.verify_pass(leave_id).raise_for_error().data


@router.get("/{leave_id}/pdf", response_class=Response)
def download_leave_pass(leave_id: str, services: LeaveServices = Depends(get_services)):
    result = services.passes.render_leave_pass(leave_id).raise_for_error()
    return Response(
        content=result.data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.metadata["filename"]}"'},
    )
