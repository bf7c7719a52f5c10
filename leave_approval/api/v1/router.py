"""
API v1 Router - Main Entry Point

Aggregates all v1 endpoints of the leave approval service.
"""

from fastapi import APIRouter

from leave_approval.api.v1 import leave_requests, notifications, users

router = APIRouter(
    responses={
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(leave_requests.router, prefix="/leave-requests", tags=["Leave Requests"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
