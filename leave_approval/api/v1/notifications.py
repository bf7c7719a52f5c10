"""
Notification endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from leave_approval.api.deps import get_services
from leave_approval.schemas.notification.notification import NotificationResponse
from leave_approval.services.factory import LeaveServices

router = APIRouter()


@router.get("/{user_id}", response_model=List[NotificationResponse])
def list_notifications(
    user_id: str,
    unread_only: bool = Query(False),
    services: LeaveServices = Depends(get_services),
):
    return services.notifications.list_for_user(user_id, unread_only=unread_only).raise_for_error().data


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(notification_id: str, services: LeaveServices = Depends(get_services)):
    return services.notifications.mark_notification_read(notification_id).raise_for_error().data
