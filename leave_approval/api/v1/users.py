"""
User endpoints.
"""

from fastapi import APIRouter, Depends, status

from leave_approval.api.deps import get_services
from leave_approval.schemas.user.user import UserCreate, UserResponse, UserUpdate
from leave_approval.services.factory import LeaveServices

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, services: LeaveServices = Depends(get_services)):
    return services.users.create_user(payload).raise_for_error().data


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_student(payload: UserCreate, services: LeaveServices = Depends(get_services)):
    """Student self-registration; the requested role is ignored."""
    return services.users.register_student(payload).raise_for_error().data


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, services: LeaveServices = Depends(get_services)):
    return services.users.get_user(user_id).raise_for_error().data


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, payload: UserUpdate, services: LeaveServices = Depends(get_services)):
    return services.users.update_user(user_id, payload).raise_for_error().data
