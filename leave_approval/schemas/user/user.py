"""
User schemas for admin creation, student self-registration and profile edits.
"""

from typing import Optional, Union

from pydantic import ConfigDict, Field, field_validator

from leave_approval.models.base.enums import UserRole
from leave_approval.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
]


class UserCreate(BaseCreateSchema):
    """User creation payload."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "asha@college.edu",
                "name": "Asha Rao",
                "role": "student",
                "department": "CSE",
                "year": "3",
                "roll_number": "21CS042",
                "hostel_resident": True,
            }
        }
    )

    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = Field(default=UserRole.STUDENT)
    department: Union[str, None] = Field(None, max_length=100)
    year: Union[str, None] = Field(None, max_length=20)
    roll_number: Union[str, None] = Field(None, max_length=50)
    hostel_resident: bool = False
    assigned_mentor_id: Union[str, None] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v.lower()

    @field_validator("department", "year", "roll_number", "assigned_mentor_id")
    @classmethod
    def blank_to_none(cls, v: Union[str, None]) -> Union[str, None]:
        if v is not None and not v.strip():
            return None
        return v


class UserUpdate(BaseUpdateSchema):
    """Profile edit payload. Role is not editable here."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    year: Optional[str] = Field(None, max_length=20)
    roll_number: Optional[str] = Field(None, max_length=50)
    hostel_resident: Optional[bool] = None
    assigned_mentor_id: Optional[str] = None

    @field_validator("name", "hostel_resident")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    @field_validator("department", "year", "roll_number", "assigned_mentor_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class UserResponse(BaseResponseSchema):
    """User as returned to callers."""

    email: str
    name: str
    role: UserRole
    department: Optional[str] = None
    year: Optional[str] = None
    roll_number: Optional[str] = None
    hostel_resident: bool = False
    assigned_mentor_id: Optional[str] = None
