"""
User database model.

A single table holds every actor in the workflow: students applying
for leave and the staff approving it.
"""

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from leave_approval.models.base.base_model import TimestampModel, enum_column
from leave_approval.models.base.enums import UserRole

__all__ = ["User"]


class User(TimestampModel):
    """
    Workflow actor.

    `department` and `year` scope mentor and HOD resolution;
    `hostel_resident` decides whether a student's requests need
    warden approval; `assigned_mentor_id` pins a student to one mentor.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_role", "role"),
        Index("ix_users_department", "department"),
        {"comment": "Students and approving staff"}
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login email"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "user_role"),
        nullable=False,
        comment="Workflow role"
    )

    department: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Department (students, mentors, HODs)"
    )

    year: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="Academic year (students, mentors)"
    )

    roll_number: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Student register number"
    )

    hostel_resident: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the student lives in the hostel"
    )

    assigned_mentor_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Explicit mentor assignment overriding department/year matching"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT
