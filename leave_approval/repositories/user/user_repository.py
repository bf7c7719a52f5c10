"""
User Repository

Read-mostly access to workflow actors, used by the approver directory
and the user service.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_approval.models.base.enums import UserRole
from leave_approval.models.user.user import User
from leave_approval.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with role and department lookups."""

    def __init__(self, session: Session):
        super().__init__(User, session)

    def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by email, case-insensitively."""
        stmt = select(User).where(User.email == email.strip().lower())
        return self._scalar_first(stmt)

    def find_by_role(self, role: UserRole) -> List[User]:
        """All users holding a role, ordered by name."""
        stmt = select(User).where(User.role == role).order_by(User.name, User.id)
        return self._scalars(stmt)

    def find_by_department(self, department: str) -> List[User]:
        """All users in a department, ordered by name."""
        stmt = (
            select(User)
            .where(User.department == department)
            .order_by(User.name, User.id)
        )
        return self._scalars(stmt)

    def find_by_role_and_department(
        self,
        role: UserRole,
        department: str,
        year: Optional[str] = None,
    ) -> List[User]:
        """
        Users with a role inside a department, optionally narrowed to a year.

        Args:
            role: Role to match
            department: Department to match
            year: Academic year to match, when given
        """
        stmt = select(User).where(User.role == role, User.department == department)
        if year is not None:
            stmt = stmt.where(User.year == year)
        return self._scalars(stmt.order_by(User.name, User.id))
