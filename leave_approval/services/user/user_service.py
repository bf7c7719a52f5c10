"""
User directory service.

Admin-created accounts, student self-registration and profile edits.
Profile edits never touch requests already in flight: those carry the
residency flag and stage sequence captured when they were created.
"""

from typing import Any, Dict, List, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from leave_approval.core.exceptions import (
    DuplicateEntryError,
    UserNotFoundError,
    ValidationError,
    validation_error_from_pydantic,
)
from leave_approval.models.base.enums import UserRole
from leave_approval.models.user.user import User
from leave_approval.repositories.user.user_repository import UserRepository
from leave_approval.schemas.user.user import UserCreate, UserResponse, UserUpdate
from leave_approval.services.base.base_service import BaseService
from leave_approval.services.base.service_result import ServiceResult


class UserService(BaseService[User, UserRepository]):
    """User management operations."""

    def __init__(self, repository: UserRepository, db_session: Session):
        super().__init__(repository, db_session)

    # -------------------------------------------------------------------------
    # Create & Update Operations
    # -------------------------------------------------------------------------

    def create_user(self, payload: Union[UserCreate, Dict[str, Any]]) -> ServiceResult[UserResponse]:
        """
        Create a user account.

        Args:
            payload: Account data

        Returns:
            ServiceResult containing the created user
        """
        try:
            data = payload if isinstance(payload, UserCreate) else self._parse(UserCreate, payload)

            if self.repository.get_by_email(data.email) is not None:
                raise DuplicateEntryError("A user with this email already exists", field="email")
            if data.assigned_mentor_id:
                self._check_mentor(data.assigned_mentor_id)

            user = User(**data.model_dump())
            self.repository.create(user)
            self._commit()

            self._logger.info(
                f"User created: {user.id}",
                extra={"user_id": user.id, "role": user.role.value},
            )
            return ServiceResult.success(
                UserResponse.model_validate(user),
                message="User created successfully",
            )
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "create user")

    def register_student(self, payload: Union[UserCreate, Dict[str, Any]]) -> ServiceResult[UserResponse]:
        """Self-registration; the account is always created as a student."""
        data = payload.model_dump() if isinstance(payload, UserCreate) else dict(payload)
        data["role"] = UserRole.STUDENT
        return self.create_user(data)

    def update_user(
        self,
        user_id: str,
        payload: Union[UserUpdate, Dict[str, Any]],
    ) -> ServiceResult[UserResponse]:
        """Apply a partial profile edit."""
        try:
            data = payload if isinstance(payload, UserUpdate) else self._parse(UserUpdate, payload)

            user = self._get_or_raise(user_id)
            values = data.model_dump(exclude_unset=True)
            if values.get("assigned_mentor_id"):
                if values["assigned_mentor_id"] == user.id:
                    raise ValidationError(
                        "A user cannot mentor themselves",
                        field_errors={"assigned_mentor_id": ["Must reference another user"]},
                    )
                self._check_mentor(values["assigned_mentor_id"])

            self.repository.update(user, values)
            self._commit()

            self._logger.info(
                f"User updated: {user_id}",
                extra={"user_id": user_id, "fields": sorted(values)},
            )
            return ServiceResult.success(UserResponse.model_validate(user))
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "update user", user_id)

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def get_user(self, user_id: str) -> ServiceResult[UserResponse]:
        try:
            return ServiceResult.success(UserResponse.model_validate(self._get_or_raise(user_id)))
        except Exception as e:
            return self._handle_exception(e, "get user", user_id)

    def get_user_by_email(self, email: str) -> ServiceResult[UserResponse]:
        try:
            user = self.repository.get_by_email(email)
            if user is None:
                raise UserNotFoundError(message=f"User not found (email: {email})")
            return ServiceResult.success(UserResponse.model_validate(user))
        except Exception as e:
            return self._handle_exception(e, "get user by email", email)

    def list_users_by_role(self, role: Union[UserRole, str]) -> ServiceResult[List[UserResponse]]:
        try:
            try:
                role = UserRole(role)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid role: {role}",
                    field_errors={"role": [f"Must be one of: {', '.join(r.value for r in UserRole)}"]},
                ) from e
            users = self.repository.find_by_role(role)
            return ServiceResult.success(
                [UserResponse.model_validate(u) for u in users],
                metadata={"count": len(users)},
            )
        except Exception as e:
            return self._handle_exception(e, "list users by role", str(role))

    def list_users_by_department(self, department: str) -> ServiceResult[List[UserResponse]]:
        try:
            users = self.repository.find_by_department(department)
            return ServiceResult.success(
                [UserResponse.model_validate(u) for u in users],
                metadata={"count": len(users)},
            )
        except Exception as e:
            return self._handle_exception(e, "list users by department", department)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_or_raise(self, user_id: str) -> User:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _check_mentor(self, mentor_id: str) -> None:
        mentor = self.repository.get_by_id(mentor_id)
        if mentor is None or mentor.role != UserRole.MENTOR:
            raise ValidationError(
                "Assigned mentor must be an existing mentor",
                field_errors={"assigned_mentor_id": ["Unknown mentor"]},
            )

    @staticmethod
    def _parse(schema, payload):
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e) from e
