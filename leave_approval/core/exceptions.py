"""
Custom Exceptions for the Leave Approval Workflow

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    # Workflow errors
    STATE_CONFLICT = "STATE_CONFLICT"
    PENDING_REQUEST_EXISTS = "PENDING_REQUEST_EXISTS"
    APPROVER_NOT_AUTHORIZED = "APPROVER_NOT_AUTHORIZED"
    INTERNAL_CONSISTENCY_ERROR = "INTERNAL_CONSISTENCY_ERROR"

    # Resource specific errors
    USER_NOT_FOUND = "USER_NOT_FOUND"
    LEAVE_REQUEST_NOT_FOUND = "LEAVE_REQUEST_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Dependency errors
    DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
    DATABASE_ERROR = "DATABASE_ERROR"
    ARTIFACT_GENERATION_FAILED = "ARTIFACT_GENERATION_FAILED"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Validation Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when input data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class InvalidDateRangeError(ValidationError):
    """Exception raised when end date precedes start date"""

    def __init__(
        self,
        message: str = "End date cannot be earlier than start date",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ):
        super().__init__(
            message,
            field_errors={"end_date": [message]},
            error_code=ErrorCode.INVALID_DATE_RANGE,
        )
        self.details.update({"start_date": start_date, "end_date": end_date})


# ========================================
# Resource Not Found Exceptions
# ========================================

class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, error_code, details, 404)


class UserNotFoundError(ResourceNotFoundError):
    """Exception raised when a user is not found"""

    def __init__(self, user_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__("User", user_id, message, ErrorCode.USER_NOT_FOUND)


class LeaveRequestNotFoundError(ResourceNotFoundError):
    """Exception raised when a leave request is not found"""

    def __init__(self, leave_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__("Leave request", leave_id, message, ErrorCode.LEAVE_REQUEST_NOT_FOUND)


class NotificationNotFoundError(ResourceNotFoundError):
    """Exception raised when a notification is not found"""

    def __init__(self, notification_id: Optional[str] = None):
        super().__init__("Notification", notification_id, None, ErrorCode.NOTIFICATION_NOT_FOUND)


class DuplicateEntryError(BaseAppException):
    """Exception raised when a unique value is already taken"""

    def __init__(self, message: str = "Duplicate entry", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, details, 409)


# ========================================
# Workflow Exceptions
# ========================================

class StateConflictError(BaseAppException):
    """
    Exception raised when an action targets a request that is no longer
    in the expected state: already decided, already advanced, or still
    waiting on an earlier stage.
    """

    def __init__(
        self,
        message: str = "This leave request has already been processed",
        leave_id: Optional[str] = None,
        expected_stage: Optional[str] = None,
        current_stage: Optional[str] = None,
        current_status: Optional[str] = None
    ):
        details = {
            "leave_id": leave_id,
            "expected_stage": expected_stage,
            "current_stage": current_stage,
            "current_status": current_status,
        }
        super().__init__(message, ErrorCode.STATE_CONFLICT, details, 409)


class PendingRequestExistsError(BaseAppException):
    """Exception raised when a student already has a pending leave request"""

    def __init__(self, student_id: str, pending_leave_id: str):
        super().__init__(
            "A pending leave request already exists for this student",
            ErrorCode.PENDING_REQUEST_EXISTS,
            {"student_id": student_id, "pending_leave_id": pending_leave_id},
            409,
        )


class ApproverNotAuthorizedError(BaseAppException):
    """Exception raised when an actor's role does not match the stage"""

    def __init__(self, actor_id: str, stage: str, role: Optional[str] = None):
        super().__init__(
            f"User is not authorized to act at the {stage} stage",
            ErrorCode.APPROVER_NOT_AUTHORIZED,
            {"actor_id": actor_id, "stage": stage, "role": role},
            403,
        )


class InternalConsistencyError(BaseAppException):
    """Exception raised when persisted workflow state contradicts itself"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INTERNAL_CONSISTENCY_ERROR, details, 500)


# ========================================
# Dependency Exceptions
# ========================================

class DependencyFailureError(BaseAppException):
    """Exception raised when a collaborator (database, QR generator) fails"""

    def __init__(
        self,
        message: str = "A required service is unavailable",
        service_name: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DEPENDENCY_FAILURE,
        status_code: int = 503
    ):
        details = {"service_name": service_name} if service_name else {}
        super().__init__(message, error_code, details, status_code)


class RepositoryError(DependencyFailureError):
    """Exception raised when a database operation fails"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, "database", ErrorCode.DATABASE_ERROR)


class ArtifactGenerationError(DependencyFailureError):
    """Exception raised when the leave pass artifact cannot be generated"""

    def __init__(self, message: str = "Failed to generate leave pass artifact"):
        super().__init__(message, "artifact_generator", ErrorCode.ARTIFACT_GENERATION_FAILED)


# ========================================
# Configuration Exceptions
# ========================================

class ConfigurationError(BaseAppException):
    """Exception raised for invalid workflow configuration"""

    def __init__(self, message: str = "Invalid configuration", config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details, 500)


# ========================================
# Utility Functions
# ========================================

def create_validation_error(field_errors: Dict[str, List[str]]) -> ValidationError:
    """Create a validation error with field-specific errors"""
    total_errors = sum(len(errors) for errors in field_errors.values())
    message = f"Validation failed with {total_errors} error(s)"
    return ValidationError(message, field_errors)


def validation_error_from_pydantic(error) -> ValidationError:
    """Convert a pydantic ValidationError into field-keyed errors"""
    field_errors: Dict[str, List[str]] = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "__root__"
        field_errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
    return create_validation_error(field_errors)


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'ValidationError',
    'InvalidDateRangeError',
    'ResourceNotFoundError',
    'UserNotFoundError',
    'LeaveRequestNotFoundError',
    'NotificationNotFoundError',
    'DuplicateEntryError',
    'StateConflictError',
    'PendingRequestExistsError',
    'ApproverNotAuthorizedError',
    'InternalConsistencyError',
    'DependencyFailureError',
    'RepositoryError',
    'ArtifactGenerationError',
    'ConfigurationError',
    'create_validation_error',
    'validation_error_from_pydantic',
]
