"""
Base service class providing common functionality for all services.
"""

from typing import TypeVar, Generic, Optional, Dict, Any
from abc import ABC

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from leave_approval.core.exceptions import (
    ApproverNotAuthorizedError,
    BaseAppException,
    ConfigurationError,
    DependencyFailureError,
    DuplicateEntryError,
    PendingRequestExistsError,
    RepositoryError,
    ResourceNotFoundError,
    StateConflictError,
    ValidationError,
)
from leave_approval.core.logging import get_logger
from leave_approval.repositories.base.base_repository import BaseRepository
from leave_approval.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo", bound=BaseRepository)

# Expected business outcomes, logged without a traceback
_EXPECTED_FAILURES = (
    ValidationError,
    ResourceNotFoundError,
    StateConflictError,
    PendingRequestExistsError,
    ApproverNotAuthorizedError,
    DuplicateEntryError,
)


class BaseService(ABC, Generic[TModel, TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code = self._map_exception_to_error_code(exception)

        if isinstance(exception, _EXPECTED_FAILURES):
            severity = ErrorSeverity.WARNING
            self._logger.warning(f"{operation} refused: {exception}", extra=context)
        else:
            severity = ErrorSeverity.CRITICAL
            self._logger.error(
                f"Error during {operation}: {exception}",
                exc_info=True,
                extra=context,
            )

        if isinstance(exception, BaseAppException):
            cause = exception
            message = exception.message
            details = dict(exception.details)
        else:
            cause = RepositoryError(str(exception)) if isinstance(exception, SQLAlchemyError) else None
            message = f"Failed to {operation}"
            details = {"error": str(exception)}
        details["entity_ref"] = context["entity_ref"]

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                details=details,
                severity=severity,
                cause=cause,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to appropriate error codes.

        Args:
            exception: The exception to map

        Returns:
            Appropriate ErrorCode for the exception
        """
        exception_mapping = {
            StateConflictError: ErrorCode.STATE_CONFLICT,
            PendingRequestExistsError: ErrorCode.CONFLICT,
            DuplicateEntryError: ErrorCode.ALREADY_EXISTS,
            ValidationError: ErrorCode.VALIDATION_ERROR,
            ResourceNotFoundError: ErrorCode.NOT_FOUND,
            ApproverNotAuthorizedError: ErrorCode.INSUFFICIENT_PERMISSIONS,
            DependencyFailureError: ErrorCode.DEPENDENCY_FAILURE,
            SQLAlchemyError: ErrorCode.DEPENDENCY_FAILURE,
            ConfigurationError: ErrorCode.CONFIGURATION_ERROR,
        }

        for exc_type, error_code in exception_mapping.items():
            if isinstance(exception, exc_type):
                return error_code

        return ErrorCode.INTERNAL_ERROR

    def _commit(self) -> None:
        """Commit the current transaction, translating database failures."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise RepositoryError(f"Commit failed: {e}") from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
