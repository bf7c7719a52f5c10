"""
Base repository with standardized CRUD operations and error handling.

Provides the foundation for all domain repositories. Repositories only
flush; transaction boundaries belong to the calling service.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from leave_approval.core.exceptions import DuplicateEntryError, RepositoryError, ValidationError
from leave_approval.core.logging import get_logger
from leave_approval.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with standardized operations.

    Database failures surface as RepositoryError, unique constraint
    violations as DuplicateEntryError.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add and flush a new entity.

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            ValidationError: If another constraint is violated
            RepositoryError: On any other database failure
        """
        try:
            self.db.add(entity)
            self.db.flush()

            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity

        except IntegrityError as e:
            self.db.rollback()
            raise self._integrity_error(e, "create") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Create failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """Get entity by primary key, or None."""
        try:
            return self.db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Get failed: {str(e)}") from e

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, values: Dict[str, Any]) -> ModelType:
        """Apply attribute updates to a loaded entity and flush them."""
        try:
            for key, value in values.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise self._integrity_error(e, "update") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Update failed: {str(e)}") from e

    # ==================== Helpers ====================

    def _integrity_error(self, error: IntegrityError, action: str) -> Exception:
        """Unique violations are duplicates; any other constraint failure is invalid data."""
        name = self.model.__name__
        if "unique" in str(error.orig).lower():
            return DuplicateEntryError(f"{name} {action} violates a unique constraint")
        logger.warning(f"{name} {action} violates a database constraint: {error.orig}")
        return ValidationError(f"{name} {action} violates a database constraint")

    def _scalars(self, stmt) -> List[ModelType]:
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Query failed: {str(e)}") from e

    def _scalar_first(self, stmt) -> Optional[ModelType]:
        try:
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Query failed: {str(e)}") from e
