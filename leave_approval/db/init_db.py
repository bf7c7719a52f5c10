"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from leave_approval.core.logging import get_logger
from leave_approval.db.base import Base

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Suitable for development and tests; production deployments
    should manage the schema through migrations.
    """
    if bind is None:
        from leave_approval.db.session import engine as bind

    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured", extra={"table_count": len(Base.metadata.tables)})


def drop_db(bind: Optional[Engine] = None) -> None:
    """Drop all tables. Intended for tests only."""
    if bind is None:
        from leave_approval.db.session import engine as bind

    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
