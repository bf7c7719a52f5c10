"""SQLAlchemy Base class for all models."""
from leave_approval.models.base.base_model import Base


def import_models() -> None:
    """Import all models to register them with SQLAlchemy."""
    import leave_approval.models  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
