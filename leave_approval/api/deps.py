"""
Shared FastAPI dependencies.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from leave_approval.api import deps

    router = APIRouter()

    @router.get("/leave-requests")
    def list_requests(services: LeaveServices = Depends(deps.get_services)):
        ...
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from leave_approval.db.session import get_db
from leave_approval.services.factory import LeaveServices, build_services

__all__ = ["get_db", "get_services"]


def get_services(db: Session = Depends(get_db)) -> LeaveServices:
    """Services bound to the request's database session."""
    return build_services(db)
