"""
Service layer.

Services own transaction boundaries and return ServiceResult values;
repositories below them only flush.
"""

from leave_approval.services.factory import LeaveServices, build_services

__all__ = ["LeaveServices", "build_services"]
