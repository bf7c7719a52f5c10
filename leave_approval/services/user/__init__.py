"""
User Service Layer
"""

from leave_approval.services.user.user_service import UserService

__all__ = ["UserService"]
