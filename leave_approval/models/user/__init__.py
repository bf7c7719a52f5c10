from leave_approval.models.user.user import User

__all__ = ["User"]
