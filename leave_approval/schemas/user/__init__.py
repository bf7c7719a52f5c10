from leave_approval.schemas.user.user import UserCreate, UserResponse, UserUpdate

__all__ = ["UserCreate", "UserResponse", "UserUpdate"]
