from leave_approval.models.notification.notification import Notification

__all__ = ["Notification"]
