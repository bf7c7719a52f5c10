from leave_approval.schemas.notification.notification import NotificationResponse

__all__ = ["NotificationResponse"]
