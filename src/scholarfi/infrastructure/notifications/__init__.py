"""
Notification delivery.
"""

from scholarfi.infrastructure.notifications.notifier import (
    LoggingNotificationSender,
    WebhookNotificationSender,
)

__all__ = ["LoggingNotificationSender", "WebhookNotificationSender"]
