"""
Notifications module.

Push registration, the notification lifecycle that ties it to auth state,
the push sender and the realtime change-feed subscriber.

Public API:
- PushRegistrationClient: SDK wrapper with single-flight init
- NotificationLifecycle: Registration/tag re-sync driven by auth snapshots
- PushNotificationSender: Calls the send-push-notification function
- RealtimeSubscriber: New job / new assignment feeds
"""

from .interfaces import IPlatformPermissions, IPushSDK
from .models import (
    NotificationType,
    PermissionStatus,
    PushNotificationPayload,
    PushSubscriptionState,
    UserTags,
    WorkerTagSnapshot,
)
from .push_client import HeadlessPlatformPermissions, PushRegistrationClient
from .lifecycle import NotificationLifecycle, notification_url
from .sender import PushNotificationSender
from .realtime import RealtimeSubscriber
from .exceptions import PushError, PushNotConfiguredError, PushSendError

__all__ = [
    # Interfaces
    "IPlatformPermissions",
    "IPushSDK",
    # Models
    "NotificationType",
    "PermissionStatus",
    "PushNotificationPayload",
    "PushSubscriptionState",
    "UserTags",
    "WorkerTagSnapshot",
    # Implementations
    "HeadlessPlatformPermissions",
    "PushRegistrationClient",
    "NotificationLifecycle",
    "notification_url",
    "PushNotificationSender",
    "RealtimeSubscriber",
    # Exceptions
    "PushError",
    "PushNotConfiguredError",
    "PushSendError",
]
