"""
Notifications module exceptions.

Push components catch these at their boundary and report booleans; they are
raised only inside the module.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, SamaError


class PushError(SamaError):
    """Base exception for push-related errors."""

    pass


class PushNotConfiguredError(PushError):
    """Raised when no OneSignal app id is configured."""

    def __init__(self):
        super().__init__(
            "OneSignal app id not configured. Set ONESIGNAL_APP_ID.",
            code="PUSH_NOT_CONFIGURED",
        )


class PushSendError(ExternalServiceError):
    """Raised when the send-push-notification function call fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(
            f"Failed to send push notification: {message}",
            service="send-push-notification",
            code="PUSH_SEND_ERROR",
            status=status,
        )
