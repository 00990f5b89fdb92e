"""
Authentication module exceptions.

The auth state machine never raises these from its public operations; they
are returned through AuthResult.error and mapped to user-facing text by
modules.auth.messages.
"""

from typing import Optional

from shared.exceptions import AuthenticationError, SamaError, ValidationError, ExternalServiceError

from .state import AuthPhase


WORKER_BLOCKED = "WORKER_BLOCKED"


class SessionStoreError(ExternalServiceError):
    """
    Raised by session store adapters when the identity provider fails.

    The provider's message is kept verbatim because callers sniff it
    (e.g. "Invalid login credentials") to pick a localized message.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(
            message,
            service="supabase-auth",
            code="SESSION_STORE_ERROR",
            status=status,
        )


class WorkerBlockedError(AuthenticationError):
    """Returned by sign_in when the worker account is deactivated."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__(
            WORKER_BLOCKED,
            code=WORKER_BLOCKED,
            details={"user_id": user_id} if user_id else None,
        )


class SignInInterruptedError(AuthenticationError):
    """Returned by sign_in when a sign-out or teardown superseded the flow."""

    def __init__(self):
        super().__init__("Sign-in was interrupted", code="SIGN_IN_INTERRUPTED")


class PasswordPolicyError(ValidationError):
    """Raised when a new password is rejected before reaching the provider."""

    def __init__(self, reason: str):
        super().__init__(
            f"Password rejected: {reason}",
            code="PASSWORD_POLICY",
            details={"reason": reason},
        )
        self.reason = reason


class InvalidTransitionError(SamaError):
    """Raised when the state machine attempts a transition outside its table."""

    def __init__(self, current: AuthPhase, target: AuthPhase):
        super().__init__(
            f"Invalid auth transition: {current.value} -> {target.value}",
            code="INVALID_TRANSITION",
            details={"from": current.value, "to": target.value},
        )
