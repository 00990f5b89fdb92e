"""
Base exception classes for the Sama Conecta client core.

Modules define their own errors on top of these. Public operations of the
auth state machine and the push components hand errors back as values
instead of raising them, so most of these end up in AuthResult.error or in
a log line.
"""

from typing import Any, Optional


class SamaError(Exception):
    """
    Base exception for all Sama Conecta errors.

    `code` is stable and machine-readable (e.g. WORKER_BLOCKED); `message`
    may be the raw text of an upstream service.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = dict(details) if details else {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for error displays and structured logs."""
        return {"error": self.code, "message": self.message, "details": self.details}


class NotFoundError(SamaError):
    """Record not found."""

    pass


class ValidationError(SamaError):
    """Input rejected before reaching any service."""

    pass


class AuthenticationError(SamaError):
    """Sign-in refused (bad credentials, blocked account, interrupted flow)."""

    pass


class AuthorizationError(SamaError):
    """Signed in, but the role may not do this."""

    pass


class ExternalServiceError(SamaError):
    """
    Failure reported by, or while talking to, an external service.

    Args:
        message: Error text, kept verbatim from the service when available
        service: Service name (supabase-auth, receitaws, ...)
        status: HTTP status of the failed call, if there was one
    """

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.status = status
        self.details["service"] = service
        if status is not None:
            self.details["status"] = status
