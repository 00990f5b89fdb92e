"""
Authentication module.

Owns the client's session, profile and role state and the route guards that
read it.

Public API:
- IAuthService: Interface for the auth state machine
- AuthService: State machine implementation
- AuthSnapshot: Immutable view handed to readers
- guard_route / guard_public_route: Route guards
- Auth exceptions: WorkerBlockedError, SessionStoreError, etc.
"""

from .interfaces import IAuthService, IProfileStore, ISessionStore
from .models import (
    Account,
    AdminAccount,
    AuthEvent,
    AuthResult,
    AuthSnapshot,
    ClientAccount,
    ClientProfile,
    Session,
    SessionUser,
    SignUpMetadata,
    UserProfile,
    WorkerAccount,
    WorkerProfile,
)
from .state import AuthPhase
from .service import AuthService, get_auth_service, reset_auth_service
from .guards import GuardDecision, GuardOutcome, guard_route, guard_public_route, home_route_for
from .exceptions import (
    WORKER_BLOCKED,
    InvalidTransitionError,
    PasswordPolicyError,
    SessionStoreError,
    SignInInterruptedError,
    WorkerBlockedError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IProfileStore",
    "ISessionStore",
    # State machine
    "AuthService",
    "AuthPhase",
    "get_auth_service",
    "reset_auth_service",
    # Models
    "Account",
    "AdminAccount",
    "AuthEvent",
    "AuthResult",
    "AuthSnapshot",
    "ClientAccount",
    "ClientProfile",
    "Session",
    "SessionUser",
    "SignUpMetadata",
    "UserProfile",
    "WorkerAccount",
    "WorkerProfile",
    # Guards
    "GuardDecision",
    "GuardOutcome",
    "guard_route",
    "guard_public_route",
    "home_route_for",
    # Exceptions
    "WORKER_BLOCKED",
    "InvalidTransitionError",
    "PasswordPolicyError",
    "SessionStoreError",
    "SignInInterruptedError",
    "WorkerBlockedError",
]
