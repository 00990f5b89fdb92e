"""
Authentication module interfaces.

The state machine depends on ISessionStore and IProfileStore, not on the
Supabase adapters, so tests can drive it with in-memory fakes. Other modules
should depend on IAuthService.
"""

from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from shared.models import UserRole

from .models import (
    Account,
    AuthEvent,
    AuthResult,
    AuthSnapshot,
    LoadResult,
    Session,
    SignUpMetadata,
)


AuthEventCallback = Callable[[AuthEvent, Optional[Session]], Awaitable[None]]
SnapshotListener = Callable[[AuthSnapshot], None]


@runtime_checkable
class ISubscription(Protocol):
    """Handle returned by ISessionStore.on_auth_state_change."""

    def unsubscribe(self) -> None:
        ...


@runtime_checkable
class ISessionStore(Protocol):
    """
    Identity provider session primitives.

    Implementations raise SessionStoreError on any provider failure.
    """

    async def get_session(self) -> Optional[Session]:
        """Return the persisted session, or None if there is none."""
        ...

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """
        Check credentials and start a session.

        Raises:
            SessionStoreError: With the provider's message on rejection
        """
        ...

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> None:
        ...

    async def sign_out(self) -> None:
        """Invalidate the session in local scope (this device only)."""
        ...

    def on_auth_state_change(self, callback: AuthEventCallback) -> ISubscription:
        """
        Register for session-change events.

        Args:
            callback: Coroutine function called with each event and the
                      session it carries (None on sign-out)

        Returns:
            Subscription handle; call unsubscribe() on teardown
        """
        ...

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        ...

    async def update_password(self, password: str) -> None:
        ...


@runtime_checkable
class IProfileStore(Protocol):
    """
    Profile record lookups.

    Every method returns a LoadResult and never raises.
    """

    async def load_account(self, user_id: str) -> LoadResult[Account]:
        """
        Load the users row and the extension record its role calls for.

        Returns:
            found with the role's Account variant; not_found when the users
            row is missing; failed on transport errors
        """
        ...

    async def fetch_role(self, user_id: str) -> LoadResult[UserRole]:
        ...

    async def fetch_worker_is_active(self, user_id: str) -> LoadResult[bool]:
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the auth state machine.

    None of these operations raise; failures come back as AuthResult.error
    or as null state.
    """

    @property
    def snapshot(self) -> AuthSnapshot:
        ...

    async def start(self) -> None:
        ...

    def close(self) -> None:
        ...

    async def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    async def sign_up(self, email: str, password: str, metadata: SignUpMetadata) -> AuthResult:
        ...

    async def sign_out(self) -> None:
        ...

    async def refresh_profile(self) -> None:
        ...

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        ...
