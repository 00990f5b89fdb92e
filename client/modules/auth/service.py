"""
Authentication service implementation.

AuthService is the auth state machine: the single writer of session, profile
and role state. It bootstraps from the persisted session, reacts to ambient
session-change events, and exposes sign-in, sign-up, sign-out and profile
refresh to the rest of the client.
"""

import logging
from typing import Callable, Optional

from shared.config import Settings, get_settings
from shared.database import get_supabase_client
from shared.models import UserRole

from .exceptions import (
    InvalidTransitionError,
    PasswordPolicyError,
    SessionStoreError,
    SignInInterruptedError,
    WorkerBlockedError,
)
from .interfaces import IAuthService, IProfileStore, ISessionStore, ISubscription, SnapshotListener
from .models import (
    Account,
    AuthEvent,
    AuthResult,
    AuthSnapshot,
    ClientProfile,
    GateResult,
    Session,
    SessionUser,
    SignUpMetadata,
    UserProfile,
    WorkerProfile,
)
from .repository import ProfileRepository
from .session_store import SupabaseSessionStore
from .state import AuthPhase, can_transition

logger = logging.getLogger(__name__)


MIN_PASSWORD_LENGTH = 6


class AuthService(IAuthService):
    """
    Auth state machine.

    Phases: BOOTSTRAPPING -> UNAUTHENTICATED | LOADING_PROFILE -> AUTHENTICATED,
    with SIGNING_IN covering a manual sign-in from credential check to loaded
    profile. Ambient session events are skipped while SIGNING_IN, so a manual
    sign-in and the SIGNED_IN event it causes never both mutate state.

    Every async loader captures the generation counter when it starts and
    drops its result if a newer operation (sign-in, sign-out, ambient change,
    refresh, close) bumped the counter in the meantime.

    Workers whose extension record has is_active=false never reach a state
    with a session: the gate runs on bootstrap, on sign-in and on ambient
    session changes, and signs the device out when it trips.
    """

    def __init__(
        self,
        session_store: ISessionStore,
        profiles: IProfileStore,
        settings: Optional[Settings] = None,
    ):
        self._store = session_store
        self._profiles = profiles
        self._settings = settings or get_settings()

        self._phase = AuthPhase.BOOTSTRAPPING
        self._session: Optional[Session] = None
        self._account: Optional[Account] = None

        self._generation = 0
        self._started = False
        self._closed = False
        self._subscription: Optional[ISubscription] = None
        self._listeners: list[SnapshotListener] = []

    async def __aenter__(self) -> "AuthService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> AuthSnapshot:
        return AuthSnapshot(phase=self._phase, session=self._session, account=self._account)

    @property
    def phase(self) -> AuthPhase:
        return self._phase

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def user(self) -> Optional[SessionUser]:
        return self.snapshot.user

    @property
    def account(self) -> Optional[Account]:
        return self._account

    @property
    def profile(self) -> Optional[UserProfile]:
        return self.snapshot.profile

    @property
    def worker_profile(self) -> Optional[WorkerProfile]:
        return self.snapshot.worker_profile

    @property
    def client_profile(self) -> Optional[ClientProfile]:
        return self.snapshot.client_profile

    @property
    def loading(self) -> bool:
        return self.snapshot.loading

    @property
    def is_profile_complete(self) -> bool:
        return self.snapshot.is_profile_complete

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Observe state changes.

        Args:
            listener: Called with a fresh AuthSnapshot after every transition

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Subscribe to ambient session events, then restore the persisted session."""
        if self._started or self._closed:
            return
        self._started = True
        self._subscription = self._store.on_auth_state_change(self._handle_auth_event)
        await self._bootstrap()

    def close(self) -> None:
        """Stop listening and discard every in-flight result."""
        if self._closed:
            return
        self._closed = True
        self._supersede()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._listeners.clear()

    async def _bootstrap(self) -> None:
        generation = self._generation

        try:
            session = await self._store.get_session()
        except SessionStoreError as e:
            logger.error(f"Failed to restore session: {e.message}")
            if self._is_current(generation):
                self._transition(AuthPhase.UNAUTHENTICATED)
            return

        if not self._is_current(generation):
            return

        if session is None:
            logger.debug("No persisted session")
            self._transition(AuthPhase.UNAUTHENTICATED)
            return

        gate = await self._check_worker_gate(session.user.id)
        if not self._is_current(generation):
            return
        if gate is not GateResult.ALLOWED:
            logger.warning(
                f"Worker gate returned {gate.value} for {session.user.id} on bootstrap; signing out"
            )
            await self._sign_out_locally()
            return

        self._session = session
        self._transition(AuthPhase.LOADING_PROFILE)
        await self._load_profile(session.user.id, generation)

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Sign in with email and password.

        Returns:
            AuthResult with error=None on success; the provider's
            SessionStoreError on rejected credentials; WorkerBlockedError when
            the account is a deactivated worker (or its status can't be read).
        """
        if self._closed:
            return AuthResult(error=SignInInterruptedError())

        generation = self._supersede()
        self._transition(AuthPhase.SIGNING_IN)

        try:
            session = await self._store.sign_in_with_password(email, password)
        except SessionStoreError as e:
            logger.info(f"Sign-in rejected: {e.message}")
            if self._is_current(generation):
                self._settle()
            return AuthResult(error=e)

        if not self._is_current(generation):
            return AuthResult(error=SignInInterruptedError())

        user_id = session.user.id
        gate = await self._check_worker_gate(user_id)
        if not self._is_current(generation):
            return AuthResult(error=SignInInterruptedError())
        if gate is not GateResult.ALLOWED:
            logger.warning(f"Worker gate returned {gate.value} for {user_id} on sign-in; signing out")
            await self._sign_out_locally()
            return AuthResult(error=WorkerBlockedError(user_id))

        if self._account is not None and self._account.profile.id != user_id:
            self._account = None
        self._session = session
        await self._load_profile(user_id, generation)

        if not self._is_current(generation):
            return AuthResult(error=SignInInterruptedError())
        logger.info(f"Signed in {user_id}")
        return AuthResult()

    async def sign_up(self, email: str, password: str, metadata: SignUpMetadata) -> AuthResult:
        """
        Register a new account.

        The role's extension record is provisioned server-side; this only
        creates the identity with its metadata.
        """
        try:
            await self._store.sign_up(email, password, metadata.to_user_metadata())
        except SessionStoreError as e:
            logger.info(f"Sign-up rejected: {e.message}")
            return AuthResult(error=e)
        logger.info(f"Signed up {email} as {metadata.role.value}")
        return AuthResult()

    async def sign_out(self) -> None:
        """Clear local state immediately, then invalidate the provider session."""
        self._reset()
        try:
            await self._store.sign_out()
        except SessionStoreError as e:
            logger.warning(f"Provider sign-out failed after local reset: {e.message}")

    async def fetch_profile(self, user_id: str) -> None:
        """
        Reload the profile and extension record for the signed-in user.

        Failures leave profile=None and is_profile_complete=False.
        """
        if self._session is None or self._session.user.id != user_id:
            logger.debug(f"Ignoring profile fetch for {user_id}: not the signed-in user")
            return
        if self._phase is AuthPhase.SIGNING_IN:
            logger.debug("Ignoring profile fetch during manual sign-in")
            return

        generation = self._supersede()
        self._transition(AuthPhase.LOADING_PROFILE)
        await self._load_profile(user_id, generation)

    async def refresh_profile(self) -> None:
        if self._session is None:
            return
        await self.fetch_profile(self._session.user.id)

    async def request_password_reset(
        self, email: str, redirect_to: Optional[str] = None
    ) -> AuthResult:
        """Send the password recovery email; the link lands on /reset-password."""
        target = redirect_to or f"{self._settings.frontend_url.rstrip('/')}/reset-password"
        try:
            await self._store.reset_password_for_email(email, target)
        except SessionStoreError as e:
            logger.info(f"Password reset request failed: {e.message}")
            return AuthResult(error=e)
        return AuthResult()

    async def update_password(
        self, password: str, confirmation: Optional[str] = None
    ) -> AuthResult:
        """
        Set a new password for the recovery session.

        On success the device is signed out so the user logs in again with
        the new password.
        """
        if confirmation is not None and password != confirmation:
            return AuthResult(error=PasswordPolicyError("mismatch"))
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(error=PasswordPolicyError("too_short"))

        try:
            await self._store.update_password(password)
        except SessionStoreError as e:
            logger.info(f"Password update failed: {e.message}")
            return AuthResult(error=e)

        await self.sign_out()
        return AuthResult()

    # -------------------------------------------------------------------------
    # Ambient session events
    # -------------------------------------------------------------------------

    async def _handle_auth_event(self, event: AuthEvent, session: Optional[Session]) -> None:
        if self._closed:
            return

        if event is AuthEvent.SIGNED_OUT:
            self._reset()
            return

        if self._phase is AuthPhase.SIGNING_IN:
            logger.debug(f"Skipping {event.value}: manual sign-in in progress")
            return

        if event is AuthEvent.INITIAL_SESSION and self._phase is AuthPhase.BOOTSTRAPPING:
            return

        if session is None:
            self._reset()
            return

        if (
            self._phase is AuthPhase.AUTHENTICATED
            and self._session is not None
            and self._session.access_token == session.access_token
        ):
            logger.debug(f"Skipping {event.value}: session unchanged")
            return

        same_user = (
            self._phase is AuthPhase.AUTHENTICATED
            and self._session is not None
            and self._session.user.id == session.user.id
        )
        generation = self._supersede()
        self._transition(AuthPhase.LOADING_PROFILE)

        gate = await self._check_worker_gate(session.user.id)
        if not self._is_current(generation):
            return
        if gate is GateResult.UNKNOWN and same_user:
            # Already admitted; a lookup failure only blocks new sessions
            logger.warning(
                f"Worker gate unavailable for {session.user.id} on {event.value}; keeping session"
            )
            self._session = session
            self._transition(AuthPhase.AUTHENTICATED)
            return
        if gate is not GateResult.ALLOWED:
            logger.warning(
                f"Worker gate returned {gate.value} for {session.user.id} on {event.value}; signing out"
            )
            await self._sign_out_locally()
            return

        if self._session is None or self._session.user.id != session.user.id:
            self._account = None
        self._session = session
        await self._load_profile(session.user.id, generation)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _check_worker_gate(self, user_id: str) -> GateResult:
        """
        Decide whether a session may be surfaced.

        Non-workers and workers without an extension record are allowed;
        the latter resolve to an incomplete profile later.
        """
        role = await self._profiles.fetch_role(user_id)
        if role.is_failed:
            return GateResult.UNKNOWN
        if not role.is_found or role.value is not UserRole.WORKER:
            return GateResult.ALLOWED

        active = await self._profiles.fetch_worker_is_active(user_id)
        if active.is_failed:
            return GateResult.UNKNOWN
        if active.is_found and active.value is False:
            return GateResult.BLOCKED
        return GateResult.ALLOWED

    async def _load_profile(self, user_id: str, generation: int) -> None:
        result = await self._profiles.load_account(user_id)

        if not self._is_current(generation):
            logger.debug(f"Discarding stale profile result for {user_id}")
            return

        if result.is_found:
            self._account = result.value
        else:
            if result.is_failed:
                logger.error(f"Error fetching profile for {user_id}: {result.error}")
            else:
                logger.warning(f"No profile row for {user_id}")
            self._account = None

        self._transition(AuthPhase.AUTHENTICATED)

    async def _sign_out_locally(self) -> None:
        self._reset()
        try:
            await self._store.sign_out()
        except SessionStoreError as e:
            logger.warning(f"Local sign-out failed: {e.message}")

    def _reset(self) -> None:
        self._supersede()
        self._session = None
        self._account = None
        self._transition(AuthPhase.UNAUTHENTICATED)

    def _settle(self) -> None:
        """Return to the resting phase matching the committed session."""
        if self._session is not None:
            self._transition(AuthPhase.AUTHENTICATED)
        else:
            self._transition(AuthPhase.UNAUTHENTICATED)

    def _supersede(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _transition(self, target: AuthPhase) -> None:
        if not can_transition(self._phase, target):
            raise InvalidTransitionError(self._phase, target)
        if target is not self._phase:
            logger.debug(f"Auth phase {self._phase.value} -> {target.value}")
        self._phase = target
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Auth state listener failed")


# Module-level instance getter
_service_instance: Optional[AuthService] = None


async def get_auth_service() -> AuthService:
    """Get the auth service singleton wired to Supabase."""
    global _service_instance
    if _service_instance is None:
        client = await get_supabase_client()
        _service_instance = AuthService(
            SupabaseSessionStore(client),
            ProfileRepository(client),
        )
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    if _service_instance is not None:
        _service_instance.close()
    _service_instance = None
