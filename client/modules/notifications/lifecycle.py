"""
Notification lifecycle.

Coordinates the push registration client with the auth state machine:
initializes push once, registers the signed-in user once per session,
re-syncs worker tags only when approval_status or is_active actually change,
and routes notification clicks.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from shared.models import UserRole
from modules.auth.interfaces import IAuthService
from modules.auth.models import AuthSnapshot

from .exceptions import PushNotConfiguredError
from .models import PermissionStatus, PushSubscriptionState, UserTags, WorkerTagSnapshot
from .push_client import PushRegistrationClient

logger = logging.getLogger(__name__)


INIT_FAILED_MESSAGE = "Falha ao inicializar notificações"
NOT_AUTHENTICATED_MESSAGE = "Usuário não autenticado"
PERMISSION_DENIED_MESSAGE = "Permissão negada pelo usuário"
ACTIVATION_FAILED_MESSAGE = "Falha ao ativar notificações"
NOT_INITIALIZED_MESSAGE = "Notificações indisponíveis neste dispositivo"


def _field(source: Any, name: str) -> Any:
    if source is None:
        return None
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


def notification_url(event: Any) -> Optional[str]:
    """
    Extract the target URL from a click event payload.

    Accepts the SDK's event object or a plain dict; looks at the launch URL
    first, then at the url carried in the notification's additional data.
    """
    notification = _field(event, "notification") or event
    for key in ("launchURL", "launch_url", "url"):
        value = _field(notification, key)
        if value:
            return value
    data = _field(notification, "additionalData") or _field(notification, "additional_data")
    return _field(data, "url") or None


class NotificationLifecycle:
    """
    Push state for one mounted UI session.

    Registration runs once the push SDK is initialized and the profile is
    loaded; workers also wait for their extension record, because their
    approval and active tags come from it. The dedup guard is set before the
    registration call and cleared only if that call fails (or the auth session
    ends), so unrelated profile refreshes never re-register.
    """

    def __init__(
        self,
        push: PushRegistrationClient,
        navigate: Optional[Callable[[str], None]] = None,
        on_notification: Optional[Callable[[Any], None]] = None,
    ):
        self._push = push
        self._navigate = navigate
        self._on_notification = on_notification

        self._state = PushSubscriptionState()
        self._mounted = True

        # Dedup guard and the tag values last accepted by the SDK
        self._registered = False
        self._registered_user_id: Optional[str] = None
        self._tag_snapshot: Optional[WorkerTagSnapshot] = None

        self._last_snapshot: Optional[AuthSnapshot] = None
        self._detachers: list[Callable[[], None]] = []
        self._unbind: Optional[Callable[[], None]] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> PushSubscriptionState:
        return self._state.model_copy()

    @property
    def is_registered(self) -> bool:
        return self._registered

    # -------------------------------------------------------------------------
    # Mount / unmount
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Initialize push, wire notification listeners, register if possible."""
        await self._initialize()
        if not self._mounted or not self._state.is_initialized:
            return
        self._wire_listeners()
        if self._last_snapshot is not None:
            await self.handle_auth_state(self._last_snapshot)

    def bind(self, auth: IAuthService) -> None:
        """
        Follow an auth state machine.

        Each snapshot it publishes is handled in a task on the running loop.
        """
        if self._unbind is not None:
            self._unbind()
        self._unbind = auth.subscribe(lambda snapshot: self._schedule(self.handle_auth_state(snapshot)))
        self._last_snapshot = auth.snapshot
        if self._state.is_initialized:
            self._schedule(self.handle_auth_state(auth.snapshot))

    def close(self) -> None:
        self._mounted = False
        if self._unbind is not None:
            self._unbind()
            self._unbind = None
        self._detach_listeners()
        for task in list(self._tasks):
            task.cancel()

    async def wait_idle(self) -> None:
        """Wait for every scheduled auth-state task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Initialization and listeners
    # -------------------------------------------------------------------------

    async def _initialize(self) -> None:
        ok = await self._push.init()
        if not self._mounted:
            return

        if not ok:
            # Missing configuration degrades silently; anything else is surfaced
            error = None if isinstance(self._push.last_error, PushNotConfiguredError) else INIT_FAILED_MESSAGE
            if error:
                logger.error(f"Push initialization failed: {self._push.last_error}")
            self._update(
                is_initialized=False,
                permission_status=self._push.get_permission_status(),
                is_loading=False,
                error=error,
            )
            return

        subscribed = await self._push.is_subscribed()
        if not self._mounted:
            return
        self._update(
            is_initialized=True,
            is_subscribed=subscribed,
            permission_status=self._push.get_permission_status(),
            is_loading=False,
        )

    def _wire_listeners(self) -> None:
        self._detach_listeners()
        self._detachers = [
            self._push.on_notification_received(self._handle_received),
            self._push.on_notification_clicked(self._handle_clicked),
        ]

    def _detach_listeners(self) -> None:
        for detach in self._detachers:
            detach()
        self._detachers = []

    def _handle_received(self, event: Any) -> None:
        logger.debug(f"Foreground notification received: {event}")
        if self._on_notification is not None:
            self._on_notification(event)

    def _handle_clicked(self, event: Any) -> None:
        url = notification_url(event)
        if url and self._navigate is not None:
            logger.debug(f"Notification clicked; navigating to {url}")
            self._navigate(url)

    # -------------------------------------------------------------------------
    # Auth-driven registration
    # -------------------------------------------------------------------------

    async def handle_auth_state(self, snapshot: AuthSnapshot) -> None:
        """React to a new auth snapshot: register once, then re-sync tags."""
        if not self._mounted:
            return
        self._last_snapshot = snapshot

        if snapshot.user is None:
            if self._registered:
                await self._end_session()
            return

        profile = snapshot.profile
        if not self._state.is_initialized or profile is None:
            return

        if self._registered and self._registered_user_id != profile.id:
            await self._end_session()

        if not self._registered:
            await self._register(snapshot)
            return

        await self._resync_tags(snapshot)

    async def _register(self, snapshot: AuthSnapshot) -> None:
        profile = snapshot.profile
        worker = snapshot.worker_profile
        if profile.role is UserRole.WORKER and worker is None:
            logger.debug(f"Push registration for {profile.id} waits for the worker profile")
            return

        self._registered = True
        self._registered_user_id = profile.id
        sent = WorkerTagSnapshot.from_worker(worker) if worker is not None else None
        tags = UserTags(
            role=profile.role,
            user_id=profile.id,
            approval_status=sent.approval_status if sent else None,
            is_active=sent.is_active if sent else None,
        )

        ok = await self._push.register_user(profile.id, profile.role, tags.to_sdk_tags())
        if not self._mounted or self._registered_user_id != profile.id:
            return

        if not ok:
            logger.warning(f"Push registration for {profile.id} failed; will retry on next update")
            self._registered = False
            self._registered_user_id = None
            return

        self._tag_snapshot = sent
        # Worker fields may have moved on while the registration was in flight
        latest = self._last_snapshot
        if latest is not None and latest is not snapshot:
            await self._resync_tags(latest)

    async def _resync_tags(self, snapshot: AuthSnapshot) -> None:
        if self._tag_snapshot is None:
            return
        worker = snapshot.worker_profile
        if worker is None:
            return

        current = WorkerTagSnapshot.from_worker(worker)
        if current == self._tag_snapshot:
            return

        previous = self._tag_snapshot
        self._tag_snapshot = current
        ok = await self._push.update_user_tags(current.to_sdk_tags())
        if not ok and self._tag_snapshot == current:
            self._tag_snapshot = previous

    async def _end_session(self) -> None:
        logger.debug(f"Auth session ended for {self._registered_user_id}; logging device out")
        self._registered = False
        self._registered_user_id = None
        self._tag_snapshot = None
        await self._push.unregister_user()

    # -------------------------------------------------------------------------
    # User-invoked operations
    # -------------------------------------------------------------------------

    async def request_permission(self) -> bool:
        """
        Prompt for push permission.

        The platform's native permission is checked after the SDK call and
        wins when the SDK reports failure: the SDK can error out after the
        browser has already recorded "granted".
        """
        self._update(is_loading=True, error=None)

        if self._last_snapshot is None or self._last_snapshot.profile is None:
            logger.warning("Permission requested without a signed-in profile")
            self._update(is_loading=False, error=NOT_AUTHENTICATED_MESSAGE)
            return False

        if not self._state.is_initialized:
            logger.warning("Permission requested before push was initialized")
            self._update(is_loading=False, error=NOT_INITIALIZED_MESSAGE)
            return False

        sdk_granted = await self._push.prompt_for_push_permission()
        native = self._push.get_native_permission()
        granted = sdk_granted or native is PermissionStatus.GRANTED

        if not self._mounted:
            return granted

        if granted:
            if not sdk_granted:
                logger.info("SDK reported failure but native permission is granted")
            self._update(
                is_subscribed=True,
                permission_status=PermissionStatus.GRANTED,
                is_loading=False,
            )
            return True

        if native is PermissionStatus.DENIED:
            self._update(
                is_subscribed=False,
                permission_status=PermissionStatus.DENIED,
                is_loading=False,
                error=PERMISSION_DENIED_MESSAGE,
            )
            return False

        self._update(
            permission_status=self._push.get_permission_status(),
            is_loading=False,
            error=ACTIVATION_FAILED_MESSAGE,
        )
        return False

    async def refresh_status(self) -> None:
        subscribed = await self._push.is_subscribed()
        if not self._mounted:
            return
        self._update(
            is_subscribed=subscribed,
            permission_status=self._push.get_permission_status(),
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _update(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)

    def _schedule(self, coro: Awaitable[None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Notification lifecycle update failed: {task.exception()}")
