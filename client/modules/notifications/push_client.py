"""
Push registration client.

Wraps a OneSignal-shaped SDK behind operations that tolerate the SDK being
uninitialized and never raise: every SDK failure is logged and reported as a
boolean, so a push problem can't break the auth flow.
"""

import asyncio
import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.models import UserRole

from .exceptions import PushError, PushNotConfiguredError
from .interfaces import IPlatformPermissions, IPushSDK, NotificationListener
from .models import PermissionStatus, UserTags

logger = logging.getLogger(__name__)


# SDK error fragments with special handling during init
ALREADY_INITIALIZED_MARKER = "already initialized"
DEV_DOMAIN_MARKER = "can only be used on"

FOREGROUND_EVENT = "foregroundWillDisplay"
CLICK_EVENT = "click"


class HeadlessPlatformPermissions:
    """Platform without a notification API (e.g. a server-side run)."""

    def is_supported(self) -> bool:
        return False

    def permission(self) -> str:
        return PermissionStatus.DEFAULT.value


class PushRegistrationClient:
    """
    Explicitly constructed push client.

    Each instance owns its initialized flag and its in-flight init task, so
    independent instances never share state. Concurrent init() calls await
    the same task: the SDK's init routine runs once.
    """

    def __init__(
        self,
        sdk: IPushSDK,
        platform: Optional[IPlatformPermissions] = None,
        settings: Optional[Settings] = None,
    ):
        self._sdk = sdk
        self._platform = platform or HeadlessPlatformPermissions()
        self._settings = settings or get_settings()
        self._initialized = False
        self._init_task: Optional[asyncio.Task] = None
        self._last_error: Optional[Exception] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def last_error(self) -> Optional[Exception]:
        """Error behind the most recent failed init, if any."""
        return self._last_error

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    async def init(self) -> bool:
        """
        Initialize the SDK once.

        Returns:
            True when the SDK is ready; False when push is not configured or
            the SDK refused to start
        """
        if self._initialized:
            return True

        if self._init_task is None:
            if not self._settings.push_enabled:
                logger.warning("OneSignal app id not configured; push disabled")
                self._last_error = PushNotConfiguredError()
                return False
            self._init_task = asyncio.ensure_future(self._run_init())

        return await asyncio.shield(self._init_task)

    async def _run_init(self) -> bool:
        try:
            await self._sdk.init(
                self._settings.onesignal_app_id,
                allow_localhost_as_secure_origin=self._settings.allow_localhost_push,
                service_worker_path=self._settings.onesignal_service_worker_path,
                notify_button={"enable": False},
                welcome_notification={"disable": True},
            )
        except Exception as e:
            message = str(e).lower()
            if ALREADY_INITIALIZED_MARKER in message:
                logger.debug("OneSignal already initialized")
            elif DEV_DOMAIN_MARKER in message:
                logger.warning(f"OneSignal unavailable on this domain; push disabled: {e}")
                self._last_error = PushError(str(e), code="PUSH_DOMAIN_MISMATCH")
                return False
            else:
                logger.error(f"Failed to initialize OneSignal: {e}")
                self._last_error = PushError(str(e), code="PUSH_INIT_FAILED")
                return False
        finally:
            self._init_task = None

        self._initialized = True
        self._last_error = None
        logger.info("OneSignal initialized")
        return True

    # -------------------------------------------------------------------------
    # User registration
    # -------------------------------------------------------------------------

    async def register_user(
        self,
        user_id: str,
        role: UserRole,
        tags: Optional[dict[str, Optional[str]]] = None,
    ) -> bool:
        """
        Log this device in under the external user id and tag it.

        Args:
            user_id: Supabase user ID used as OneSignal external id
            role: User role, always sent as a tag
            tags: Extra tags; None values are dropped

        Returns:
            True on success; False on any failure (logged, never raised)
        """
        if not self._initialized and not await self.init():
            logger.warning(f"Skipping push registration for {user_id}: SDK not initialized")
            return False

        sdk_tags = UserTags(role=role, user_id=user_id).to_sdk_tags()
        for key, value in (tags or {}).items():
            if value is not None:
                sdk_tags[key] = value

        try:
            await self._sdk.login(user_id)
            await self._sdk.user.add_tags(sdk_tags)
        except Exception as e:
            logger.error(f"Failed to register {user_id} for push: {e}")
            return False

        logger.info(f"Registered {user_id} for push with tags {sdk_tags}")
        return True

    async def unregister_user(self) -> None:
        if not self._initialized:
            logger.debug("SDK not initialized; nothing to unregister")
            return
        try:
            await self._sdk.logout()
        except Exception as e:
            logger.error(f"Failed to log device out of OneSignal: {e}")
            return
        logger.info("Device logged out of OneSignal")

    async def update_user_tags(self, tags: dict[str, Optional[str]]) -> bool:
        if not self._initialized:
            logger.warning("SDK not initialized; tags not updated")
            return False

        clean = {key: value for key, value in tags.items() if value is not None}
        try:
            await self._sdk.user.add_tags(clean)
        except Exception as e:
            logger.error(f"Failed to update push tags: {e}")
            return False
        logger.debug(f"Push tags updated: {clean}")
        return True

    async def remove_user_tags(self, keys: list[str]) -> bool:
        if not self._initialized:
            logger.warning("SDK not initialized; tags not removed")
            return False
        try:
            await self._sdk.user.remove_tags(keys)
        except Exception as e:
            logger.error(f"Failed to remove push tags: {e}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Permission and subscription status
    # -------------------------------------------------------------------------

    async def prompt_for_push_permission(self) -> bool:
        """
        Ask for push permission and opt the device in.

        Short-circuits when permission is already granted and the device is
        opted in.
        """
        if not self._initialized:
            logger.warning("SDK not initialized; cannot prompt for permission")
            return False

        try:
            notifications = self._sdk.notifications
            subscription = self._sdk.user.push_subscription
            if notifications.permission and subscription.opted_in:
                return True

            await notifications.request_permission()
            granted = bool(notifications.permission)
            if granted:
                await subscription.opt_in()
        except Exception as e:
            logger.error(f"Failed to request push permission: {e}")
            return False

        logger.info(f"Push permission requested: granted={granted}")
        return granted

    async def is_subscribed(self) -> bool:
        if not self._initialized:
            return False
        try:
            return bool(self._sdk.user.push_subscription.opted_in)
        except Exception as e:
            logger.error(f"Failed to read push subscription: {e}")
            return False

    def get_permission_status(self) -> PermissionStatus:
        """Permission as seen by the SDK when ready, else by the platform."""
        if not self._platform.is_supported():
            return PermissionStatus.UNSUPPORTED

        if self._initialized:
            try:
                return PermissionStatus(self._sdk.notifications.permission_native)
            except Exception as e:
                logger.debug(f"SDK permission unreadable, using platform value: {e}")

        return self.get_native_permission()

    def get_native_permission(self) -> PermissionStatus:
        """Permission straight from the platform API, bypassing the SDK."""
        if not self._platform.is_supported():
            return PermissionStatus.UNSUPPORTED
        try:
            return PermissionStatus(self._platform.permission())
        except ValueError:
            return PermissionStatus.DEFAULT

    # -------------------------------------------------------------------------
    # Incoming notifications
    # -------------------------------------------------------------------------

    def on_notification_received(self, listener: NotificationListener):
        """Attach a foreground-display listener; returns its detach function."""
        return self._attach(FOREGROUND_EVENT, listener)

    def on_notification_clicked(self, listener: NotificationListener):
        """Attach a click listener; returns its detach function."""
        return self._attach(CLICK_EVENT, listener)

    def _attach(self, event: str, listener: NotificationListener):
        if not self._initialized:
            logger.warning(f"SDK not initialized; {event} listener not attached")
            return lambda: None

        try:
            notifications = self._sdk.notifications
            notifications.add_event_listener(event, listener)
        except Exception as e:
            logger.error(f"Failed to attach {event} listener: {e}")
            return lambda: None

        def detach() -> None:
            try:
                notifications.remove_event_listener(event, listener)
            except Exception as e:
                logger.error(f"Failed to detach {event} listener: {e}")

        return detach
