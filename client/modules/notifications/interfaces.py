"""
Notifications module interfaces.

IPushSDK mirrors the surface of the OneSignal web SDK that the push client
uses. IPlatformPermissions is the platform's native notification permission
API. Both are injected so the client can run against fakes in tests.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable


NotificationListener = Callable[[Any], None]


@runtime_checkable
class IPushSubscription(Protocol):
    @property
    def id(self) -> Optional[str]:
        ...

    @property
    def opted_in(self) -> bool:
        ...

    async def opt_in(self) -> None:
        ...


@runtime_checkable
class IPushUser(Protocol):
    @property
    def push_subscription(self) -> IPushSubscription:
        ...

    async def add_tags(self, tags: dict[str, str]) -> None:
        ...

    async def remove_tags(self, keys: list[str]) -> None:
        ...


@runtime_checkable
class IPushNotifications(Protocol):
    @property
    def permission(self) -> bool:
        """Whether the SDK considers push permission granted."""
        ...

    @property
    def permission_native(self) -> str:
        """Native permission as seen by the SDK: granted, denied or default."""
        ...

    async def request_permission(self) -> None:
        ...

    def add_event_listener(self, event: str, listener: NotificationListener) -> None:
        ...

    def remove_event_listener(self, event: str, listener: NotificationListener) -> None:
        ...


@runtime_checkable
class IPushSDK(Protocol):
    """
    Push SDK handle.

    init() may only run once per SDK instance; a second call raises an
    "already initialized" error.
    """

    @property
    def user(self) -> IPushUser:
        ...

    @property
    def notifications(self) -> IPushNotifications:
        ...

    async def init(self, app_id: str, **options: Any) -> None:
        ...

    async def login(self, external_id: str) -> None:
        ...

    async def logout(self) -> None:
        ...


@runtime_checkable
class IPlatformPermissions(Protocol):
    """Native notification permission API of the host platform."""

    def is_supported(self) -> bool:
        ...

    def permission(self) -> str:
        """granted, denied or default."""
        ...
