"""
Supabase Auth adapter implementing ISessionStore.

Converts supabase-py session objects into this module's Session model and
wraps every provider failure in SessionStoreError.
"""

import asyncio
import logging
from typing import Any, Optional

from supabase import AsyncClient

from .exceptions import SessionStoreError
from .interfaces import AuthEventCallback, ISessionStore, ISubscription
from .models import AuthEvent, Session, SessionUser

logger = logging.getLogger(__name__)


def _to_session(raw: Any) -> Optional[Session]:
    if raw is None or getattr(raw, "user", None) is None:
        return None
    user = raw.user
    return Session(
        access_token=raw.access_token,
        refresh_token=raw.refresh_token or "",
        expires_at=raw.expires_at,
        user=SessionUser(
            id=user.id,
            email=user.email,
            user_metadata=user.user_metadata or {},
        ),
    )


def _wrap(error: Exception) -> SessionStoreError:
    message = getattr(error, "message", None) or str(error)
    return SessionStoreError(message, status=getattr(error, "status", None))


class SupabaseSessionStore(ISessionStore):
    """
    Session store backed by supabase.AsyncClient.auth.

    supabase-py calls auth listeners synchronously from inside the call that
    changed the session; the async callback is scheduled on the running loop
    instead, so it runs at the caller's next suspension point.
    """

    def __init__(self, client: AsyncClient):
        self._auth = client.auth
        self._pending: set[asyncio.Task] = set()

    async def get_session(self) -> Optional[Session]:
        try:
            raw = await self._auth.get_session()
        except Exception as e:
            raise _wrap(e)
        return _to_session(raw)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        try:
            response = await self._auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            raise _wrap(e)

        session = _to_session(response.session)
        if session is None:
            raise SessionStoreError("Sign-in returned no session")
        return session

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> None:
        try:
            await self._auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": metadata},
                }
            )
        except Exception as e:
            raise _wrap(e)

    async def sign_out(self) -> None:
        try:
            await self._auth.sign_out({"scope": "local"})
        except Exception as e:
            raise _wrap(e)

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        try:
            await self._auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as e:
            raise _wrap(e)

    async def update_password(self, password: str) -> None:
        try:
            await self._auth.update_user({"password": password})
        except Exception as e:
            raise _wrap(e)

    def on_auth_state_change(self, callback: AuthEventCallback) -> ISubscription:
        def dispatch(event: str, raw_session: Any) -> None:
            try:
                auth_event = AuthEvent(event)
            except ValueError:
                logger.debug(f"Ignoring unsupported auth event {event}")
                return

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning(f"Auth event {event} raised outside an event loop; dropped")
                return

            task = loop.create_task(callback(auth_event, _to_session(raw_session)))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return self._auth.on_auth_state_change(dispatch)
