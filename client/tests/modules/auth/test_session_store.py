"""Tests for the Supabase session store adapter."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from modules.auth.exceptions import SessionStoreError
from modules.auth.models import AuthEvent
from modules.auth.session_store import SupabaseSessionStore


def raw_session(user_id: str = "user-123", token: str = "token-1") -> MagicMock:
    raw = MagicMock()
    raw.access_token = token
    raw.refresh_token = "refresh"
    raw.expires_at = 1_900_000_000
    raw.user.id = user_id
    raw.user.email = "test@example.com"
    raw.user.user_metadata = {"name": "Maria"}
    return raw


class ProviderError(Exception):
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


@pytest.fixture
def client():
    client = MagicMock()
    client.auth.get_session = AsyncMock(return_value=None)
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_up = AsyncMock()
    client.auth.sign_out = AsyncMock()
    client.auth.reset_password_for_email = AsyncMock()
    client.auth.update_user = AsyncMock()
    return client


class TestSupabaseSessionStore:
    @pytest.mark.asyncio
    async def test_get_session_none(self, client):
        assert await SupabaseSessionStore(client).get_session() is None

    @pytest.mark.asyncio
    async def test_get_session_converts(self, client):
        client.auth.get_session.return_value = raw_session()
        session = await SupabaseSessionStore(client).get_session()
        assert session.access_token == "token-1"
        assert session.user.id == "user-123"
        assert session.user.user_metadata == {"name": "Maria"}

    @pytest.mark.asyncio
    async def test_sign_in_passes_credentials(self, client):
        client.auth.sign_in_with_password.return_value = MagicMock(session=raw_session())
        store = SupabaseSessionStore(client)

        session = await store.sign_in_with_password("a@b.com", "secret")

        client.auth.sign_in_with_password.assert_awaited_once_with(
            {"email": "a@b.com", "password": "secret"}
        )
        assert session.user.id == "user-123"

    @pytest.mark.asyncio
    async def test_sign_in_wraps_provider_error(self, client):
        client.auth.sign_in_with_password.side_effect = ProviderError("Invalid login credentials", 400)

        with pytest.raises(SessionStoreError) as exc_info:
            await SupabaseSessionStore(client).sign_in_with_password("a@b.com", "bad")

        assert exc_info.value.message == "Invalid login credentials"
        assert exc_info.value.status == 400

    @pytest.mark.asyncio
    async def test_sign_in_without_session_is_error(self, client):
        client.auth.sign_in_with_password.return_value = MagicMock(session=None)
        with pytest.raises(SessionStoreError):
            await SupabaseSessionStore(client).sign_in_with_password("a@b.com", "secret")

    @pytest.mark.asyncio
    async def test_sign_up_sends_metadata(self, client):
        await SupabaseSessionStore(client).sign_up("a@b.com", "secret", {"role": "worker"})
        client.auth.sign_up.assert_awaited_once_with(
            {"email": "a@b.com", "password": "secret", "options": {"data": {"role": "worker"}}}
        )

    @pytest.mark.asyncio
    async def test_sign_out_is_local(self, client):
        await SupabaseSessionStore(client).sign_out()
        client.auth.sign_out.assert_awaited_once_with({"scope": "local"})

    @pytest.mark.asyncio
    async def test_password_operations(self, client):
        store = SupabaseSessionStore(client)
        await store.reset_password_for_email("a@b.com", "https://x/reset-password")
        await store.update_password("new-secret")

        client.auth.reset_password_for_email.assert_awaited_once_with(
            "a@b.com", {"redirect_to": "https://x/reset-password"}
        )
        client.auth.update_user.assert_awaited_once_with({"password": "new-secret"})

    @pytest.mark.asyncio
    async def test_auth_events_are_scheduled(self, client):
        received = []

        async def callback(event, session):
            received.append((event, session))

        store = SupabaseSessionStore(client)
        store.on_auth_state_change(callback)
        dispatch = client.auth.on_auth_state_change.call_args.args[0]

        dispatch("SIGNED_IN", raw_session())
        dispatch("SIGNED_OUT", None)
        dispatch("MFA_CHALLENGE_VERIFIED", None)
        await asyncio.sleep(0)

        assert [event for event, _ in received] == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]
        assert received[0][1].user.id == "user-123"
        assert received[1][1] is None

    def test_subscription_is_provider_handle(self, client):
        handle = SupabaseSessionStore(client).on_auth_state_change(AsyncMock())
        assert handle is client.auth.on_auth_state_change.return_value
