"""Tests for the profile repository."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from shared.models import UserRole
from modules.auth.models import AdminAccount, ClientAccount, LoadStatus, WorkerAccount
from modules.auth.repository import ProfileRepository


def make_db(rows_by_table: dict[str, list[dict]], failing: set[str] = frozenset()) -> MagicMock:
    """Mock AsyncClient whose table(...).select(...).eq(...).limit(...).execute() returns rows."""
    db = MagicMock()

    def table(name: str):
        query = MagicMock()
        chain = query.select.return_value.eq.return_value.limit.return_value
        if name in failing:
            chain.execute = AsyncMock(side_effect=ConnectionError("network down"))
        else:
            chain.execute = AsyncMock(return_value=MagicMock(data=rows_by_table.get(name, [])))
        return query

    db.table.side_effect = table
    return db


USER_ROW = {
    "id": "w1",
    "email": "maria@example.com",
    "name": "Maria Silva",
    "role": "worker",
    "phone": None,
    "avatar_url": None,
    "created_at": "2025-01-01T00:00:00Z",
}
WORKER_ROW = {"id": "w1", "cpf": "123", "is_active": True, "approval_status": "approved"}
CLIENT_ROW = {"id": "c1", "cnpj": "12345678000190", "company_name": "Buffet Sama"}


class TestFetchOne:
    @pytest.mark.asyncio
    async def test_fetch_user_found(self):
        repo = ProfileRepository(make_db({"users": [USER_ROW]}))
        result = await repo.fetch_user("w1")
        assert result.is_found
        assert result.value.role is UserRole.WORKER

    @pytest.mark.asyncio
    async def test_fetch_user_not_found(self):
        repo = ProfileRepository(make_db({}))
        result = await repo.fetch_user("w1")
        assert result.status is LoadStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_transport_error_is_failed(self):
        repo = ProfileRepository(make_db({}, failing={"users"}))
        result = await repo.fetch_user("w1")
        assert result.is_failed
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_malformed_row_is_failed(self):
        repo = ProfileRepository(make_db({"users": [{"id": "w1", "role": "nobody"}]}))
        result = await repo.fetch_user("w1")
        assert result.is_failed

    @pytest.mark.asyncio
    async def test_query_shape(self):
        db = make_db({"users": [{"role": "admin"}]})
        repo = ProfileRepository(db)

        result = await repo.fetch_role("a1")

        assert result.value is UserRole.ADMIN
        db.table.assert_called_once_with("users")

    @pytest.mark.asyncio
    async def test_fetch_worker_is_active(self):
        repo = ProfileRepository(make_db({"workers": [{"is_active": False}]}))
        result = await repo.fetch_worker_is_active("w1")
        assert result.is_found
        assert result.value is False


class TestLoadAccount:
    @pytest.mark.asyncio
    async def test_worker_with_extension(self):
        repo = ProfileRepository(make_db({"users": [USER_ROW], "workers": [WORKER_ROW]}))
        result = await repo.load_account("w1")
        assert isinstance(result.value, WorkerAccount)
        assert result.value.is_complete

    @pytest.mark.asyncio
    async def test_worker_without_extension_is_incomplete(self):
        repo = ProfileRepository(make_db({"users": [USER_ROW]}))
        result = await repo.load_account("w1")
        assert result.is_found
        assert result.value.worker is None
        assert not result.value.is_complete

    @pytest.mark.asyncio
    async def test_extension_failure_is_incomplete_not_failed(self):
        repo = ProfileRepository(make_db({"users": [USER_ROW]}, failing={"workers"}))
        result = await repo.load_account("w1")
        assert result.is_found
        assert not result.value.is_complete

    @pytest.mark.asyncio
    async def test_client(self):
        row = {**USER_ROW, "id": "c1", "role": "client"}
        repo = ProfileRepository(make_db({"users": [row], "clients": [CLIENT_ROW]}))
        result = await repo.load_account("c1")
        assert isinstance(result.value, ClientAccount)
        assert result.value.client.company_name == "Buffet Sama"

    @pytest.mark.asyncio
    async def test_admin_skips_extension_lookup(self):
        db = make_db({"users": [{**USER_ROW, "role": "admin"}]})
        repo = ProfileRepository(db)
        result = await repo.load_account("a1")
        assert isinstance(result.value, AdminAccount)
        db.table.assert_called_once_with("users")

    @pytest.mark.asyncio
    async def test_missing_user_row(self):
        repo = ProfileRepository(make_db({}))
        result = await repo.load_account("w1")
        assert result.status is LoadStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_user_row_failure(self):
        repo = ProfileRepository(make_db({}, failing={"users"}))
        result = await repo.load_account("w1")
        assert result.is_failed
        assert result.error is not None
