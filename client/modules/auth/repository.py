"""
Profile repository for database access.

Encapsulates the Supabase queries behind profile resolution:
- users (base profile, role)
- workers (worker extension record, active flag)
- clients (client extension record)

Every lookup returns a LoadResult; transport errors are logged and reported
as `failed`, never raised.
"""

import logging
from typing import Any, Callable, Optional, TypeVar

from supabase import AsyncClient

from shared.models import UserRole
from shared.repository import BaseRepository
from .models import (
    Account,
    AdminAccount,
    ClientAccount,
    ClientProfile,
    LoadResult,
    UserProfile,
    WorkerAccount,
    WorkerProfile,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ProfileRepository(BaseRepository[Account]):
    """
    Repository for profile data access.

    Queries run with the signed-in user's session, so Row Level Security
    decides what is visible; an RLS-hidden row reads as not found.
    """

    def __init__(self, db: AsyncClient) -> None:
        super().__init__(db)

    async def _fetch_one(
        self,
        table: str,
        user_id: str,
        mapper: Callable[[dict[str, Any]], R],
        columns: str = "*",
    ) -> LoadResult[R]:
        try:
            row = await self._select_one(table, user_id, columns=columns)
        except Exception as e:
            logger.warning(f"Failed to fetch {table} row for {user_id}: {e}")
            return LoadResult.failed(e)

        if row is None:
            return LoadResult.not_found()

        try:
            return LoadResult.found(mapper(row))
        except (KeyError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            logger.warning(f"Malformed {table} row for {user_id}: {e}")
            return LoadResult.failed(e)

    # -------------------------------------------------------------------------
    # Single-table lookups
    # -------------------------------------------------------------------------

    async def fetch_user(self, user_id: str) -> LoadResult[UserProfile]:
        return await self._fetch_one("users", user_id, lambda row: UserProfile(**row))

    async def fetch_worker(self, user_id: str) -> LoadResult[WorkerProfile]:
        return await self._fetch_one("workers", user_id, lambda row: WorkerProfile(**row))

    async def fetch_client(self, user_id: str) -> LoadResult[ClientProfile]:
        return await self._fetch_one("clients", user_id, lambda row: ClientProfile(**row))

    async def fetch_role(self, user_id: str) -> LoadResult[UserRole]:
        """Get only the role column of the users row."""
        return await self._fetch_one(
            "users", user_id, lambda row: UserRole(row["role"]), columns="role"
        )

    async def fetch_worker_is_active(self, user_id: str) -> LoadResult[bool]:
        """Get only the is_active flag of the workers row."""
        return await self._fetch_one(
            "workers", user_id, lambda row: bool(row["is_active"]), columns="is_active"
        )

    # -------------------------------------------------------------------------
    # Role dispatch
    # -------------------------------------------------------------------------

    async def load_account(self, user_id: str) -> LoadResult[Account]:
        """
        Load the base profile and the extension record its role calls for.

        A missing or unreadable extension record is not an error: the account
        is returned without it and reports itself incomplete.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            LoadResult with a WorkerAccount, ClientAccount or AdminAccount.
        """
        user_result = await self.fetch_user(user_id)
        if not user_result.is_found:
            return LoadResult(user_result.status, error=user_result.error)

        profile = user_result.value
        account: Account

        if profile.role is UserRole.WORKER:
            worker = await self.fetch_worker(user_id)
            account = WorkerAccount(profile=profile, worker=self._extension(worker, "worker", user_id))
        elif profile.role is UserRole.CLIENT:
            client = await self.fetch_client(user_id)
            account = ClientAccount(profile=profile, client=self._extension(client, "client", user_id))
        else:
            account = AdminAccount(profile=profile)

        return LoadResult.found(account)

    @staticmethod
    def _extension(result: LoadResult[R], kind: str, user_id: str) -> Optional[R]:
        if result.is_failed:
            logger.warning(f"Treating {kind} profile of {user_id} as incomplete after load failure")
        elif not result.is_found:
            logger.debug(f"No {kind} profile for {user_id}; profile incomplete")
        return result.value
