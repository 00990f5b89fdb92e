"""
Base repository for Supabase table access.

Repositories own the query building and the row-to-model mapping; services
only ever see models or typed results.
"""

from typing import Any, Generic, Optional, TypeVar

from supabase import AsyncClient


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Queries go through the shared anon-key client, so Row Level Security
    scopes every read to the signed-in user. A row hidden by RLS is
    indistinguishable from a missing one.

    Example:
        class JobRepository(BaseRepository[Job]):
            async def get(self, job_id: str) -> Optional[Job]:
                row = await self._select_one("jobs", job_id)
                return Job(**row) if row else None
    """

    def __init__(self, db: AsyncClient) -> None:
        """
        Args:
            db: Async Supabase client shared with the auth session.
        """
        self._db = db

    async def _select_one(
        self,
        table: str,
        key: str,
        columns: str = "*",
        key_column: str = "id",
    ) -> Optional[dict[str, Any]]:
        """
        Fetch a single row by key.

        Returns:
            The row as a dict, or None when no visible row matches

        Raises:
            Whatever the Supabase client raises on transport errors
        """
        result = (
            await self._db.table(table)
            .select(columns)
            .eq(key_column, key)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None
