"""
Database client factory for Supabase.

The client core runs with the public anon key only: every query it makes is
subject to Row Level Security, scoped by the session the auth module holds.
"""

from typing import Optional
from supabase import acreate_client, AsyncClient

from .config import get_settings

# Module-level client cache
_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Get the shared Supabase client (anon key, RLS enforced).

    The same client carries the auth session, so profile queries made after
    sign-in run as the signed-in user.

    Returns:
        Async Supabase client configured with the anon key

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_ANON_KEY is missing
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _client
    _client = None
