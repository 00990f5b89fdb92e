"""
Realtime fan-out subscriber.

Listens to Supabase change feeds for new jobs and for assignments of the
signed-in worker, so open screens can refresh without polling.
"""

import logging
from typing import Any, Callable, Optional

from supabase import AsyncClient

logger = logging.getLogger(__name__)


RecordCallback = Callable[[dict[str, Any]], None]


def new_record(payload: Any) -> dict[str, Any]:
    """Pull the inserted row out of a postgres_changes payload."""
    if not isinstance(payload, dict):
        return {}
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    record = payload.get("new") or payload.get("record")
    return record if isinstance(record, dict) else {}


class RealtimeSubscriber:
    """
    Per-profile change-feed subscriptions.

    start() opens one channel for job inserts and one for the profile's
    assignment inserts; stop() closes both. Restarting for another profile
    closes the previous channels first.
    """

    def __init__(
        self,
        client: AsyncClient,
        on_new_job: Optional[RecordCallback] = None,
        on_new_assignment: Optional[RecordCallback] = None,
    ):
        self._client = client
        self._on_new_job = on_new_job
        self._on_new_assignment = on_new_assignment
        self._channels: list[Any] = []
        self._profile_id: Optional[str] = None

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    @property
    def is_active(self) -> bool:
        return bool(self._channels)

    async def start(self, profile_id: str) -> None:
        if self._profile_id == profile_id and self._channels:
            return
        await self.stop()

        jobs = self._client.channel("jobs-updates").on_postgres_changes(
            "INSERT",
            schema="public",
            table="jobs",
            callback=self._handle_new_job,
        )
        assignments = self._client.channel(f"assignments-{profile_id}").on_postgres_changes(
            "INSERT",
            schema="public",
            table="job_assignments",
            filter=f"worker_id=eq.{profile_id}",
            callback=self._handle_new_assignment,
        )

        self._channels = [jobs, assignments]
        self._profile_id = profile_id
        for channel in self._channels:
            await channel.subscribe()
        logger.info(f"Realtime subscriptions started for {profile_id}")

    async def stop(self) -> None:
        channels, self._channels = self._channels, []
        self._profile_id = None
        for channel in channels:
            try:
                await self._client.remove_channel(channel)
            except Exception as e:
                logger.warning(f"Failed to remove realtime channel: {e}")

    def _handle_new_job(self, payload: Any) -> None:
        record = new_record(payload)
        logger.debug(f"New job: {record.get('id')}")
        if self._on_new_job is not None:
            self._on_new_job(record)

    def _handle_new_assignment(self, payload: Any) -> None:
        record = new_record(payload)
        logger.debug(f"New assignment: {record.get('id')}")
        if self._on_new_assignment is not None:
            self._on_new_assignment(record)
