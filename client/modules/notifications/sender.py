"""
Push notification sender.

Calls the send-push-notification edge function, which looks up stored
subscriptions and fans the message out. Sending is best effort: callers get a
boolean and failures are only logged, so a notification never blocks the
action that triggered it.
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from shared.config import Settings, get_settings

from .exceptions import PushSendError
from .models import JobDate, NotificationType, PushNotificationPayload, PushSendResult

logger = logging.getLogger(__name__)


def format_job_date(value: JobDate) -> str:
    """
    Render a job date as dd/mm/yyyy (pt-BR).

    Strings that are not ISO dates are returned as given.
    """
    if isinstance(value, str):
        raw = value
        if raw.endswith("Z"):
            # fromisoformat only accepts "Z" from Python 3.11
            raw = raw[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            logger.warning(f"Unrecognized job date {value!r}; sending it unformatted")
            return value
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%d/%m/%Y")


class PushNotificationSender:
    """Client for the send-push-notification edge function."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Settings with the Supabase URL and anon key.
            http_client: Optional shared client; a short-lived one is
                         created per request when omitted.
        """
        self._settings = settings or get_settings()
        self._http = http_client

    @property
    def function_url(self) -> str:
        base = self._settings.supabase_url.rstrip("/")
        return f"{base}/functions/v1/{self._settings.push_function_name}"

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.supabase_url and self._settings.supabase_anon_key)

    async def _post(self, payload: PushNotificationPayload) -> PushSendResult:
        headers = {
            "Authorization": f"Bearer {self._settings.supabase_anon_key}",
            "Content-Type": "application/json",
        }
        try:
            if self._http is not None:
                response = await self._http.post(
                    self.function_url,
                    json=payload.to_request(),
                    headers=headers,
                    timeout=self._settings.http_timeout,
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self.function_url,
                        json=payload.to_request(),
                        headers=headers,
                        timeout=self._settings.http_timeout,
                    )
            response.raise_for_status()
            return PushSendResult(**response.json())
        except httpx.HTTPStatusError as e:
            raise PushSendError(e.response.text, status=e.response.status_code)
        except (httpx.HTTPError, ValueError) as e:
            raise PushSendError(str(e))

    async def send(self, payload: PushNotificationPayload) -> bool:
        """
        Send a push notification.

        Returns:
            True if the function reports at least one delivery
        """
        if not self.is_configured:
            logger.warning("Supabase not configured; push notification not sent")
            return False

        try:
            result = await self._post(payload)
        except PushSendError as e:
            logger.error(f"{e.message} (status {e.status})" if e.status else e.message)
            return False

        logger.info(f"Push '{payload.title}' sent={result.sent} failed={result.failed}")
        return result.sent > 0

    async def notify_new_job(self, job_title: str, location: Optional[str] = None) -> bool:
        """Tell approved workers about a new job."""
        body = f"Nova vaga: {job_title} em {location}" if location else f"Nova vaga disponível: {job_title}"
        return await self.send(
            PushNotificationPayload(
                title="Nova Vaga Disponível!",
                body=body,
                url="/worker/jobs",
                type=NotificationType.NEW_JOB,
            )
        )

    async def notify_job_assignment(
        self, worker_id: str, job_title: str, job_date: JobDate
    ) -> bool:
        """Tell a worker they were selected for a job."""
        return await self.send(
            PushNotificationPayload(
                title="Você foi selecionado!",
                body=f"Vaga: {job_title} - {format_job_date(job_date)}",
                url="/worker/my-jobs",
                user_ids=[worker_id],
                type=NotificationType.ASSIGNMENT,
            )
        )

    async def notify_worker_approved(self, worker_id: str) -> bool:
        return await self.send(
            PushNotificationPayload(
                title="Cadastro Aprovado!",
                body="Seu cadastro foi aprovado. Você já pode se candidatar às vagas.",
                url="/worker",
                user_ids=[worker_id],
                type=NotificationType.APPROVAL,
            )
        )
