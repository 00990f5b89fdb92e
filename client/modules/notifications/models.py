"""
Notifications module data models.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from shared.models import UserRole
from modules.auth.models import ApprovalStatus, WorkerProfile


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"
    UNSUPPORTED = "unsupported"


class PushSubscriptionState(BaseModel):
    """
    Client-local push state, derived from the SDK on demand.

    Not persisted; the SDK keeps its own state across page loads.
    """

    is_initialized: bool = False
    is_subscribed: bool = False
    permission_status: PermissionStatus = PermissionStatus.DEFAULT
    is_loading: bool = True
    error: Optional[str] = None


class UserTags(BaseModel):
    """Tags attached to the OneSignal user for audience targeting."""

    role: UserRole
    user_id: str
    approval_status: Optional[ApprovalStatus] = None
    is_active: Optional[bool] = None

    def to_sdk_tags(self) -> dict[str, str]:
        """Flatten to the string-only map the SDK accepts."""
        tags = {"role": self.role.value, "user_id": self.user_id}
        if self.approval_status is not None:
            tags["approval_status"] = self.approval_status.value
        if self.is_active is not None:
            tags["is_active"] = "true" if self.is_active else "false"
        return tags


class WorkerTagSnapshot(BaseModel):
    """Worker fields whose change requires a tag re-sync."""

    approval_status: ApprovalStatus
    is_active: bool

    model_config = {"frozen": True}

    @classmethod
    def from_worker(cls, worker: WorkerProfile) -> "WorkerTagSnapshot":
        return cls(approval_status=worker.approval_status, is_active=worker.is_active)

    def to_sdk_tags(self) -> dict[str, str]:
        return {
            "approval_status": self.approval_status.value,
            "is_active": "true" if self.is_active else "false",
        }


class NotificationType(str, Enum):
    NEW_JOB = "new_job"
    ASSIGNMENT = "assignment"
    APPROVAL = "approval"
    GENERAL = "general"


class PushNotificationPayload(BaseModel):
    """Request body accepted by the send-push-notification edge function."""

    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    url: Optional[str] = None
    user_ids: Optional[list[str]] = Field(None, serialization_alias="userIds")
    type: Optional[NotificationType] = None

    def to_request(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PushSendResult(BaseModel):
    """Response of the send-push-notification edge function."""

    sent: int = 0
    failed: int = 0
    total: int = 0

    model_config = {"extra": "ignore"}


JobDate = Union[date, datetime, str]
