"""
Authentication module data models.

These models define the session, profile and result types used by the auth
state machine and exposed to the guards and the notifications module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

from shared.models import UserRole

from .state import AuthPhase, LOADING_PHASES


T = TypeVar("T")


# -----------------------------------------------------------------------------
# Session (identity provider)
# -----------------------------------------------------------------------------


class AuthEvent(str, Enum):
    """Session-change events emitted by the identity provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class SessionUser(BaseModel):
    """Identity-provider user attached to a session."""

    id: str = Field(..., description="User ID (UUID from Supabase Auth)")
    email: Optional[str] = Field(None, description="User's email address")
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True, "extra": "ignore"}


class Session(BaseModel):
    """Read-only copy of the identity provider's session."""

    access_token: str
    refresh_token: str = ""
    expires_at: Optional[int] = None
    user: SessionUser

    model_config = {"frozen": True, "extra": "ignore"}


# -----------------------------------------------------------------------------
# Profiles
# -----------------------------------------------------------------------------


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserProfile(BaseModel):
    """Base identity record common to all roles (users table)."""

    id: str
    email: str
    name: str
    role: UserRole
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = {"extra": "ignore"}


class WorkerProfile(BaseModel):
    """Worker extension record (workers table), keyed by the user id."""

    id: str
    cpf: str
    skills: list[str] = Field(default_factory=list)
    rating: float = 0
    total_jobs: int = 0
    documents_verified: bool = False
    is_active: bool = True
    pix_key: Optional[str] = None

    # Address
    cep: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    approval_status: ApprovalStatus = ApprovalStatus.PENDING

    model_config = {"extra": "ignore"}


class ClientProfile(BaseModel):
    """Client extension record (clients table), keyed by the user id."""

    id: str
    cnpj: str
    company_name: str
    address: Optional[str] = None

    model_config = {"extra": "ignore"}


class WorkerAccount(BaseModel):
    kind: Literal["worker"] = "worker"
    profile: UserProfile
    worker: Optional[WorkerProfile] = None

    @property
    def is_complete(self) -> bool:
        return self.worker is not None


class ClientAccount(BaseModel):
    kind: Literal["client"] = "client"
    profile: UserProfile
    client: Optional[ClientProfile] = None

    @property
    def is_complete(self) -> bool:
        return self.client is not None


class AdminAccount(BaseModel):
    kind: Literal["admin"] = "admin"
    profile: UserProfile

    @property
    def is_complete(self) -> bool:
        return True


# Role-tagged profile returned by the profile loader
Account = Annotated[
    Union[WorkerAccount, ClientAccount, AdminAccount],
    Field(discriminator="kind"),
]


# -----------------------------------------------------------------------------
# Operation inputs and results
# -----------------------------------------------------------------------------


class SignUpMetadata(BaseModel):
    """User metadata sent with sign-up; server-side provisioning reads it."""

    name: str
    role: UserRole
    phone: Optional[str] = None
    cpf: Optional[str] = None
    cnpj: Optional[str] = None
    company_name: Optional[str] = None

    def to_user_metadata(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


@dataclass(frozen=True)
class AuthResult:
    """
    Return shape of the public auth operations.

    The only channel through which the state machine reports errors to
    callers; the operations themselves never raise.
    """

    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LoadStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """
    Typed outcome of a record lookup.

    Distinguishes "not found" (expected, drives the incomplete-profile state)
    from a transport failure.
    """

    status: LoadStatus
    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def found(cls, value: T) -> "LoadResult[T]":
        return cls(LoadStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "LoadResult[T]":
        return cls(LoadStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> "LoadResult[T]":
        return cls(LoadStatus.FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LoadStatus.FOUND

    @property
    def is_failed(self) -> bool:
        return self.status is LoadStatus.FAILED


class GateResult(str, Enum):
    """Outcome of the blocked-worker check."""

    ALLOWED = "allowed"
    BLOCKED = "blocked"
    UNKNOWN = "unknown"  # lookup failed


# -----------------------------------------------------------------------------
# Observable state
# -----------------------------------------------------------------------------


class AuthSnapshot(BaseModel):
    """
    Immutable view of the auth state machine handed to readers.

    The state machine is the single writer; guards and the notification
    lifecycle only ever see snapshots.
    """

    phase: AuthPhase
    session: Optional[Session] = None
    account: Optional[Account] = None

    model_config = {"frozen": True}

    @property
    def user(self) -> Optional[SessionUser]:
        return self.session.user if self.session else None

    @property
    def profile(self) -> Optional[UserProfile]:
        return self.account.profile if self.account else None

    @property
    def worker_profile(self) -> Optional[WorkerProfile]:
        if isinstance(self.account, WorkerAccount):
            return self.account.worker
        return None

    @property
    def client_profile(self) -> Optional[ClientProfile]:
        if isinstance(self.account, ClientAccount):
            return self.account.client
        return None

    @property
    def loading(self) -> bool:
        return self.phase in LOADING_PHASES

    @property
    def is_profile_complete(self) -> bool:
        return self.account.is_complete if self.account else False
