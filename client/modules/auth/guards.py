"""
Route guards.

Pure functions from an AuthSnapshot to a navigation decision. They never
raise: missing state always resolves to a redirect or a loading placeholder.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from shared.models import COMPLETE_PROFILE_ROUTE, LOGIN_ROUTE, ROLE_HOME_ROUTES, UserRole

from .models import AuthSnapshot


class GuardOutcome(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT = "redirect"


class GuardDecision(BaseModel):
    """What the router should do with the requested location."""

    outcome: GuardOutcome
    to: Optional[str] = None
    # Location to return to after login
    from_location: Optional[str] = None
    replace: bool = True

    model_config = {"frozen": True}

    @classmethod
    def render(cls) -> "GuardDecision":
        return cls(outcome=GuardOutcome.RENDER, replace=False)

    @classmethod
    def loading(cls) -> "GuardDecision":
        return cls(outcome=GuardOutcome.LOADING, replace=False)

    @classmethod
    def redirect(cls, to: str, from_location: Optional[str] = None) -> "GuardDecision":
        return cls(outcome=GuardOutcome.REDIRECT, to=to, from_location=from_location)


def home_route_for(role: UserRole) -> str:
    return ROLE_HOME_ROUTES.get(role, ROLE_HOME_ROUTES[UserRole.ADMIN])


def guard_route(
    snapshot: AuthSnapshot,
    location: str,
    allowed_roles: Optional[Iterable[UserRole]] = None,
    require_complete_profile: bool = True,
) -> GuardDecision:
    """
    Decide whether a protected route renders.

    Args:
        snapshot: Current auth state
        location: Requested path, remembered for the post-login return
        allowed_roles: Roles that may see the route (None: any role)
        require_complete_profile: Send incomplete workers/clients to the
                                  profile completion flow

    Returns:
        GuardDecision to render, show a loading placeholder, or redirect
    """
    profile = snapshot.profile

    if snapshot.loading and profile is None:
        return GuardDecision.loading()

    if snapshot.user is None:
        return GuardDecision.redirect(LOGIN_ROUTE, from_location=location)

    if profile is None:
        return GuardDecision.loading()

    if (
        require_complete_profile
        and not snapshot.is_profile_complete
        and profile.role is not UserRole.ADMIN
    ):
        return GuardDecision.redirect(COMPLETE_PROFILE_ROUTE)

    if allowed_roles is not None and profile.role not in set(allowed_roles):
        return GuardDecision.redirect(home_route_for(profile.role))

    return GuardDecision.render()


def guard_public_route(
    snapshot: AuthSnapshot,
    return_to: Optional[str] = None,
) -> GuardDecision:
    """
    Reverse guard for login and registration pages.

    Signed-in users are sent to their home route (or back to where they were
    going, when that location belongs to their role); signed-in users with an
    incomplete profile go to the completion flow.
    """
    profile = snapshot.profile

    if snapshot.loading and profile is None:
        return GuardDecision.loading()

    if snapshot.user is None or profile is None:
        return GuardDecision.render()

    if not snapshot.is_profile_complete and profile.role is not UserRole.ADMIN:
        return GuardDecision.redirect(COMPLETE_PROFILE_ROUTE)

    home = home_route_for(profile.role)
    if return_to and _is_within(return_to, home):
        return GuardDecision.redirect(return_to)
    return GuardDecision.redirect(home)


def _is_within(location: str, root: str) -> bool:
    return location == root or location.startswith(root + "/")
