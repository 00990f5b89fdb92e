"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role stored on the users table. Immutable after account creation."""

    WORKER = "worker"
    CLIENT = "client"
    ADMIN = "admin"


# Landing route for each role after login or a role mismatch
ROLE_HOME_ROUTES: dict[UserRole, str] = {
    UserRole.WORKER: "/worker",
    UserRole.CLIENT: "/client",
    UserRole.ADMIN: "/admin",
}

LOGIN_ROUTE = "/login"
COMPLETE_PROFILE_ROUTE = "/complete-profile"
