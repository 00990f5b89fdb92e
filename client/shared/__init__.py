"""
Shared infrastructure for the Sama Conecta client core.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Roles and role routing shared by auth and notifications

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    SamaError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import UserRole, ROLE_HOME_ROUTES, LOGIN_ROUTE, COMPLETE_PROFILE_ROUTE

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "SamaError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "UserRole",
    "ROLE_HOME_ROUTES",
    "LOGIN_ROUTE",
    "COMPLETE_PROFILE_ROUTE",
]
