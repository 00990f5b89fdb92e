"""
Centralized configuration for the Sama Conecta client core.

All settings are loaded from environment variables with sensible defaults.
Integration settings are namespaced (e.g., SUPABASE_*, ONESIGNAL_*, RECEITAWS_*).
Every integration is optional: a missing key degrades the feature instead of
failing at import time.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


# Value shipped in .env.example; never a real OneSignal app id
ONESIGNAL_PLACEHOLDER_APP_ID = "seu-app-id-aqui"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Sama Conecta"
    app_version: str = "0.1.0"
    debug: bool = False

    # Frontend URLs (for redirects in auth emails)
    frontend_url: str = "http://localhost:5173"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    push_function_name: str = "send-push-notification"

    # OneSignal
    onesignal_app_id: str = ""
    onesignal_service_worker_path: str = "/OneSignalSDKWorker.js"
    onesignal_allow_localhost: Optional[bool] = None  # falls back to debug

    # Company registry (ReceitaWS)
    receitaws_url: str = "https://www.receitaws.com.br/v1/cnpj"
    receitaws_token: str = ""

    # Outbound HTTP
    http_timeout: float = 30.0

    @property
    def push_enabled(self) -> bool:
        """Whether a usable OneSignal app id is configured."""
        app_id = self.onesignal_app_id.strip()
        return bool(app_id) and app_id != ONESIGNAL_PLACEHOLDER_APP_ID

    @property
    def allow_localhost_push(self) -> bool:
        if self.onesignal_allow_localhost is None:
            return self.debug
        return self.onesignal_allow_localhost


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
