"""
Client configuration using Pydantic Settings.

Values are read from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Backend API
    # ===========================================
    API_BASE_URL: str = "http://localhost:8080"

    # Per-request timeout in seconds. None disables the timeout.
    HTTP_TIMEOUT_SECONDS: Optional[float] = None

    # Connection-level retries handed to the httpx transport (0 = surface the error)
    HTTP_MAX_RETRIES: int = 0

    # ===========================================
    # Local storage (credential store)
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./quickplan_prefs.db"
    PREFERENCES_NAMESPACE: str = "user_prefs"

    # ===========================================
    # Fallback identities when nobody is logged in
    # ===========================================
    DEFAULT_SCHEDULE_USER_ID: str = "default_user_001"
    GUEST_CHAT_USER_ID: str = "guest_user"

    # ===========================================
    # Verification code
    # ===========================================
    CODE_COOLDOWN_SECONDS: int = 60
    COOLDOWN_TICK_SECONDS: float = 1.0


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
