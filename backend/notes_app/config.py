"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Server settings (user + notes services) loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "notes-app"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"  # comma-separated

    # ── Supabase ─────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_KEY: str  # anon/public key
    SUPABASE_SERVICE_KEY: str = ""  # service_role key (for admin ops)

    # ── Security ─────────────────────────────────────────
    JWT_SECRET_KEY: str  # JWT signing key
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_MINUTES: int = 60

    # ── Accounts ─────────────────────────────────────────
    USERNAME_MIN_LENGTH: int = 3
    PASSWORD_MIN_LENGTH: int = 6

    # ── Trash ────────────────────────────────────────────
    TRASH_RETENTION_DAYS: int = 30  # 0 = keep trashed notes forever
    TRASH_PURGE_HOUR: int = 3  # UTC hour of the daily purge job

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


class ClientSettings(BaseSettings):
    """Settings for the editing client talking to the REST services."""

    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 15.0  # HTTP timeout in seconds
    AUTOSAVE_DELAY_MS: int = 2000  # quiet period before a draft is persisted

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    """Cached client settings instance (singleton)."""
    return ClientSettings()
