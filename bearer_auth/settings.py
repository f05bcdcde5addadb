# bearer_auth/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
from datetime import timedelta
import logging
from pathlib import Path

from .authenticators.settings import AuthenticatorSettings

logger = logging.getLogger(__name__)

# This settings.py file is at <project>/bearer_auth/settings.py
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DOTENV_PATH = PROJECT_ROOT / ".env"

if DOTENV_PATH.exists():
    logger.debug(f"SETTINGS: .env file found at {DOTENV_PATH}")
else:
    logger.debug(f"SETTINGS: .env file not found at {DOTENV_PATH}. Relying on OS env vars or defaults.")


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    app_name: str = "Bearer Auth"
    debug_mode: bool = False
    log_level: str = "INFO"

    # One of "memory", "redis" or "sqlite"
    storage_backend: str = "memory"

    # Redis configuration
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    # SQLite configuration
    sqlite_db_path: str = "./bearer_auth_data.sqlite3"

    # Authenticator settings, durations in seconds
    auth_header_name: str = "X-Auth-Token"
    auth_idle_timeout_seconds: Optional[int] = Field(
        default=30 * 60,
        ge=0,
        description="Seconds an authenticator may stay unused. Zero or empty disables sliding expiration."
    )
    auth_expiry_seconds: int = Field(
        default=12 * 60 * 60,
        gt=0,
        description="Absolute lifetime of an authenticator in seconds."
    )
    id_generator_bytes_length: int = 128

    # Security settings
    host_app_registration_secret: Optional[str] = Field(
        default=None,
        description="Shared secret a host application presents to have tokens issued."
    )

    model_config = SettingsConfigDict(
        env_file=DOTENV_PATH if DOTENV_PATH.exists() else None,
        extra="ignore",
        env_file_encoding='utf-8'
    )

    def authenticator_settings(self) -> AuthenticatorSettings:
        """Build the authenticator settings value from the flat environment configuration."""
        idle_timeout = None
        if self.auth_idle_timeout_seconds:
            idle_timeout = timedelta(seconds=self.auth_idle_timeout_seconds)
        return AuthenticatorSettings(
            header_name=self.auth_header_name,
            authenticator_idle_timeout=idle_timeout,
            authenticator_expiry=timedelta(seconds=self.auth_expiry_seconds),
        )


settings = Settings()

logger.debug(
    f"SETTINGS: storage_backend='{settings.storage_backend}', "
    f"auth_header_name='{settings.auth_header_name}', "
    f"host_app_registration_secret={'********' if settings.host_app_registration_secret else 'None'}"
)
