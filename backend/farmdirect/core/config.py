# backend/farmdirect/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_BACKEND_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and backend/.env."""

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "FarmDirect Messaging"
    environment: str = "development"
    log_level: str = "INFO"
    slow_request_ms: int = 500

    # Database
    database_url: str = Field(default=f"sqlite:///{_BACKEND_ROOT / 'farmdirect.db'}")

    # Session store
    session_cookie_name: str = "farm_session_id"
    session_ttl_days: int = 7
    session_cookie_secure: bool = False

    # CORS
    cors_allowed_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5000", "http://localhost:3000"]
    )

    # Messaging
    message_broadcast_scope: Literal["participants", "all"] = "participants"
    max_message_length: int = 5000
    default_message_subject: str = "Property Inquiry"
    relay_send_timeout_seconds: float = 5.0

    @field_validator("session_ttl_days")
    @classmethod
    def _validate_ttl(cls, value: int) -> int:
        if value < 1:
            raise ValueError("session_ttl_days must be at least 1")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in {"prod", "production"}

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60


settings = Settings()
