"""
Configuration settings for the RO Service Manager.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "RO Service Manager"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://ro_user:ro_pass@db:5432/ro_service"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # API
    api_v1_prefix: str = "/api/v1"

    # SMS gateway (Fast2SMS)
    fast2sms_api_key: Optional[str] = None
    sms_api_url: str = "https://www.fast2sms.com/dev/bulkV2"
    sms_sender_id: str = "TXTIND"
    sms_max_length: int = 500

    # Email relay
    gmail_user: Optional[str] = None
    gmail_app_password: Optional[str] = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587

    channel_timeout_seconds: float = 10.0

    # Reminder recipients
    admin_phone: Optional[str] = None
    admin_email: Optional[str] = None

    # Scheduler
    reminder_lookahead_days: int = 3
    scheduler_enabled: bool = True
    scheduler_hour: int = 8
    scheduler_minute: int = 0
    scheduler_timezone: str = "Asia/Kolkata"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
