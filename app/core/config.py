"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Training Log"
    VERSION: str = "0.1.0"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Local storage
    DATABASE_URL: str = "sqlite:///./training_log.db"

    # Calendar day attribution for timestamps carrying an offset
    TIMEZONE: str = "UTC"

    # Retention policy (0 disables the bound)
    RETENTION_DAYS: int = 365
    MAX_SESSIONS: int = 400

    # KPI windows
    KPI_RANGE_CHOICES: List[int] = [7, 30, 365]
    DEFAULT_KPI_RANGE_DAYS: int = 30

    # Remote spreadsheet web app
    SYNC_ENDPOINT: str = ""
    SYNC_TOKEN: str = ""
    SYNC_TIMEOUT: float = 30.0
    SYNC_ACK_TOKEN: str = "OK"
    DEFAULT_FETCH_LIMIT: int = 500

    # Coach view gate (not a security boundary)
    COACH_PASSWORD: str = ""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
