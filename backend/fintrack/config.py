"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "FinTrack"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./fintrack.db"

    # Recurring generation
    default_occurrence_count: int = 12  # Per incremental generate call
    max_occurrence_count: int = 100  # Cap when stretching to cover plan horizons

    # Ledger projection
    projection_daily_growth: float = 0.0001  # Linear growth per future day

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
