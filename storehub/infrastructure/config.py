"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = "postgresql+asyncpg://storehub:storehub_dev_password@db:5432/storehub"

    # Auth provider (Supabase Auth)
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    auth_timeout_seconds: float = 5.0

    # Error observation
    sentry_dsn: str = ""

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
