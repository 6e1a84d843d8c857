"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Relational database. DATABASE_URL wins over the postgres_* parts
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "marketplace_user"
    postgres_password: str = "password"
    postgres_db: str = "marketplace_db"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "marketplace_docs"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    # App
    debug: bool = False
    cors_origins: List[str] = ["*"]

    # Client side (API client, pollers, local picks)
    api_base_url: str = "http://localhost:8000/api"
    request_timeout_seconds: float = 10.0
    message_poll_seconds: float = 3.0
    conversation_poll_seconds: float = 5.0
    picks_file: str = "~/.marketplace/picks.json"

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL for the relational database."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
