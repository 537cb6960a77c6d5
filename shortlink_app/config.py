from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below

    Built once at startup (see main.create_app) and handed to the
    components that need it. Nothing in the service layer reads it directly.
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str = "sqlite:///./data/shortener.db"

    # URL Shortener specific
    base_url: str = "http://localhost:8080"
    short_code_length: int = 7
    max_retries: int = 5

    # Mapping store backend
    store_backend: str = "sql"  # Options: "sql", "memory"

    # Cache settings
    cache_backend: str = "null"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # Logging
    log_level: Optional[str] = None  # Defaults per environment when unset

    # CORS
    cors_allowed_origins: List[str] = ["null"]
    cors_allowed_origin_regex: str = r"http://(localhost|127\.0\.0\.1)(:\d+)?"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Settings read from the environment, built on first use."""
    return Settings()
