from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below

    Settings are frozen once loaded. Services receive the values they need
    through their constructors (see dependencies.py), they never read this
    module directly.
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "QR Link Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./qrlink.db"

    # Short links
    public_base_url: str = "http://127.0.0.1:8000"
    short_code_length: int = 7
    max_create_attempts: int = 3

    # QR rendering backend (unset = QR rendering disabled)
    qr_service_url: Optional[str] = None
    qr_timeout_seconds: float = 5.0

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # CORS (JSON list in the environment, e.g. CORS_ORIGINS='["https://app.example.com"]')
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


# Create settings instance
settings = Settings()
