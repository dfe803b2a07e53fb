"""Configuration settings for the compliance assistant."""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration with environment variable support."""

    # Service Info
    SERVICE_NAME: str = "compliance_assistant"
    SERVICE_VERSION: str = "1.0.0"

    # Accounts
    EXPLORER_QUERY_LIMIT: int = 5
    MIN_SECRET_LENGTH: int = 6
    MAX_DISPLAY_NAME_LENGTH: int = 80
    BCRYPT_ROUNDS: int = 12
    SEED_DEMO_ACCOUNTS: bool = False

    # Session tokens
    SESSION_SECRET_KEY: str = "change-me-in-production"
    SESSION_ALGORITHM: str = "HS256"
    SESSION_TOKEN_EXPIRE_DAYS: int = 7
    RESTORATION_FILE: Optional[str] = None

    # Simulated latency (seconds)
    AUTH_LATENCY_SECONDS: float = 1.0
    UPGRADE_LATENCY_SECONDS: float = 2.0

    # Responder
    RESPONDER_URL: str = "http://localhost:8080"
    RESPONDER_TIMEOUT_SECONDS: float = 30.0
    FAILURE_NOTICE: str = "Sorry, an error occurred. Please try again."

    # Gateway (proxy in front of the model-serving endpoint)
    UPSTREAM_URL: Optional[str] = None
    UPSTREAM_API_TOKEN: Optional[str] = None
    UPSTREAM_TIMEOUT_SECONDS: float = 60.0
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOGGING_HOST: Optional[str] = None
    LOGGING_PORT: int = 9999
    LOG_LEVEL: str = "INFO"
    # Third-party loggers to silence (comma-separated)
    NOISY_LOGGERS: str = "httpx,httpcore,asyncio,uvicorn.access"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
