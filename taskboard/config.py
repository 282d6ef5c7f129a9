"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Taskboard"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./taskboard.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Remote task source (in-process stub)
    REMOTE_FETCH_DELAY_SECONDS: float = 1.5
    REMOTE_PUSH_DELAY_SECONDS: float = 0.5
    REMOTE_FAILURE_MESSAGE: Optional[str] = None  # when set, every remote call fails

    # Synchronization
    SYNC_TIMEOUT_SECONDS: float = 10.0
    SYNC_RESET_DELAY_SECONDS: float = 2.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
