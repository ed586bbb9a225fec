"""
Configuration management for the Account Service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Account Service configuration loaded from environment variables"""

    # Server Configuration
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./accounts.db"

    # Token Configuration
    # Read once at startup; a missing secret only fails when a token is signed
    SECRET: Optional[str] = None
    TOKEN_ALGORITHM: str = "HS256"
    TOKEN_SCHEME: str = "JWT"

    # Validation
    PASSWORD_MIN_LENGTH: int = 6

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
