# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.CHAT_MODEL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Nothing here is required at startup. A missing GROQ_API_KEY is reported
# per request by the chat proxy as a configuration error.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Completion Provider (server-held credential)
    # -------------------------------------------------------------------------

    GROQ_API_KEY: str | None = Field(
        default=None,
        description="Provider API key. Never returned to callers."
    )

    CHAT_PROVIDER_BASE_URL: str = Field(
        default="https://api.groq.com/openai/v1",
        description="OpenAI-compatible base URL of the completion provider"
    )

    CHAT_MODEL: str = Field(
        default="mixtral-8x7b-32768",
        description="Fixed model identifier sent with every completion request"
    )

    CHAT_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for the assistant"
    )

    CHAT_MAX_TOKENS: int = Field(
        default=1024,
        ge=1,
        description="Maximum tokens in one assistant reply"
    )

    CHAT_PROVIDER_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Seconds before a provider call is abandoned"
    )

    # -------------------------------------------------------------------------
    # Chat Proxy Client
    # -------------------------------------------------------------------------

    CHAT_PROXY_URL: str = Field(
        default="http://localhost:10000/api/chat",
        description="Endpoint the conversation engine posts messages to"
    )

    CHAT_PROXY_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Transport timeout for one proxy round-trip"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=10000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # The one origin allowed to call the API from a browser
    CLIENT_URL: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origin"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum file upload size in MB"
    )

    ALLOWED_EXTENSIONS: str = Field(
        default=".csv",
        description="Allowed file extensions (comma-separated)"
    )

    ALLOWED_CONTENT_TYPES: str = Field(
        default="text/csv",
        description="Declared content types accepted regardless of extension (comma-separated)"
    )

    PREVIEW_ROW_LIMIT: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of data rows kept as a preview after the header"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def allowed_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_EXTENSIONS string into a list.

        Example: ".csv, .tsv" -> [".csv", ".tsv"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_EXTENSIONS.split(",") if ext.strip()]

    @property
    def allowed_content_types_list(self) -> list[str]:
        """Parse ALLOWED_CONTENT_TYPES string into a list."""
        return [ct.strip().lower() for ct in self.ALLOWED_CONTENT_TYPES.split(",") if ct.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode (enables auto-reload)."""
        return self.ENVIRONMENT == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
