"""Configuration management for the SmartSDLC API."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # OpenAI configuration (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="Chat model for all use cases")
    OPENAI_TIMEOUT_SECONDS: float = Field(
        default=60.0, description="Timeout for a single model call"
    )

    # Environment
    SDLC_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")
    LOG_LEVEL: str | None = Field(
        default=None, description="Overrides the environment-based log level (e.g. WARNING)"
    )

    # Upload and input limits
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024, description="Max PDF upload size in bytes"
    )
    MAX_INPUT_CHARS: int = Field(
        default=200_000, description="Max characters of user text embedded in a prompt"
    )
    TEXT_PREVIEW_CHARS: int = Field(
        default=500, description="Characters of extracted text echoed back on upload"
    )

    # Chat
    CHAT_MAX_TOKENS: int = Field(default=500, description="Max tokens for chat replies")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
