"""Configuration Management."""

import os
from enum import Enum
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ProviderKind(str, Enum):
    """Selectable text-completion backends."""

    GEMINI = "gemini"
    OPENAI = "openai"  # Any OpenAI-compatible chat completions endpoint


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UIFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3001, gt=0, description="HTTP port")
    cors_origins: str = Field(default="*", description="Comma-separated allowed origins")

    # Provider selection
    provider: ProviderKind = Field(default=ProviderKind.GEMINI, description="Completion provider")

    # Gemini
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_AI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        description="Gemini API key",
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini model name")

    # OpenAI-compatible
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="Chat completions base URL")
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""), description="OpenAI-compatible API key"
    )
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI-compatible model name")
    request_timeout: float = Field(default=60.0, gt=0, description="Provider request timeout (seconds)")

    # Generation
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    max_output_tokens: int = Field(default=8192, gt=0, description="Max output tokens")

    # Retry
    max_attempts: int = Field(default=3, ge=1, description="Invoker attempt budget")
    backoff_base_seconds: float = Field(default=5.0, ge=0.0, description="Backoff multiplier")

    # Input / diagnostics
    max_prompt_length: int = Field(default=5000, gt=0, description="Sanitizer truncation length")
    excerpt_length: int = Field(default=500, gt=0, description="Raw output excerpt in parse errors")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
