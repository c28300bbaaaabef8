"""
Provider configuration with strong typing.
Built once from Settings when the provider is loaded.
"""

from pydantic import BaseModel, ConfigDict, Field

from uiforge.core.config import Settings


class CompletionOptions(BaseModel):
    """Per-call generation parameters."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192, ge=1)


class GeminiConfig(BaseModel):
    """Type-safe Gemini API configuration."""

    model_config = ConfigDict(frozen=True)  # Immutable for thread safety

    model_name: str = Field(default="gemini-2.0-flash")
    api_key: str = Field(default="")
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1, le=100)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiConfig":
        return cls(model_name=settings.gemini_model, api_key=settings.gemini_api_key)


class OpenAICompatConfig(BaseModel):
    """Configuration for an OpenAI-compatible chat completions endpoint."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default="https://api.openai.com/v1")
    api_key: str = Field(default="")
    model_name: str = Field(default="gpt-4o-mini")
    timeout: float = Field(default=60.0, gt=0)

    # Circuit breaker
    fail_max: int = Field(default=5, ge=1)
    reset_timeout: int = Field(default=30, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAICompatConfig":
        return cls(
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            timeout=settings.request_timeout,
        )
