"""Client configuration for the OpenRouter chat-completion API."""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-4o-mini"


class OpenRouterConfig(BaseModel):
    """Immutable settings for one OpenRouterClient.

    ``api_key`` is validated by the client constructor so that a missing key
    surfaces as ``CONFIG_ERROR`` rather than a pydantic ValidationError.
    """

    api_key: str = Field("", description="OpenRouter API key (sent as a Bearer token)")
    base_url: str = Field(DEFAULT_BASE_URL, min_length=1, description="API root, without trailing /chat/completions")
    default_model: str = Field(DEFAULT_MODEL, min_length=1, description="Model used when a request does not name one")
    default_temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature (0.0-2.0)")
    default_max_tokens: int = Field(4096, ge=1, description="Completion token limit")
    timeout_seconds: float = Field(60.0, gt=0.0, description="Deadline for a single HTTP attempt")
    max_retries: int = Field(3, ge=1, description="Total attempts including the first call")
    app_title: str = Field("10x-cards", description="Client-identifying X-Title header")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls) -> "OpenRouterConfig":
        """Build a config from OPENROUTER_* environment variables."""
        overrides: dict[str, str] = {}
        env_map = {
            "base_url": "OPENROUTER_BASE_URL",
            "default_model": "OPENROUTER_MODEL",
            "timeout_seconds": "OPENROUTER_TIMEOUT_SECONDS",
            "max_retries": "OPENROUTER_MAX_RETRIES",
        }
        for field_name, env_name in env_map.items():
            value = os.getenv(env_name)
            if value:
                overrides[field_name] = value

        return cls(api_key=os.getenv("OPENROUTER_API_KEY", ""), **overrides)
