"""Agent configuration with environment variable loading.

Pydantic-based configuration for the generation backend and prompt pipeline.
Supports Gemini (default) and OpenAI or any OpenAI-compatible API via a
custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

SUPPORTED_PROVIDERS = ("gemini", "openai")

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


def _api_key_from_env() -> str:
    return (
        os.getenv("LLM_API_KEY")
        or os.getenv("GEMINI_API_KEY")
        or os.getenv("OPENAI_API_KEY", "")
    )


class AgentConfig(BaseModel):
    """Configuration for the tutor's generation backend.

    Attributes:
        provider: Backend family, "gemini" or "openai".
        api_key: API key for model access.
        base_url: API base URL for OpenAI-compatible servers (None for default).
        model_name: Model identifier; defaults per provider when unset.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        template_path: Instruction template file, None for the bundled one.
        max_prompt_chars: Prompt size budget in characters, 0 disables it.
    """

    provider: str = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "gemini"),
        description="LLM provider: 'gemini' or 'openai'",
    )
    api_key: str = Field(
        default_factory=_api_key_from_env,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for provider default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", ""),
        description="Model to use",
    )
    temperature: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7")),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "2048")),
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    template_path: str | None = Field(
        default_factory=lambda: os.getenv("TUTOR_TEMPLATE_PATH") or None,
        description="Instruction template file (None for the bundled template)",
    )
    max_prompt_chars: int = Field(
        default_factory=lambda: int(os.getenv("MAX_PROMPT_CHARS", "400000")),
        ge=0,
        description="Prompt size budget in characters (0 disables truncation)",
    )

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Normalize provider name and reject unknown backends."""
        provider = v.strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported LLM_PROVIDER '{v}'. Use one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return provider

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY, GEMINI_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()

    @model_validator(mode="after")
    def default_model_name(self) -> "AgentConfig":
        """Fill in the provider's default model when none is configured."""
        if not self.model_name.strip():
            self.model_name = DEFAULT_MODELS[self.provider]
        return self


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set or the provider is unknown.
    """
    return AgentConfig()
