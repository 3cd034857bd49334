"""Chat client configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for the chat widget side of the pipeline.

    Attributes:
        api_base_url: Gateway URL the chat posts to.
        manifest_url: Locator of notes-manifest.json.
        timeout: Seconds to wait for the gateway and note downloads.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Tutor gateway URL",
    )
    manifest_url: str = Field(
        default_factory=lambda: os.getenv(
            "NOTES_MANIFEST_URL", "http://localhost:8000/site/notes-manifest.json"
        ),
        description="URL of the notes manifest",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_TIMEOUT", "120")),
        gt=0,
        description="HTTP timeout in seconds",
    )

    @field_validator("api_base_url", "manifest_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Expected an http(s) URL, got '{v}'")
        return v


def get_client_config() -> ClientConfig:
    """Create client configuration from environment."""
    return ClientConfig()
