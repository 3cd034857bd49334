"""Pytest fixtures and shared test configuration.

Fixtures:
    - fake_generation: Recording stand-in for the generation backend
    - gateway_app: FastAPI app with the generation backend replaced
    - async_client: HTTPX client bound to gateway_app
    - notes_site: In-memory notes site served through httpx.MockTransport
"""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notes_ai.agent.config import AgentConfig
from notes_ai.agent.generation import GenerationError
from notes_ai.agent.prompt import load_template
from notes_ai.api import gateway
from notes_ai.api.app import create_app

MANIFEST_URL = "http://notes.test/notes-manifest.json"


class FakeGenerationClient:
    """Records prompts and returns a canned answer or raises."""

    def __init__(self, answer: str = "A list is an ordered, mutable sequence.") -> None:
        self.config = AgentConfig(api_key="test-key", max_prompt_chars=0)
        self.answer = answer
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise GenerationError("backend failed") from self.error
        return self.answer


@pytest.fixture
def fake_generation(monkeypatch: pytest.MonkeyPatch) -> FakeGenerationClient:
    """Replace the generation backend used by the gateway.

    Returns:
        The fake client; set ``.error`` to inject a backend fault.
    """
    fake = FakeGenerationClient()
    monkeypatch.setattr(gateway, "get_generation_client", lambda: fake)
    monkeypatch.setattr(gateway, "get_template", load_template)
    return fake


@pytest.fixture
def gateway_app(fake_generation: FakeGenerationClient) -> FastAPI:
    """Gateway app wired to the fake backend."""
    return create_app()


@pytest.fixture
async def async_client(gateway_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=gateway_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def note_page(title: str | None, body: str) -> str:
    heading = f"<h1>{title}</h1>" if title else ""
    return (
        "<html><head><title>ignored</title><style>h1 {color: red}</style></head>"
        f"<body><main>{heading}<p>{body}</p><script>console.log('x')</script></main></body></html>"
    )


@pytest.fixture
def notes_site() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient serving a fake notes site.

    Call with ``manifest`` (JSON-serializable or raw bytes) and ``pages``
    (path -> HTML, or an int status code to fail that page).
    """

    def factory(
        manifest: object,
        pages: dict[str, str | int] | None = None,
        requested: list[str] | None = None,
    ) -> httpx.AsyncClient:
        pages = pages or {}

        def handler(request: httpx.Request) -> httpx.Response:
            if requested is not None:
                requested.append(request.url.path)
            if request.url.path == "/notes-manifest.json":
                if isinstance(manifest, int):
                    return httpx.Response(manifest)
                if isinstance(manifest, bytes):
                    return httpx.Response(200, content=manifest)
                return httpx.Response(200, json=manifest)
            page = pages.get(request.url.path)
            if page is None:
                return httpx.Response(404)
            if isinstance(page, int):
                return httpx.Response(page)
            return httpx.Response(200, text=page)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
