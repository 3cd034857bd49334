"""End-to-end chat workflow tests.

Notes site (MockTransport) -> corpus -> controller -> GatewayClient ->
real gateway app (ASGITransport) -> recording generation fake.
"""

from collections.abc import Callable

import httpx
import pytest_check as check
from fastapi import FastAPI

from notes_ai.api.gateway import INTERNAL_ERROR
from notes_ai.client.controller import ChatSessionController, TurnState
from notes_ai.client.corpus import CorpusCache
from notes_ai.client.gateway_client import GatewayClient
from tests.conftest import MANIFEST_URL, FakeGenerationClient, note_page

MANIFEST = [
    {"title": "Lists", "description": "", "file": "notes/lists.html", "available": True},
    {"title": "Async", "description": "", "file": "notes/async.html", "available": False},
]
PAGES: dict[str, str | int] = {
    "/notes/lists.html": note_page("Lists", "A list is an ordered collection."),
}


async def make_controller(
    gateway_app: FastAPI, notes_site: Callable[..., httpx.AsyncClient], manifest: object
) -> ChatSessionController:
    async with notes_site(manifest, PAGES) as site:
        corpus = await CorpusCache(MANIFEST_URL, client=site).get()
    gateway = GatewayClient("http://test/", transport=httpx.ASGITransport(app=gateway_app))
    return ChatSessionController(corpus=corpus, gateway=gateway)


class TestChatFlow:
    """Full request/response cycles."""

    async def test_question_with_notes_and_attachment(
        self,
        gateway_app: FastAPI,
        notes_site: Callable[..., httpx.AsyncClient],
        fake_generation: FakeGenerationClient,
    ) -> None:
        controller = await make_controller(gateway_app, notes_site, MANIFEST)
        controller.attach_file("lists.py", b"xs = [1, 2, 3]")

        reply = await controller.submit("What is a list?")

        check.equal(controller.state, TurnState.RESOLVED)
        check.equal(reply.text, fake_generation.answer)
        check.is_true(controller.attachment.is_empty)

        prompt = fake_generation.prompts[0]
        check.is_in("--- START OF NOTE: Lists ---", prompt)
        check.is_in("A list is an ordered collection.", prompt)
        check.is_in("xs = [1, 2, 3]", prompt)
        check.is_in("What is a list?", prompt)
        check.is_not_in("START OF NOTE: Async", prompt)

    async def test_backend_failure_shows_generic_error(
        self,
        gateway_app: FastAPI,
        notes_site: Callable[..., httpx.AsyncClient],
        fake_generation: FakeGenerationClient,
    ) -> None:
        controller = await make_controller(gateway_app, notes_site, MANIFEST)
        fake_generation.error = RuntimeError("quota exceeded")

        reply = await controller.submit("What is a list?")

        check.equal(controller.state, TurnState.FAILED)
        check.is_true(reply.is_error)
        check.equal(reply.text, INTERNAL_ERROR)

    async def test_missing_manifest_degrades_to_placeholder(
        self,
        gateway_app: FastAPI,
        notes_site: Callable[..., httpx.AsyncClient],
        fake_generation: FakeGenerationClient,
    ) -> None:
        """Without notes the tutor still answers, with the error placeholder as context."""
        controller = await make_controller(gateway_app, notes_site, 404)

        reply = await controller.submit("What is a list?")

        check.is_false(reply.is_error)
        check.is_in("Error: Could not load the notes content.", fake_generation.prompts[0])
