"""Tutor gateway endpoint.

A single method-routed endpoint at ``/`` that validates the request, handles
the CORS preflight, runs the prompt pipeline and normalizes every outcome into
an HTTP response. Internal failure details are logged, never returned.
"""

import json
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from notes_ai.agent.generation import (
    answer_query,
    get_generation_client,
    get_template,
)
from notes_ai.agent.prompt import PromptBudget
from notes_ai.models.schemas import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    GenerationRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gateway"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
ALLOW_HEADER = {"Allow": "POST, OPTIONS"}
PREFLIGHT_HEADERS = ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers")

QUERY_REQUIRED = "Query is a required field."
INTERNAL_ERROR = "An internal server error occurred. Please try again later."
METHOD_NOT_ALLOWED = "Method Not Allowed. Please use POST."

AnswerFn = Callable[[AskRequest], Awaitable[str]]


async def generate_answer(ask: AskRequest) -> str:
    """Run the prompt pipeline for a validated request.

    Args:
        ask: Validated gateway request.

    Returns:
        Generated answer text.
    """
    client = get_generation_client()
    request = GenerationRequest(
        instruction_template=get_template(),
        notes_context=ask.notes_context,
        file_context=ask.file_context,
        query=ask.query,
    )
    budget = PromptBudget(max_chars=client.config.max_prompt_chars)
    return await answer_query(request, client, budget)


def _json(model: AskResponse | ErrorResponse, status_code: int) -> JSONResponse:
    return JSONResponse(
        content=model.model_dump(),
        status_code=status_code,
        headers=CORS_HEADERS,
    )


def handle_options(request: Request) -> Response:
    """Handle the CORS preflight.

    A preflight carrying all three negotiation headers gets the CORS grant.
    Anything else only learns which methods exist.
    """
    if all(request.headers.get(name) is not None for name in PREFLIGHT_HEADERS):
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
    return Response(status_code=status.HTTP_200_OK, headers=ALLOW_HEADER)


async def handle_post(request: Request, answer_fn: AnswerFn) -> Response:
    """Validate the body, run the pipeline and wrap the result.

    Returns:
        200 with the answer, 400 for a missing query, 500 on any failure.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.exception("Request body is not valid JSON")
        return _json(ErrorResponse(error=INTERNAL_ERROR), status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        ask = AskRequest.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected request without a valid query: {e.error_count()} error(s)")
        return _json(ErrorResponse(error=QUERY_REQUIRED), status.HTTP_400_BAD_REQUEST)

    try:
        answer = await answer_fn(ask)
    except Exception:
        logger.exception("An error occurred while generating the answer")
        return _json(ErrorResponse(error=INTERNAL_ERROR), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _json(AskResponse(answer=answer), status.HTTP_200_OK)


async def handle(request: Request) -> Response:
    """Gateway entry point, routed on the HTTP method.

    OPTIONS answers the preflight, POST runs the tutor, every other method
    (including ones unknown to HTTP routing) gets a plain-text 405 without
    CORS headers.
    """
    if request.method == "OPTIONS":
        return handle_options(request)

    if request.method != "POST":
        return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=status.HTTP_405_METHOD_NOT_ALLOWED)

    return await handle_post(request, generate_answer)


# No method list: every method on / reaches handle.
router.add_route("/", handle, include_in_schema=False)
