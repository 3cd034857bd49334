"""HTTP client for the tutor gateway."""

import logging

import httpx

from notes_ai.models.schemas import GenerationResult

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "The AI assistant is having trouble. Please try again."


def _error_from_response(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return FALLBACK_ERROR
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return FALLBACK_ERROR


class GatewayClient:
    """Posts one chat turn to the gateway and normalizes the outcome.

    Never raises for transport or HTTP failures; they come back as an
    unsuccessful ``GenerationResult``.
    """

    def __init__(
        self,
        api_base_url: str,
        *,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = api_base_url
        self._timeout = timeout
        self._transport = transport

    async def ask(
        self,
        query: str,
        notes_context: str | None,
        file_context: str | None,
    ) -> GenerationResult:
        """Send a question with its context.

        Args:
            query: The student's question.
            notes_context: Corpus text.
            file_context: Attached file content, if any.

        Returns:
            Answer on 2xx, otherwise the server or transport error message.
        """
        payload = {
            "query": query,
            "notesContext": notes_context,
            "fileContext": file_context,
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self._url, json=payload)
            except httpx.RequestError as e:
                logger.error(f"Chat API Error: {e!r}")
                return GenerationResult(error=f"Connection failed: {e}")

        if not response.is_success:
            error = _error_from_response(response)
            logger.error(f"Chat API Error: HTTP {response.status_code}: {error}")
            return GenerationResult(error=error, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None
        answer = data.get("answer") if isinstance(data, dict) else None
        if not isinstance(answer, str):
            logger.error("Chat API Error: response has no answer")
            return GenerationResult(error=FALLBACK_ERROR, status_code=response.status_code)

        return GenerationResult(answer=answer, status_code=response.status_code)
