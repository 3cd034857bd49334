"""Chat session controller.

Runs one request/response cycle per submitted turn and owns the transcript
and the attachment. UI-agnostic: views subscribe through callbacks.

Turn lifecycle: IDLE -> PENDING -> RESOLVED | FAILED. Only one turn can be
pending; submits made meanwhile are ignored.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from notes_ai.client.attachment import AttachmentHolder, FileReadError
from notes_ai.client.gateway_client import FALLBACK_ERROR, GatewayClient
from notes_ai.models.schemas import Attachment, ChatTurn, Corpus, GenerationResult, Role

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I'm PyPro-AI, your Python learning assistant. "
    "Ask a question or attach a code file to get started."
)


class TurnState(str, Enum):
    """State of the most recent turn."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class ChatSessionController:
    """Orchestrates chat turns against the gateway.

    Args:
        corpus: Notes corpus loaded at startup, sent with every turn.
        gateway: Client for the tutor gateway.
        attachments: Attachment holder, a fresh one by default.
    """

    def __init__(
        self,
        corpus: Corpus,
        gateway: GatewayClient,
        attachments: AttachmentHolder | None = None,
    ) -> None:
        self._corpus = corpus
        self._gateway = gateway
        self._attachments = attachments or AttachmentHolder()
        self._transcript: list[ChatTurn] = []
        self.state = TurnState.IDLE
        self.on_change: Callable[[], None] | None = None
        self.on_pending: Callable[[bool], None] | None = None

    @property
    def transcript(self) -> tuple[ChatTurn, ...]:
        return tuple(self._transcript)

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def attachment(self) -> Attachment:
        return self._attachments.current()

    @property
    def is_pending(self) -> bool:
        return self.state is TurnState.PENDING

    def _notify(self, callback: Callable[..., None] | None, *args: object) -> None:
        """Run a view callback. A failing view never changes the turn state."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Chat view callback failed")

    def _append(self, role: Role, text: str, is_error: bool = False) -> ChatTurn:
        turn = ChatTurn(role=role, text=text, is_error=is_error)
        self._transcript.append(turn)
        self._notify(self.on_change)
        return turn

    def greeting(self) -> ChatTurn | None:
        """Add the welcome message when the transcript is still empty."""
        if self._transcript:
            return None
        return self._append(Role.ASSISTANT, GREETING)

    def report_error(self, text: str) -> ChatTurn:
        return self._append(Role.ASSISTANT, text, is_error=True)

    def attach_file(self, name: str, data: bytes) -> Attachment | None:
        """Read an uploaded file into the attachment holder.

        Read failures become an error message in the transcript.
        """
        try:
            return self._attachments.read_file(name, data)
        except FileReadError as e:
            logger.warning(f"Attachment rejected: {e}")
            self.report_error(str(e))
            return None

    def remove_attachment(self) -> None:
        self._attachments.clear()
        self._notify(self.on_change)

    async def submit(self, text: str) -> ChatTurn | None:
        """Send one student turn and record the reply.

        Args:
            text: Raw input text.

        Returns:
            The assistant turn, or None when the input was blank or another
            turn is still pending.
        """
        query = text.strip()
        if not query or self.is_pending:
            return None

        attachment = self._attachments.current()
        user_text = query
        if attachment.name:
            user_text += f"\n(Attached file: {attachment.name})"
        self._append(Role.USER, user_text)

        self.state = TurnState.PENDING
        self._notify(self.on_pending, True)

        # Cleared on dispatch, not on response.
        file_context = attachment.content
        self._attachments.clear()

        try:
            result = await self._gateway.ask(query, self._corpus.text, file_context)
        except Exception as e:
            logger.exception("Chat API Error")
            result = GenerationResult(error=str(e) or FALLBACK_ERROR)
        except asyncio.CancelledError:
            self.state = TurnState.FAILED
            self._notify(self.on_pending, False)
            raise

        self.state = TurnState.RESOLVED if result.ok else TurnState.FAILED
        self._notify(self.on_pending, False)

        if result.ok:
            return self._append(Role.ASSISTANT, result.answer)
        return self._append(Role.ASSISTANT, result.error or FALLBACK_ERROR, is_error=True)
