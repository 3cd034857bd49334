"""Pydantic models shared by the gateway and the chat client.

Provides type safety, validation, and the wire format of the gateway.

Models:
    - ManifestEntry: A note listed in the notes manifest
    - Corpus / CorpusSection: Aggregated plain-text notes
    - Attachment: The file queued for the next chat turn
    - ChatTurn: A message in the visible transcript
    - AskRequest / AskResponse / ErrorResponse: Gateway request and responses
    - GenerationRequest / GenerationResult: Prompt inputs and call outcome
"""

from notes_ai.models.schemas import (
    AskRequest,
    AskResponse,
    Attachment,
    ChatTurn,
    Corpus,
    CorpusSection,
    ErrorResponse,
    GenerationRequest,
    GenerationResult,
    ManifestEntry,
    Role,
)

__all__ = [
    "AskRequest",
    "AskResponse",
    "Attachment",
    "ChatTurn",
    "Corpus",
    "CorpusSection",
    "ErrorResponse",
    "GenerationRequest",
    "GenerationResult",
    "ManifestEntry",
    "Role",
]
