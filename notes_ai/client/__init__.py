"""Chat widget side of the tutor pipeline.

Responsibilities:
    - Notes corpus aggregation from the site manifest (load once per process)
    - Single-file attachment handling
    - Chat turn orchestration against the gateway

Everything here is UI-agnostic; the NiceGUI page only renders state.
"""

from notes_ai.client.attachment import AttachmentHolder, FileReadError
from notes_ai.client.config import ClientConfig, get_client_config
from notes_ai.client.controller import ChatSessionController, TurnState
from notes_ai.client.corpus import (
    CorpusCache,
    ManifestUnavailable,
    load_corpus,
    load_corpus_or_placeholder,
    load_manifest,
)
from notes_ai.client.gateway_client import GatewayClient

__all__ = [
    "AttachmentHolder",
    "ChatSessionController",
    "ClientConfig",
    "CorpusCache",
    "FileReadError",
    "GatewayClient",
    "ManifestUnavailable",
    "TurnState",
    "get_client_config",
    "load_corpus",
    "load_corpus_or_placeholder",
    "load_manifest",
]
