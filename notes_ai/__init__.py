"""Python Notes AI - context-aware tutor for a Python notes site.

Combines FastAPI for the stateless gateway, Agno for model access,
NiceGUI for the chat widget, and Pydantic for data validation.

Components:
    - api: Gateway endpoint with CORS contract and error normalization
    - agent: Prompt assembly and generation backend
    - client: Notes corpus, attachment and chat turn orchestration
    - parsing: HTML and PDF text extraction
    - ui: Web interface for the tutor chat
    - models: Shared schemas
"""

__version__ = "0.1.0"
