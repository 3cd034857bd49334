"""Unit tests for individual components in isolation.

Coverage:
    - agent/: Config validation, prompt assembly, generation error handling
    - client/: Corpus aggregation, attachments, controller turn lifecycle
    - parsing/: HTML and PDF text extraction

HTTP is served from memory with httpx.MockTransport; Agno classes are
patched. Leverages pytest-check for multiple assertions per test.
"""
