"""Integration tests for components working together as a system.

Coverage:
    - Gateway endpoint over ASGITransport (CORS, validation, error mapping)
    - Full chat workflow from notes manifest to rendered answer

Only the generation backend is faked, so no API key is required.
"""
