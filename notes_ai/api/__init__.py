"""FastAPI gateway for the tutor.

Stateless HTTP entry point with a hand-written CORS contract and
normalized error responses.

Endpoints:
    - OPTIONS /: CORS preflight
    - POST /: Tutor answer for a question plus notes and file context
    - GET /health: Service health status
    - /site/*: Notes pages and manifest (when NOTES_SITE_DIR is set)
"""

from notes_ai.api.app import app, create_app

__all__ = ["app", "create_app"]
