"""FastAPI application factory and configuration.

Main application entry point with lifespan management, static notes
hosting and router registration.
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from notes_ai.api.gateway import router as gateway_router

logger = logging.getLogger(__name__)

SITE_MOUNT_PATH = "/site"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Python Notes AI gateway...")
    yield
    # Shutdown
    logger.info("Shutting down Python Notes AI gateway...")


def create_app(site_dir: str | Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The gateway owns its CORS contract, so no CORS middleware is installed.

    Args:
        site_dir: Directory with notes-manifest.json and the note pages,
                  served under /site. Defaults to NOTES_SITE_DIR when set.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Python Notes AI",
        description=(
            "Stateless tutoring gateway for the Python notes site. Combines a "
            "fixed tutor persona with the notes corpus, an optional uploaded "
            "file and the student's question, and returns the generated answer."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "python-notes-ai"}

    site_dir = site_dir or os.getenv("NOTES_SITE_DIR")
    if site_dir:
        application.mount(
            SITE_MOUNT_PATH,
            StaticFiles(directory=str(site_dir)),
            name="site",
        )
        logger.info(f"Serving notes site from {site_dir} at {SITE_MOUNT_PATH}")

    application.include_router(gateway_router)

    return application


app = create_app()
