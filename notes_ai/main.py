"""Main application entry point.

Runs the FastAPI gateway (port 8000) with the NiceGUI tutor page mounted
at /chat. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the gateway with NiceGUI mounted on the same server.

    FastAPI handles the gateway at /, NiceGUI serves the chat at /chat.
    """
    import uvicorn
    from nicegui import ui

    from notes_ai.api.app import create_app
    from notes_ai.client.config import get_client_config
    from notes_ai.client.corpus import CorpusCache
    from notes_ai.ui.chat_page import register_chat_page

    app = create_app()
    config = get_client_config()
    register_chat_page(CorpusCache(config.manifest_url), config)

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="PyPro-AI",
        favicon="🐍",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "python-notes-ai-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"Gateway available at http://localhost:{port}/")
    logger.info(f"Chat UI available at http://localhost:{port}/chat")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the gateway and the chat UI as two processes.

    The gateway listens on PORT (default 8000) and the chat UI on UI_PORT
    (default 8080). Unless API_BASE_URL or NOTES_MANIFEST_URL are set, the
    UI process is pointed at the gateway just started.
    """
    import subprocess
    import time

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    ui_port = int(os.getenv("UI_PORT", "8080"))
    gateway_url = f"http://localhost:{port}"

    ui_env = dict(os.environ)
    ui_env.setdefault("API_BASE_URL", gateway_url)
    ui_env.setdefault("NOTES_MANIFEST_URL", f"{gateway_url}/site/notes-manifest.json")
    ui_env["UI_PORT"] = str(ui_port)

    logger.info(f"Starting gateway on {gateway_url}/")
    logger.info(f"Starting chat UI on http://localhost:{ui_port}/chat")
    logger.info(f"Chat UI sends questions to {ui_env['API_BASE_URL']}")

    processes = {
        "gateway": subprocess.Popen(
            [
                sys.executable,
                "-m",
                "uvicorn",
                "notes_ai.api.app:app",
                "--host",
                host,
                "--port",
                str(port),
                "--log-level",
                os.getenv("LOG_LEVEL", "info").lower(),
            ]
        ),
        "chat UI": subprocess.Popen([sys.executable, "-m", "notes_ai.ui.chat_page"], env=ui_env),
    }

    try:
        while True:
            exited = {name: p.returncode for name, p in processes.items() if p.poll() is not None}
            if exited:
                for name, code in exited.items():
                    logger.error(f"{name} process exited with code {code}")
                break
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in processes.values():
            if proc.poll() is None:
                proc.terminate()
        for proc in processes.values():
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the gateway and the chat UI on different ports.
    Default is integrated mode (both on PORT, 8000 unless set).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Python Notes AI in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
