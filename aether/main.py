"""Application entry point.

Serves the chat API and the NiceGUI page from one FastAPI app by default.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8080"))


def _check_access() -> None:
    if not os.getenv("ACCESS_PASSWORD"):
        logger.info("ACCESS_PASSWORD not set; the password gate is disabled")


def run_integrated() -> None:
    """Mount the NiceGUI page onto the API app and serve both on PORT."""
    import uvicorn
    from nicegui import ui

    from aether.api.app import create_app
    from aether.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title="Aether",
        favicon="✨",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "aether-chat-secret"),
    )

    logger.info(f"Chat UI and API on http://localhost:{PORT}/ (docs at /docs)")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API (PORT) and the UI (UI_PORT) as two processes.

    The UI process reaches the API through API_BASE_URL.
    """
    import subprocess

    env = {**os.environ, "API_BASE_URL": os.getenv("API_BASE_URL", f"http://localhost:{PORT}")}
    logger.info(f"Starting API on :{PORT} and UI on :{UI_PORT}")

    processes = [
        subprocess.Popen(
            [sys.executable, "-m", "uvicorn", "aether.api.app:app",
             "--host", HOST, "--port", str(PORT)],
            env=env,
        ),
        subprocess.Popen(
            [sys.executable, "-c", "from aether.ui.chat_page import main; main()"],
            env={**env, "UI_PORT": str(UI_PORT)},
        ),
    ]
    try:
        processes[0].wait()
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for process in processes:
            process.terminate()
            process.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the UI on different ports.
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting Aether in {mode} mode")
    _check_access()

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
