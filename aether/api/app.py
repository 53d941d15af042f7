"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aether.agent import chat_agent
from aether.agent.config import ConfigError
from aether.api.chat import router as chat_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the Gemini agent once, before the first chat request.

    A missing API key does not stop startup. It is logged here, and every
    chat request answers 500 until the key is set.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Aether chat API...")
    try:
        service = chat_agent.get_agent_service()
    except ConfigError as e:
        logger.warning(f"Chat requests will fail until configured: {e}")
    else:
        logger.info(f"Agent ready with model {service.model_name} (search grounding: {service.search})")
    yield
    logger.info("Shutting down Aether chat API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Aether Chat API",
        description=(
            "Streaming chat proxy for Gemini. Accepts text and image turns, "
            "relays the model's reply as server-sent events, and attaches "
            "web citations when the model searches."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "aether"}

    return application


app = create_app()
