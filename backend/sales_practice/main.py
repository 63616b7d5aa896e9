"""
Sales Practice API - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import register_exception_handlers, sessions_router
from .config import Settings, settings
from .core import SessionStore
from .core.logging_config import setup_logging
from .llm import CompletionGateway, CompletionOptions, OpenAICompatibleGateway
from .middleware import RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def create_session_store(config: Settings, gateway: Optional[CompletionGateway] = None) -> SessionStore:
    """Build the session store and its completion gateway from settings."""
    if gateway is None:
        gateway = OpenAICompatibleGateway(
            endpoint=config.llm_endpoint,
            model=config.llm_model,
            timeout=config.llm_timeout,
            api_key=config.llm_api_key,
        )
    return SessionStore(
        gateway,
        chat_options=CompletionOptions(
            temperature=config.chat_temperature, max_tokens=config.chat_max_tokens
        ),
        analysis_options=CompletionOptions(
            temperature=config.analysis_temperature, max_tokens=config.analysis_max_tokens
        ),
    )


def create_app(config: Settings = settings, gateway: Optional[CompletionGateway] = None) -> FastAPI:
    """
    Create the FastAPI application with its own session store.

    Args:
        config: Application settings
        gateway: Completion gateway override (tests pass a fake)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        setup_logging(config)
        logger.info(f"Starting {config.app_name} v{config.app_version}")
        logger.info(f"LLM endpoint: {config.llm_endpoint}")
        logger.info(f"Using model: {config.llm_model}")
        yield
        logger.info(
            f"Shutting down {config.app_name}, discarding {len(app.state.session_store)} sessions"
        )

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Practice sales conversations against a simulated customer and get coaching feedback",
        lifespan=lifespan,
    )
    app.state.session_store = create_session_store(config, gateway)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added after CORS so it wraps it
    if config.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(sessions_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "OK", "message": "Sales Practice API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sales_practice.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
