"""
Fundbridge FastAPI application.
Main entry point for the backend API.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.errors import register_exception_handlers
from backend.app.api.v1.router import router as api_v1_router
from backend.app.config import Settings, get_settings
from backend.app.logging_config import configure_logging, get_logger
from backend.app.services.scopes import ScopeResolver

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan context manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        "Starting Fundbridge",
        version=settings.VERSION,
        moov_api=settings.MOOV_API_BASE_URL,
        plaid_env=settings.PLAID_ENV,
        )
    missing = settings.missing_credentials()
    if missing:
        # Health probe stays up; provider calls will be rejected upstream
        logger.warning("Provider credentials not configured", missing=missing)

    yield
    # Shutdown
    logger.info("Shutting down Fundbridge")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (loaded from the environment when None)
        transport: httpx transport for every outbound provider call
            (httpx.MockTransport in tests; real connections when None)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, enable_file_logging=settings.LOG_TO_FILE)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
        )
    app.state.settings = settings
    app.state.http_transport = transport
    app.state.scope_resolver = ScopeResolver()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Mount API v1 router
    app.include_router(api_v1_router, prefix=settings.API_PREFIX)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn, over HTTPS when the local certificate pair exists."""
    settings: Settings = app.state.settings
    ssl_kwargs = {}
    if Path(settings.SSL_KEYFILE).is_file() and Path(settings.SSL_CERTFILE).is_file():
        ssl_kwargs = {"ssl_keyfile": settings.SSL_KEYFILE, "ssl_certfile": settings.SSL_CERTFILE}
        logger.info("Serving over HTTPS", port=settings.PORT)
    else:
        logger.info("Certificate files not found, serving over HTTP", port=settings.PORT)

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, **ssl_kwargs)


if __name__ == "__main__":
    run()
