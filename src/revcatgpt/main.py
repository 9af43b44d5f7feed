"""
RevcatGPT Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures exception handling, and provides a test-friendly application
factory plus the ``serve`` process entry point.

Design Goals
------------
- Deterministic startup
- Fail fast on broken localization or template configuration
- Centralized router registration
- Typed pipeline errors mapped to ``{"message": ...}`` responses
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from .config import settings
from .core.errors import ContextError, context_error_handler, unhandled_exception_handler
from .core.logging_setup import configure_logging, resolve_level
from .api import (
    context_routes,
    health_routes,
)
from .api.dependencies import get_language_detector, get_renderer


logger = logging.getLogger("revcatgpt.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="RevcatGPT API",
        description="Custom GPT Metadata for Revcat",
        version="1.0.0",
        root_path=settings.subpath,
        docs_url="/swagger",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        license_info={
            "name": "Apache 2.0",
            "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
        },
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(ContextError, context_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(context_routes.router)

    # --------------------------------------------------------------
    # Startup Validation Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_validation() -> None:
        """
        Build the localization bundle, language detector and template now,
        so configuration errors surface before the first request.
        """
        configure_logging(settings.log_level, settings.log_file)
        logger.info("Starting revcatgpt at %s", settings.external_addr)

        detector = get_language_detector()
        get_renderer()
        logger.info("Supported languages: %s", ", ".join(detector.languages))

        if not settings.openai_api_key.get_secret_value():
            logger.warning("No embedding API key configured")

    @app.on_event("shutdown")
    async def _shutdown_cleanup() -> None:
        logger.info("Shutting down revcatgpt")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()


def serve() -> None:
    """Run the service with uvicorn on ``settings.local_addr``."""
    host, sep, port = settings.local_addr.rpartition(":")
    if not sep:
        host, port = settings.local_addr, "81"
    scheme = "https" if settings.tls_enabled else "http"
    print(f"starting server at {scheme}://{settings.local_addr}")

    uvicorn.run(
        app,
        host=host or "0.0.0.0",
        port=int(port),
        ssl_certfile=settings.tls_cert if settings.tls_enabled else None,
        ssl_keyfile=settings.tls_key if settings.tls_enabled else None,
        log_level=logging.getLevelName(resolve_level(settings.log_level)).lower(),
    )
