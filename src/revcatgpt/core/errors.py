"""
Global Error Handling

This module defines the typed failures raised by the context pipeline and the
application-wide exception handlers that turn them into HTTP responses.

Design Goals
------------
- Every pipeline failure is scoped to a single request
- Client-facing errors carry a human-readable ``message`` field
- Unexpected exceptions never leak internal details to clients
- Full stack traces are logged internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("revcatgpt.errors")


# ---------------------------------------------------------------------
# Pipeline Exceptions
# ---------------------------------------------------------------------

class ContextError(Exception):
    """
    Base class for failures while assembling a query context.

    Attributes
    ----------
    message : str
        Human-readable description returned to the client.

    status_code : int
        HTTP status the failure maps to.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ContextError):
    """Empty query or unparseable language tag."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ContextError):
    """The similarity search returned no documents."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(ContextError):
    """Embedding provider or search backend failed or returned nothing."""


class RenderError(ContextError):
    """A matched document could not be rendered through the template."""


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def context_error_handler(
    request: Request,
    exc: ContextError,
) -> JSONResponse:
    """
    Map a ``ContextError`` to its status code and a ``{"message": ...}`` body.
    """
    if exc.status_code >= 500:
        logger.error(
            "Context assembly failed: %s %s -> %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    else:
        logger.info(
            "Rejected request: %s %s -> %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.
    - Uses the same ``message`` payload shape as pipeline errors.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "message": "Internal server error",
    }

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=payload,
    )
