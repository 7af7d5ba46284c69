"""Error handlers for FastAPI exception handling.

Downstream failures on the root handler are caught inside the route and
answered with an empty 200. Anything else that escapes a route is turned
into a JSON 500 here.

Error Response Schema:
{
    "error": {
        "code": "DEMO_SERVICE_ERROR",
        "message": "Internal server error: ...",
        "type": "internal",
        "provider": "demo-service",
        "details": null
    }
}
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from demo_service.core.exceptions import ErrorCode
from demo_service.core.logging import get_logger


logger = get_logger(__name__)

PROVIDER = "demo-service"


# =============================================================================
# Error Response Models (Pydantic)
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        type: Error type.
        provider: Service that generated the error.
        details: Additional error-specific information.
    """

    code: str
    message: str
    type: str
    provider: str = PROVIDER
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


# =============================================================================
# Exception Handlers
# =============================================================================


async def generic_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions with a 500."""
    logger.error("Unhandled exception", error=str(exc), exc_type=type(exc).__name__)

    response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.DEMO_SERVICE_ERROR.value,
            message=f"Internal server error: {exc!s}",
            type="internal",
            provider=PROVIDER,
            details=None,
        )
    )

    return JSONResponse(
        status_code=500,
        content=response.model_dump(),
    )


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(Exception, generic_error_handler)
