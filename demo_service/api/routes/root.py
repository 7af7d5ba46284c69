"""Root route for demo-service.

Every path and every method is served by the same handler, so no method
filter applies. Each request fetches the downstream resources document
and, if that succeeds, answers with a fixed greeting. Downstream failures
are logged but never surfaced to the caller: the response is a 200 with
an empty body.
"""

from __future__ import annotations

import httpx
from fastapi import Request, Response
from starlette.routing import BaseRoute, Route

from demo_service.core.config import Settings
from demo_service.core.constants import GREETING
from demo_service.core.exceptions import DownstreamError
from demo_service.core.logging import get_logger
from demo_service.observability.tracing import Telemetry
from demo_service.services.resources import get_resources


logger = get_logger(__name__)

# Matches "/" and every sub-path
CATCH_ALL_PATH = "/{path:path}"


# =============================================================================
# Helper Functions
# =============================================================================


def _get_telemetry(request: Request) -> Telemetry:
    return request.app.state.telemetry


def _get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


# =============================================================================
# Endpoints
# =============================================================================


async def root(request: Request) -> Response:
    """Fetch resources and greet.

    Returns:
        200 with b"Hello, World!" on success, 200 with no body otherwise.
    """
    logger.info("Received request for /", method=request.method, path=request.url.path)

    settings = _get_settings(request)
    try:
        await get_resources(
            _get_http_client(request),
            _get_telemetry(request).tracer,
            settings.resources_url,
        )
    except DownstreamError as e:
        logger.error(
            "Failed to get resources",
            error_code=e.error_code,
            error=e.message,
        )
        return Response()

    return Response(content=GREETING)


# methods=None: the route matches any request method, extension methods included
routes: list[BaseRoute] = [Route(CATCH_ALL_PATH, root, methods=None, name="root")]
