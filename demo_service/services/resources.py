"""Downstream resources client for demo-service.

Fetches the resources document from the downstream service inside a
``getResources`` span. The HTTP client passed in is expected to use the
OpenTelemetry httpx transport (see build_http_client), which injects the
traceparent header for the current span.

Failure paths:
- request cannot be built  -> ResourceRequestError, recorded on the span
- transport failure        -> ResourceFetchError, recorded on the span
- body is not a JSON object -> ResourceDecodeError, NOT recorded on the span
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from opentelemetry.instrumentation.httpx import AsyncOpenTelemetryTransport
from opentelemetry.trace import Status, StatusCode, Tracer, TracerProvider

from demo_service.core.constants import GET_RESOURCES_SPAN
from demo_service.core.exceptions import (
    ResourceDecodeError,
    ResourceFetchError,
    ResourceRequestError,
)
from demo_service.core.logging import get_logger


logger = get_logger(__name__)


def build_http_client(
    tracer_provider: TracerProvider | None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the outbound client with a tracing transport.

    Args:
        tracer_provider: Provider for the CLIENT spans.
        timeout: Connect/read/write/pool timeout in seconds.
        transport: Underlying transport. Defaults to httpx's network transport.

    Returns:
        AsyncClient whose requests carry W3C trace context headers.
    """
    traced = AsyncOpenTelemetryTransport(
        transport or httpx.AsyncHTTPTransport(),
        tracer_provider=tracer_provider,
    )
    return httpx.AsyncClient(transport=traced, timeout=httpx.Timeout(timeout))


_decoder = json.JSONDecoder()


def _decode_object(raw: bytes) -> dict[str, Any]:
    """Decode the first JSON value of the body as an object.

    Anything after the first value is left unread. A literal null decodes
    to an empty mapping.
    """
    payload, _ = _decoder.raw_decode(raw.decode("utf-8").lstrip())
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        msg = f"expected JSON object, got {type(payload).__name__}"
        raise ValueError(msg)
    return payload


async def get_resources(
    client: httpx.AsyncClient,
    tracer: Tracer,
    url: str,
) -> dict[str, Any]:
    """GET the downstream resources document.

    Args:
        client: Instrumented HTTP client.
        tracer: Tracer the getResources span is started on.
        url: Resources endpoint.

    Returns:
        The decoded JSON object.

    Raises:
        ResourceRequestError: Request could not be constructed.
        ResourceFetchError: Request failed in transport.
        ResourceDecodeError: Response body is not a JSON object.
    """
    # Span status is set explicitly per failure path below
    with tracer.start_as_current_span(
        GET_RESOURCES_SPAN,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        logger.info("Getting resources", url=url)

        try:
            request = client.build_request("GET", url)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            logger.error("Failed to create request", url=url, error=str(e))
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, "Failed to create request"))
            raise ResourceRequestError(
                f"Failed to create request: {e}", url=url
            ) from e

        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            logger.error("Failed to get resources", url=url, error=str(e))
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, "Failed to get resources"))
            raise ResourceFetchError(f"Failed to get resources: {e}", url=url) from e

        status = f"{response.status_code} {response.reason_phrase}"
        try:
            body = _decode_object(await response.aread())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Failed to decode response", url=url, status=status, error=str(e)
            )
            raise ResourceDecodeError(
                f"Failed to decode response: {e}",
                url=url,
                status_code=response.status_code,
            ) from e
        finally:
            await response.aclose()

        logger.info("Response", status=status, body=body)
        return body
