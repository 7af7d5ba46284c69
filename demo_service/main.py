"""FastAPI application entrypoint for demo-service.

Patterns applied:
- asynccontextmanager lifespan (modern FastAPI pattern, not deprecated @app.on_event)
- create_app() factory; collaborators live on app.state
- Telemetry started in lifespan startup; a failure aborts startup
- Telemetry flushed last in lifespan shutdown, after uvicorn has drained
- Docs/OpenAPI routes disabled: every path is served by the root handler
"""

import asyncio
import math
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from opentelemetry.sdk.trace.export import SpanExporter

from demo_service import __version__
from demo_service.api.error_handlers import register_exception_handlers
from demo_service.api.routes.root import routes as root_routes
from demo_service.core.config import Settings, get_settings
from demo_service.core.logging import configure_logging, get_logger
from demo_service.observability.tracing import Telemetry, TracingMiddleware
from demo_service.services.resources import build_http_client


# =============================================================================
# Application Metadata
# =============================================================================
APP_NAME = "demo-service"
APP_DESCRIPTION = "Traced demo service: one downstream call, one greeting"
APP_VERSION = __version__


logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events.

    Startup order: logging, telemetry, outbound client.
    Shutdown order: outbound client, telemetry (flush + exporter close).

    Raises:
        TelemetryInitError: Tracing pipeline could not be built.
    """
    # =========================================================================
    # STARTUP
    # =========================================================================
    settings: Settings = app.state.settings

    # Module loggers auto-configure at import; apply the configured level
    configure_logging(level=settings.log_level, force=True)

    logger.info(
        "Application starting",
        service=APP_NAME,
        version=APP_VERSION,
        environment=settings.environment,
        port=settings.port,
    )

    telemetry: Telemetry = app.state.telemetry
    # The collector check blocks for up to otlp_startup_timeout_seconds
    await asyncio.to_thread(telemetry.start)

    app.state.http_client = build_http_client(
        telemetry.tracer_provider,
        settings.downstream_timeout_seconds,
        transport=app.state.downstream_transport,
    )
    app.state.initialized = True

    yield

    # =========================================================================
    # SHUTDOWN
    # =========================================================================
    logger.info("Application shutting down", service=APP_NAME)
    await app.state.http_client.aclose()
    telemetry.shutdown()
    app.state.initialized = False


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    settings: Settings | None = None,
    span_exporter: SpanExporter | None = None,
    downstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to get_settings().
        span_exporter: Exporter replacing OTLP (tests).
        downstream_transport: Transport replacing the network for outbound
            calls (tests). It is still wrapped by the tracing transport.

    Returns:
        Configured FastAPI application; telemetry starts with its lifespan.
    """
    settings = settings or get_settings()
    telemetry = Telemetry(settings, span_exporter=span_exporter)

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.telemetry = telemetry
    application.state.downstream_transport = downstream_transport
    application.state.initialized = False

    application.add_middleware(TracingMiddleware, telemetry=telemetry)
    application.router.routes.extend(root_routes)
    register_exception_handlers(application)

    return application


app = create_app()


# =============================================================================
# Server Entry Point
# =============================================================================
def run() -> None:
    """Serve the app with uvicorn until SIGINT/SIGTERM.

    On a signal uvicorn stops accepting connections, drains in-flight
    requests, then runs the lifespan shutdown. A startup failure (for
    example an unreachable collector) exits the process before serving.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, force=True)
    logger.info("Starting server", address=f"{settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        timeout_graceful_shutdown=math.ceil(settings.graceful_shutdown_timeout_seconds),
        log_level=settings.log_level.lower(),
    )
