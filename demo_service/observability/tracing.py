"""
OpenTelemetry Tracing Module

Builds the tracing pipeline for demo-service: a fixed trace resource, an
OTLP gRPC exporter, a batching span processor and an always-on sampler.
The resulting provider is owned by a Telemetry handle that is created once
by the application factory and handed to everything that starts spans.

Inbound W3C trace context is extracted by TracingMiddleware; outbound
propagation headers are injected by the instrumented httpx transport.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import grpc
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagate import extract, set_global_textmap
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    TELEMETRY_SDK_LANGUAGE,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace import SpanKind, Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from demo_service import __version__
from demo_service.core.config import Settings
from demo_service.core.constants import (
    DEFAULT_MAX_EXPORT_BATCH_SIZE,
    DEFAULT_SCHEDULE_DELAY_MILLIS,
    SDK_LANGUAGE,
    TRACER_NAME,
)
from demo_service.core.exceptions import TelemetryInitError
from demo_service.core.logging import get_logger


logger = get_logger(__name__)


def build_resource(settings: Settings) -> Resource:
    """Create the trace resource descriptor attached to every span."""
    return Resource.create(
        {
            SERVICE_NAME: settings.service_name,
            TELEMETRY_SDK_LANGUAGE: SDK_LANGUAGE,
            SERVICE_VERSION: __version__,
            DEPLOYMENT_ENVIRONMENT: settings.environment,
        }
    )


def wait_for_collector(endpoint: str, insecure: bool, timeout: float) -> None:
    """Block until a gRPC channel to the collector is ready.

    The OTLP exporter connects lazily, so an unreachable collector would
    otherwise only surface as failed exports long after startup.

    Raises:
        TelemetryInitError: If the channel is not ready within timeout.
    """
    if insecure:
        channel = grpc.insecure_channel(endpoint)
    else:
        channel = grpc.secure_channel(endpoint, grpc.ssl_channel_credentials())

    try:
        grpc.channel_ready_future(channel).result(timeout=timeout)
    except grpc.FutureTimeoutError as e:
        msg = f"OTLP collector at {endpoint} not reachable within {timeout}s"
        raise TelemetryInitError(msg, endpoint=endpoint) from e
    finally:
        channel.close()


class Telemetry:
    """Process tracing pipeline handle.

    Lifecycle: construct once, start() at startup, shutdown() at teardown.
    Only this handle may shut the exporter down.

    Attributes:
        settings: Settings the pipeline is built from.
        tracer_provider: Installed provider, None before start/after shutdown.
        span_exporter: Exporter behind the batch processor.
        resource: Resource descriptor attached to every span.
    """

    def __init__(
        self,
        settings: Settings,
        span_exporter: Optional[SpanExporter] = None,
    ) -> None:
        """
        Args:
            settings: Service settings.
            span_exporter: Exporter to use instead of OTLP (tests, debugging).
                Skips the collector reachability check.
        """
        self.settings = settings
        self._injected_exporter = span_exporter
        self.tracer_provider: Optional[TracerProvider] = None
        self.span_exporter: Optional[SpanExporter] = None
        self.resource: Optional[Resource] = None

    @property
    def started(self) -> bool:
        return self.tracer_provider is not None

    @property
    def tracer(self) -> Tracer:
        """Tracer from this handle's provider (no-op until started)."""
        if self.tracer_provider is None:
            return trace.NoOpTracer()
        return self.tracer_provider.get_tracer(TRACER_NAME, __version__)

    def start(self) -> Telemetry:
        """Build and install the tracing pipeline.

        Returns:
            self, for chaining.

        Raises:
            TelemetryInitError: If the resource or exporter cannot be built,
                or the collector is unreachable with the startup check on.
        """
        if self.started:
            return self

        try:
            resource = build_resource(self.settings)
        except Exception as e:
            raise TelemetryInitError(f"Failed to build trace resource: {e}") from e

        exporter = self._injected_exporter
        if exporter is None:
            exporter = self._build_exporter()

        provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
        provider.add_span_processor(
            BatchSpanProcessor(
                exporter,
                max_export_batch_size=DEFAULT_MAX_EXPORT_BATCH_SIZE,
                schedule_delay_millis=DEFAULT_SCHEDULE_DELAY_MILLIS,
            )
        )

        trace.set_tracer_provider(provider)
        set_global_textmap(TraceContextTextMapPropagator())

        self.resource = resource
        self.span_exporter = exporter
        self.tracer_provider = provider

        logger.info(
            "Telemetry started",
            service=self.settings.service_name,
            exporter=type(exporter).__name__,
            endpoint=self.settings.otlp_endpoint,
        )
        return self

    def _build_exporter(self) -> SpanExporter:
        endpoint = self.settings.otlp_endpoint
        if self.settings.otlp_startup_check:
            wait_for_collector(
                endpoint,
                self.settings.otlp_insecure,
                self.settings.otlp_startup_timeout_seconds,
            )
        try:
            return OTLPSpanExporter(
                endpoint=endpoint,
                insecure=self.settings.otlp_insecure,
            )
        except Exception as e:
            msg = f"Failed to create OTLP exporter for {endpoint}: {e}"
            raise TelemetryInitError(msg, endpoint=endpoint) from e

    def shutdown(self) -> None:
        """Flush pending spans and close the exporter.

        No-op if start() never succeeded or shutdown already ran.
        """
        provider = self.tracer_provider
        if provider is None:
            return

        self.tracer_provider = None
        provider.shutdown()
        self.span_exporter = None
        logger.info("Telemetry shut down", service=self.settings.service_name)


def start_telemetry(
    settings: Settings,
    span_exporter: Optional[SpanExporter] = None,
) -> Telemetry:
    """Create and start a Telemetry handle."""
    return Telemetry(settings, span_exporter=span_exporter).start()


def extract_trace_context(headers: dict[str, Any]) -> Context:
    """Extract trace context from incoming headers."""
    return extract(headers)


def _headers_to_dict(headers: list[tuple[bytes, bytes]]) -> dict[str, str]:
    """Convert ASGI headers to dict for propagation."""
    return {
        key.decode("latin-1").lower(): value.decode("latin-1")
        for key, value in headers
    }


class TracingMiddleware:
    """
    ASGI middleware for OpenTelemetry tracing.

    Opens a SERVER span per HTTP request, parented on the caller's
    traceparent header when present. Spans come from the Telemetry handle,
    so requests served before start() are not traced.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        telemetry: Telemetry,
    ) -> None:
        self.app = app
        self.telemetry = telemetry

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")

        headers = scope.get("headers", [])
        parent_context = extract_trace_context(_headers_to_dict(headers))

        span_name = f"{method} {path}"
        status_code = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        with self.telemetry.tracer.start_as_current_span(
            span_name,
            context=parent_context,
            kind=SpanKind.SERVER,
        ) as span:
            span.set_attribute("http.method", method)
            span.set_attribute("http.route", path)

            try:
                await self.app(scope, receive, send_wrapper)
                span.set_attribute("http.status_code", status_code)
            except Exception as e:
                span.set_attribute("http.status_code", 500)
                span.record_exception(e)
                raise
