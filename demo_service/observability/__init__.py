"""
Observability Package

OpenTelemetry tracing for demo-service. Traces are exported to a local
collector via OTLP gRPC.
"""

from demo_service.observability.tracing import (
    Telemetry,
    TracingMiddleware,
    build_resource,
    extract_trace_context,
    start_telemetry,
    wait_for_collector,
)

__all__ = [
    "Telemetry",
    "TracingMiddleware",
    "build_resource",
    "extract_trace_context",
    "start_telemetry",
    "wait_for_collector",
]
