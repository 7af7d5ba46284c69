"""Service constants for demo-service.

These are the defaults behind every Settings field. With no DEMO_*
environment variables set, the service runs on exactly these values.

Usage:
    from demo_service.core.constants import DEFAULT_RESOURCES_URL
"""

# =============================================================================
# Service Defaults
# =============================================================================

DEFAULT_SERVICE_NAME = "demoservice"
DEFAULT_PORT = 8070
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"


# =============================================================================
# Downstream
# =============================================================================

DEFAULT_RESOURCES_URL = "http://localhost:8080/api/v1/resources"
DEFAULT_DOWNSTREAM_TIMEOUT_SECONDS = 30.0


# =============================================================================
# Telemetry
# =============================================================================

DEFAULT_OTLP_ENDPOINT = "localhost:4317"
DEFAULT_OTLP_STARTUP_TIMEOUT_SECONDS = 5.0
SDK_LANGUAGE = "python"
TRACER_NAME = "demo-service"

# Match opentelemetry-sdk BatchSpanProcessor defaults
DEFAULT_MAX_EXPORT_BATCH_SIZE = 512
DEFAULT_SCHEDULE_DELAY_MILLIS = 5000


# =============================================================================
# HTTP
# =============================================================================

GREETING = b"Hello, World!"
GET_RESOURCES_SPAN = "getResources"
DEFAULT_GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS = 10.0
