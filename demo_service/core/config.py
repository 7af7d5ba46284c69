"""Core configuration module for demo-service.

Loads settings from DEMO_* prefixed environment variables using Pydantic Settings.
Every default matches the service's fixed constants, so an empty environment
reproduces the stock behaviour.

Patterns applied:
- pydantic-settings BaseSettings (Pydantic v2 split)
- env_prefix = "DEMO_" for namespace isolation
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from demo_service.core.constants import (
    DEFAULT_DOWNSTREAM_TIMEOUT_SECONDS,
    DEFAULT_ENVIRONMENT,
    DEFAULT_GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OTLP_ENDPOINT,
    DEFAULT_OTLP_STARTUP_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    DEFAULT_RESOURCES_URL,
    DEFAULT_SERVICE_NAME,
)


class Settings(BaseSettings):
    """Application settings loaded from DEMO_* environment variables.

    Example: DEMO_PORT=9000, DEMO_OTLP_ENDPOINT=collector:4317

    Attributes:
        service_name: Value of the service.name trace resource attribute.
        port: HTTP port (1-65535). Default: 8070.
        host: Bind address. Default: 0.0.0.0.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        resources_url: Downstream resources endpoint fetched on every request.
        downstream_timeout_seconds: Timeout for the outbound call.
        otlp_endpoint: OTLP gRPC collector address.
        otlp_insecure: Use a plaintext gRPC channel to the collector.
        otlp_startup_check: Abort startup when the collector is unreachable.
        otlp_startup_timeout_seconds: How long the startup check waits.
        graceful_shutdown_timeout_seconds: Drain bound for in-flight requests.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Service name for trace resource and logs",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Deployment environment",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    graceful_shutdown_timeout_seconds: float = Field(
        default=DEFAULT_GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds to drain in-flight requests on shutdown",
    )

    # =========================================================================
    # Downstream
    # =========================================================================
    resources_url: str = Field(
        default=DEFAULT_RESOURCES_URL,
        description="Downstream resources endpoint",
    )
    downstream_timeout_seconds: float = Field(
        default=DEFAULT_DOWNSTREAM_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for the outbound resources call",
    )

    # =========================================================================
    # Telemetry
    # =========================================================================
    otlp_endpoint: str = Field(
        default=DEFAULT_OTLP_ENDPOINT,
        min_length=1,
        description="OTLP gRPC collector endpoint",
    )
    otlp_insecure: bool = Field(
        default=True,
        description="Plaintext gRPC channel (local/demo use only)",
    )
    otlp_startup_check: bool = Field(
        default=True,
        description="Fail startup if the collector is unreachable",
    )
    otlp_startup_timeout_seconds: float = Field(
        default=DEFAULT_OTLP_STARTUP_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds to wait for the collector channel at startup",
    )

    # =========================================================================
    # Pydantic v2 Model Configuration
    # =========================================================================
    model_config = {
        "env_prefix": "DEMO_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return Settings()
