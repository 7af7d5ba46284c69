"""Custom exceptions for demo-service.

All custom exceptions end in "Error" and carry a machine-readable ErrorCode.

Exception Hierarchy:
    DemoServiceError (base)
    ├── TelemetryInitError (fatal at startup)
    └── DownstreamError (resources fetch failed)
        ├── ResourceRequestError
        ├── ResourceFetchError
        └── ResourceDecodeError
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes for demo-service exceptions."""

    DEMO_SERVICE_ERROR = "DEMO_SERVICE_ERROR"
    TELEMETRY_INIT_FAILED = "TELEMETRY_INIT_FAILED"
    DOWNSTREAM_ERROR = "DOWNSTREAM_ERROR"
    RESOURCE_REQUEST_INVALID = "RESOURCE_REQUEST_INVALID"
    RESOURCE_FETCH_FAILED = "RESOURCE_FETCH_FAILED"
    RESOURCE_DECODE_FAILED = "RESOURCE_DECODE_FAILED"


# =============================================================================
# Base Exception
# =============================================================================


class DemoServiceError(Exception):
    """Base exception for all demo-service errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.DEMO_SERVICE_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Startup
# =============================================================================


class TelemetryInitError(DemoServiceError):
    """Tracing pipeline could not be built.

    Raised from Telemetry.start(); the caller must abort startup.

    Attributes:
        endpoint: Collector endpoint that was being configured.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.TELEMETRY_INIT_FAILED,
            **kwargs,
        )
        self.endpoint = endpoint


# =============================================================================
# Downstream
# =============================================================================


class DownstreamError(DemoServiceError):
    """Base class for failures while fetching downstream resources.

    Attributes:
        url: Downstream URL being fetched.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        error_code: str | ErrorCode = ErrorCode.DOWNSTREAM_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code=error_code, **kwargs)
        self.url = url


class ResourceRequestError(DownstreamError):
    """The outbound request could not be constructed."""

    def __init__(self, message: str, url: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message,
            url=url,
            error_code=ErrorCode.RESOURCE_REQUEST_INVALID,
            **kwargs,
        )


class ResourceFetchError(DownstreamError):
    """The outbound request failed in transport (connect, timeout, ...)."""

    def __init__(self, message: str, url: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message,
            url=url,
            error_code=ErrorCode.RESOURCE_FETCH_FAILED,
            **kwargs,
        )


class ResourceDecodeError(DownstreamError):
    """The response body was not a JSON object.

    Attributes:
        status_code: HTTP status of the undecodable response.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            url=url,
            error_code=ErrorCode.RESOURCE_DECODE_FAILED,
            **kwargs,
        )
        self.status_code = status_code
