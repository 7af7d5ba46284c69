"""pytest configuration and fixtures for demo-service tests.

This module provides shared fixtures for unit tests: settings with the
collector check disabled, an in-memory span exporter, and an app factory
wired to a downstream stub.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from demo_service.core.config import Settings


if TYPE_CHECKING:
    from fastapi import FastAPI

    from tests.unit.downstream_stub import DownstreamStub


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Default settings without the collector reachability check."""
    return Settings(otlp_startup_check=False)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Collects finished spans in memory."""
    return InMemorySpanExporter()


@pytest.fixture
def make_app(
    settings: Settings,
    span_exporter: InMemorySpanExporter,
) -> Callable[[DownstreamStub], FastAPI]:
    """Build an app wired to the in-memory exporter and a downstream stub."""
    from demo_service.main import create_app

    def _make(downstream: DownstreamStub) -> FastAPI:
        return create_app(
            settings=settings,
            span_exporter=span_exporter,
            downstream_transport=downstream.transport,
        )

    return _make
