"""
Test Configuration and Fixtures

This module provides:
- Environment defaults that must be set before application modules are imported
- In-memory store shared by use-case and HTTP tests
- A TestClient whose container serves the per-test store and a fake IP geolocation service
"""

# =============================================================================
# Environment setup MUST happen before any other imports (settings read env at import time)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['STORAGE_BACKEND'] = 'memory'
    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('EXPIRY_SWEEP_INTERVAL_SECONDS', '3600')

    test_log_dir = Path(__file__).parent / 'test_log'
    os.environ.setdefault('LOG_DIR', str(test_log_dir))
    os.environ.setdefault('LOG_FILE_PREFIX', 'test_')


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import Callable, Generator  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402

from eventdesk.platform.config.core_setting import Settings  # noqa: E402
from eventdesk.platform.config.di import container  # noqa: E402
from eventdesk.service.booking.driven_adapter.repo.in_memory_booking_store import (  # noqa: E402
    InMemoryBookingStore,
)
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event  # noqa: E402
from test.shared.utils import build_event, fake_ip_geolocation_handler  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def event_factory() -> Callable[..., Event]:
    return build_event


@pytest.fixture
def seed_event(store: InMemoryBookingStore) -> Callable[..., Event]:
    """Build an event and put it in the store (sync, usable from TestClient tests)"""

    def _seed(**overrides) -> Event:
        event = build_event(**overrides)
        asyncio.run(store.add_event(event))
        return event

    return _seed


@pytest.fixture
def client(store: InMemoryBookingStore) -> Generator[TestClient, None, None]:
    from test.test_app import app

    ip_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_ip_geolocation_handler))
    container.in_memory_store.override(providers.Object(store))
    container.ip_geolocation_http_client.override(providers.Object(ip_client))
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.reset_override()
        asyncio.run(ip_client.aclose())
