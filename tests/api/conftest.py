"""Pytest fixtures for API tests.

Provides a TestClient whose configuration and courier gateway
dependencies are replaced with in-memory doubles.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from ndrdesk.api.main import app
from ndrdesk.api.routes.ndr import get_config, get_gateway
from ndrdesk.cli.config import NDRDeskConfig
from tests.helpers import FakeGateway


@pytest.fixture
def api_gateway() -> FakeGateway:
    """Gateway double shared by the client fixture and the test."""
    return FakeGateway(upl_id="UPL-API")


@pytest.fixture
def client(api_gateway: FakeGateway) -> Generator[TestClient, None, None]:
    """Create a TestClient with default config and a fake courier gateway.

    Args:
        api_gateway: Gateway double returned by the get_gateway dependency.

    Yields:
        TestClient for making HTTP requests.
    """
    app.dependency_overrides[get_config] = lambda: NDRDeskConfig()
    app.dependency_overrides[get_gateway] = lambda: api_gateway

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
