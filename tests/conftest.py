"""Root-level pytest fixtures for all tests.

Provides shared fixtures:
- Fake courier gateways (see tests/helpers)
- Config isolation (no real ndrdesk.yaml or NDRDESK_* env leaks into tests)
"""

import os

import pytest

from ndrdesk.errors.domain import GatewayError
from ndrdesk.services.gateway_provider import set_action_gateway
from tests.helpers import FakeGateway


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Fresh FakeGateway per test."""
    return FakeGateway()


@pytest.fixture
def unavailable_gateway() -> FakeGateway:
    """FakeGateway whose calls fail with a retryable error."""
    return FakeGateway(error=GatewayError.from_code("E-3001", reason="connection refused"))


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep user config files and NDRDESK_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("NDRDESK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield
    set_action_gateway(None)
