# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Provides a fake chat proxy client and an API test client
# =============================================================================

import asyncio
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CLIENT_URL", "http://localhost:3000")

import pytest
from fastapi.testclient import TestClient

from core.models.dataset import FileMeta, TabularDataset
from lib.ingestor import parse_tabular


# =============================================================================
# Fakes
# =============================================================================

class FakeProxyClient:
    """
    Stand-in for ChatProxyClient.

    Records every message list it is sent. Set `error` to make send()
    raise, or `gate` (an asyncio.Event) to hold the reply until released.
    """

    def __init__(self, reply: str = "Inventory optimization is a great fit for this data.", error=None):
        self.reply = reply
        self.error = error
        self.gate: asyncio.Event | None = None
        self.calls: list[list] = []

    async def send(self, messages):
        self.calls.append(list(messages))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_csv_text():
    """Small sales extract with a short and a long row."""
    return (
        "date,sku,qty\n"
        "2024-01-01,A-100,12\n"
        "\n"
        '"2024-01-02","A-101","7"\n'
        "2024-01-03,A-102\n"
        "2024-01-04,A-103,3,promo\n"
        "2024-01-05,A-104,9\n"
        "2024-01-06,A-105,4\n"
    )


@pytest.fixture
def sample_dataset(sample_csv_text):
    """Parsed sample_csv_text."""
    meta = FileMeta(filename="sales.csv", size_bytes=len(sample_csv_text.encode()))
    return parse_tabular(sample_csv_text, meta)


@pytest.fixture
def small_dataset():
    """Dataset built directly, without the ingestor."""
    return TabularDataset(
        headers=["date", "sku", "qty"],
        rows=[["2024-01-01", "A-100", "12"]],
        source_name="sales.csv",
        size_bytes=64,
        row_count=1,
    )


@pytest.fixture
def fake_proxy():
    """A fake chat proxy client."""
    return FakeProxyClient()


@pytest.fixture
def session_service(fake_proxy):
    """Session store whose sessions all talk to fake_proxy."""
    from core.services.session_service import SessionService
    return SessionService(client_factory=lambda: fake_proxy)


@pytest.fixture
def api_client(session_service):
    """TestClient for the app, using session_service."""
    from app.dependencies import get_session_service
    from app.main import app

    app.dependency_overrides[get_session_service] = lambda: session_service
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
