"""
StockChart API Test Configuration
=================================
Shared pytest fixtures and configuration for all tests.

This file is automatically loaded by pytest and provides:
- Upstream fakes: Alpha Vantage payloads served through httpx.MockTransport
- A FastAPI test client whose proxy talks to the fake upstream
- A stable API key dependency so no test depends on the real environment
"""
import pytest
import sys
import os
from datetime import date
from typing import Any, Callable, Dict, Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
from fastapi.testclient import TestClient

from main import app
from routes.stocks import get_api_key, get_quote_proxy
from services.alpha_vantage import AlphaVantageService
from services.quote_proxy import QuoteProxy
from tests.mocks.alpha_vantage_mock import (
    RecordingHandler,
    create_daily_series_payload,
    create_error_payload,
)

TEST_API_KEY = "test-key"


# ============================================================
# Pytest Configuration
# ============================================================

def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# ============================================================
# Upstream Fixtures
# ============================================================

@pytest.fixture
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def daily_payload(today) -> Dict[str, Any]:
    """30 daily bars ending today, closes 100..129."""
    return create_daily_series_payload(end=today, days=30)


@pytest.fixture
def invalid_call_payload() -> Dict[str, Any]:
    return create_error_payload()


@pytest.fixture
def make_service() -> Callable[..., AlphaVantageService]:
    """
    Factory for an AlphaVantageService backed by a RecordingHandler.

    Usage:
        service, handler = make_service(payload)
    """
    def _make(payload: Any = None, status_code: int = 200, text: Optional[str] = None):
        handler = RecordingHandler(payload, status_code=status_code, text=text)
        service = AlphaVantageService(transport=httpx.MockTransport(handler))
        return service, handler
    return _make


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def upstream() -> RecordingHandler:
    """Handler behind the test client's proxy; tests set .payload/.status_code."""
    return RecordingHandler(create_daily_series_payload(days=5))


@pytest.fixture
def client(upstream: RecordingHandler):
    """
    Create a FastAPI test client whose proxy calls the fake upstream.

    Yields:
        TestClient instance for making requests
    """
    service = AlphaVantageService(transport=httpx.MockTransport(upstream))
    app.dependency_overrides[get_quote_proxy] = lambda: QuoteProxy(service)
    app.dependency_overrides[get_api_key] = lambda: TEST_API_KEY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
