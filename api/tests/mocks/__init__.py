"""
StockChart Test Mocks Package
=============================
Fake upstream payloads and transports used in testing.

Usage:
    from tests.mocks import create_daily_series_payload, RecordingHandler
"""

from tests.mocks.alpha_vantage_mock import (
    RecordingHandler,
    create_daily_series_payload,
    create_error_payload,
    failing_transport,
)

__all__ = [
    "RecordingHandler",
    "create_daily_series_payload",
    "create_error_payload",
    "failing_transport",
]
