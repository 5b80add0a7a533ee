"""
API Endpoint Tests for StockChart
Tests GET /api/stock end to end against a fake Alpha Vantage
"""
import pytest
import sys
import os
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from exceptions import SYMBOL_NOT_FOUND_MESSAGE
from main import app
from services.quote_proxy import subtract_months
from tests.mocks.alpha_vantage_mock import create_daily_series_payload, create_error_payload


class TestHealthEndpoints:
    """Test health and status endpoints"""

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "StockChart API"
        assert "version" in data

    def test_health_endpoint(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"

    def test_correlation_id_is_generated(self, client):
        response = client.get("/health")
        assert response.headers["x-correlation-id"]


class TestStockEndpoint:
    """Test the quote proxy route"""

    def test_missing_symbol(self, client, upstream):
        response = client.get("/api/stock")
        assert response.status_code == 400
        assert response.json() == {"error": "Symbol is required"}
        assert upstream.requests == []

    def test_empty_symbol(self, client):
        response = client.get("/api/stock?symbol=&range=1m")
        assert response.status_code == 400
        assert response.json() == {"error": "Symbol is required"}

    def test_missing_api_key(self, upstream, monkeypatch):
        # Real dependency: the key is read from the environment per request
        monkeypatch.delenv("ALPHA_VANTAGE_API_KEY", raising=False)
        from routes.stocks import get_quote_proxy
        from services.alpha_vantage import AlphaVantageService
        from services.quote_proxy import QuoteProxy
        import httpx

        service = AlphaVantageService(transport=httpx.MockTransport(upstream))
        app.dependency_overrides[get_quote_proxy] = lambda: QuoteProxy(service)
        try:
            response = TestClient(app).get("/api/stock?symbol=AAPL")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "API key not configured"}
        assert upstream.requests == []

    def test_api_key_read_at_request_time(self, upstream, monkeypatch):
        from routes.stocks import get_quote_proxy
        from services.alpha_vantage import AlphaVantageService
        from services.quote_proxy import QuoteProxy
        import httpx

        service = AlphaVantageService(transport=httpx.MockTransport(upstream))
        app.dependency_overrides[get_quote_proxy] = lambda: QuoteProxy(service)
        try:
            monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "first")
            TestClient(app).get("/api/stock?symbol=AAPL")
            monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "second")
            TestClient(app).get("/api/stock?symbol=AAPL")
        finally:
            app.dependency_overrides.clear()

        assert [r.url.params["apikey"] for r in upstream.requests] == ["first", "second"]

    def test_invalid_api_call_is_localized(self, client, upstream):
        upstream.payload = {"Error Message": "Invalid API call"}

        response = client.get("/api/stock?symbol=XXXX")

        assert response.status_code == 400
        assert response.json() == {"error": SYMBOL_NOT_FOUND_MESSAGE}

    def test_upstream_error_passes_through(self, client, upstream):
        upstream.payload = create_error_payload("Something else went wrong")

        response = client.get("/api/stock?symbol=AAPL")

        assert response.status_code == 400
        assert response.json() == {"error": "Something else went wrong"}

    def test_missing_time_series(self, client, upstream):
        upstream.payload = {"Meta Data": {}}

        response = client.get("/api/stock?symbol=AAPL")

        assert response.status_code == 404
        assert response.json() == {"error": "No data found for this symbol"}

    def test_upstream_http_failure(self, client, upstream):
        upstream.status_code = 502
        upstream.payload = {}

        response = client.get("/api/stock?symbol=AAPL")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch stock data"}

    def test_upstream_not_json(self, client, upstream):
        upstream.text = "<html>oops</html>"

        response = client.get("/api/stock?symbol=AAPL")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch stock data"}

    def test_symbol_forwarded_upstream(self, client, upstream):
        client.get("/api/stock?symbol=IBM&range=full")

        assert len(upstream.requests) == 1
        params = upstream.requests[0].url.params
        assert params["symbol"] == "IBM"
        assert params["apikey"] == "test-key"

    def test_every_request_goes_upstream(self, client, upstream):
        client.get("/api/stock?symbol=AAPL&range=1m")
        client.get("/api/stock?symbol=AAPL&range=1m")
        assert len(upstream.requests) == 2

    def test_full_range_returns_everything(self, client, upstream):
        upstream.payload = create_daily_series_payload(days=10)

        data = client.get("/api/stock?symbol=AAPL&range=full").json()

        assert len(data["stockData"]) == 10
        assert set(data["stockData"][0]) == {"date", "open", "high", "low", "close", "volume"}

    def test_unknown_range_means_full(self, client, upstream):
        upstream.payload = create_daily_series_payload(days=100)

        data = client.get("/api/stock?symbol=AAPL&range=10y").json()

        assert len(data["stockData"]) == 100

    def test_single_bar_has_no_percentage_change(self, client, upstream):
        upstream.payload = create_daily_series_payload(days=1)

        data = client.get("/api/stock?symbol=AAPL").json()

        assert len(data["stockData"]) == 1
        assert data["percentageChange"] is None

    @pytest.mark.integration
    def test_one_year_window_end_to_end(self, client, upstream):
        """400 ascending daily bars, range=1y -> exactly the last year, ascending"""
        today = date.today()
        upstream.payload = create_daily_series_payload(end=today, days=400, start_price=50.0, step=0.5)

        response = client.get("/api/stock?symbol=AAPL&range=1y")

        assert response.status_code == 200
        data = response.json()
        cutoff = subtract_months(today, 12)
        expected_days = (today - cutoff).days
        dates = [bar["date"] for bar in data["stockData"]]

        assert len(dates) == expected_days
        assert dates == sorted(dates)
        assert date.fromisoformat(dates[0]) > cutoff
        assert dates[-1] == today.isoformat()

        last_close = 50.0 + 0.5 * 399
        previous_close = last_close - 0.5
        assert data["stockData"][-1]["close"] == pytest.approx(last_close)
        assert data["percentageChange"] == pytest.approx((last_close - previous_close) / previous_close * 100)

    def test_error_envelope_documented(self, client):
        schema = client.get("/openapi.json").json()
        responses = schema["paths"]["/api/stock"]["get"]["responses"]

        for status in ("400", "404", "500"):
            ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
            assert ref == "#/components/schemas/ErrorResponse"
        assert schema["components"]["schemas"]["ErrorResponse"]["required"] == ["error"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
