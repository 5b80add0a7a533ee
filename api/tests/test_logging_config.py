"""
Logging Configuration Tests
Formatters, correlation IDs and API call logging in api/services/logging_config.py
"""
import json
import logging
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.logging_config import (
    ConsoleFormatter,
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_api_call,
    set_correlation_id,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("services.alpha_vantage", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:

    def test_set_and_get(self):
        set_correlation_id("req-1")
        assert get_correlation_id() == "req-1"
        clear_correlation_id()

    def test_generated_when_missing(self):
        clear_correlation_id()
        cid = get_correlation_id()
        assert cid
        assert get_correlation_id() == cid
        clear_correlation_id()


class TestFormatters:

    def test_structured(self):
        set_correlation_id("req-2")
        entry = json.loads(StructuredFormatter().format(make_record(symbol="AAPL", status_code=200)))
        clear_correlation_id()

        assert entry["correlation_id"] == "req-2"
        assert entry["service"] == "alpha_vantage"
        assert entry["level"] == "INFO"
        assert entry["message"] == "hello"
        assert entry["extra"] == {"symbol": "AAPL", "status_code": 200}

    def test_console(self):
        set_correlation_id("abcdefgh-rest")
        line = ConsoleFormatter().format(make_record())
        clear_correlation_id()

        assert line.startswith("[abcdefgh] ")
        assert "alpha_vantage" in line
        assert line.endswith("- hello")


class TestLogApiCall:

    def test_success_is_info(self, caplog):
        logger = logging.getLogger("test.api")
        with caplog.at_level(logging.DEBUG, logger="test.api"):
            log_api_call(logger, "GET", "https://x.test/query", status_code=200, response_time_ms=12.3456)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "API CALL: GET https://x.test/query (12ms) -> 200"
        assert record.response_time_ms == 12.35

    def test_error_is_error(self, caplog):
        logger = logging.getLogger("test.api")
        with caplog.at_level(logging.DEBUG, logger="test.api"):
            log_api_call(logger, "GET", "https://x.test/query", error="boom", symbol="AAPL")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error == "boom"
        assert record.symbol == "AAPL"
