"""
StockChart Custom Exception Classes

This module provides the exception hierarchy for the quote proxy. Every
exception carries the HTTP status code the route answers with, so callers
only need to catch the base class to build an error response.

Exception Hierarchy:
    StockChartError (base)
    |-- ClientInputError            (400)
    |-- AlphaVantageError
    |   |-- UpstreamSymbolNotFound  (400)
    |   |-- UpstreamGenericError    (400)
    |   +-- NoDataError             (404)
    |-- ConfigurationError          (500)
    +-- UnexpectedFailure           (500)

Usage:
    from exceptions import StockChartError

    try:
        quote = await proxy.fetch_quote(symbol, range_, api_key=api_key)
    except StockChartError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
"""

from typing import Optional, Any, Dict


# Message shown when Alpha Vantage rejects the symbol
SYMBOL_NOT_FOUND_MESSAGE = "指定された銘柄コードが見つかりません。正しい銘柄コードを入力してください。"


class StockChartError(Exception):
    """
    Base exception for all StockChart errors.

    Attributes:
        message: Human-readable error description, returned to the client as-is
        error_code: Machine-readable error code for logging/diagnostics
        status_code: HTTP status code for the error response
        details: Additional context about the error
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_code = error_code or "STOCKCHART_ERROR"
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the proxy's error body."""
        return {"error": self.message}


class ClientInputError(StockChartError):
    """Raised when the request itself is unusable (e.g. missing symbol)."""

    status_code = 400

    def __init__(self, message: str = "Symbol is required"):
        super().__init__(message=message, error_code="CLIENT_INPUT_ERROR")


class ConfigurationError(StockChartError):
    """Raised when the server is missing required configuration."""

    status_code = 500

    def __init__(self, message: str = "API key not configured"):
        super().__init__(message=message, error_code="CONFIGURATION_ERROR")


class UnexpectedFailure(StockChartError):
    """
    Raised for network, HTTP or parse failures talking to the upstream API.

    The original exception is kept in `details` for logging only; the
    client always sees the generic message.
    """

    status_code = 500

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(
            message="Failed to fetch stock data",
            error_code="UNEXPECTED_FAILURE",
            details={"cause": repr(cause)} if cause is not None else None,
        )


# =============================================================================
# Alpha Vantage Exceptions
# =============================================================================

class AlphaVantageError(StockChartError):
    """
    Base exception for errors reported by the Alpha Vantage payload.

    Catch this to handle any Alpha Vantage related error.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        symbol: Optional[str] = None,
    ):
        self.symbol = symbol
        super().__init__(
            message=message,
            error_code=error_code or "ALPHA_VANTAGE_ERROR",
            details={"symbol": symbol},
        )


class UpstreamSymbolNotFound(AlphaVantageError):
    """Raised when Alpha Vantage answers "Invalid API call" for a symbol."""

    status_code = 400

    def __init__(self, api_message: str, symbol: Optional[str] = None):
        self.api_message = api_message
        super().__init__(
            message=SYMBOL_NOT_FOUND_MESSAGE,
            error_code="ALPHA_VANTAGE_SYMBOL_NOT_FOUND",
            symbol=symbol,
        )


class UpstreamGenericError(AlphaVantageError):
    """
    Raised when Alpha Vantage returns any other explicit error message.

    The upstream message is passed through to the client unchanged.
    """

    status_code = 400

    def __init__(self, api_message: str, symbol: Optional[str] = None):
        self.api_message = api_message
        super().__init__(
            message=api_message,
            error_code="ALPHA_VANTAGE_API_ERROR",
            symbol=symbol,
        )


class NoDataError(AlphaVantageError):
    """Raised when the payload has no daily time series at all."""

    status_code = 404

    def __init__(self, symbol: Optional[str] = None):
        super().__init__(
            message="No data found for this symbol",
            error_code="ALPHA_VANTAGE_NO_DATA",
            symbol=symbol,
        )
