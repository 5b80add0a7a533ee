"""
Alpha Vantage API Service
Fetches the full daily time series for a symbol and reshapes it into DailyBar records
"""
import time
import httpx
from typing import Optional, List, Dict, Any

from models.stock import DailyBar
from exceptions import (
    UpstreamSymbolNotFound,
    UpstreamGenericError,
    NoDataError,
)
from services.logging_config import get_logger, log_api_call

logger = get_logger(__name__)

TIME_SERIES_KEY = "Time Series (Daily)"
ERROR_MESSAGE_KEY = "Error Message"
INVALID_CALL_MARKER = "Invalid API call"


def parse_daily_series(time_series: Dict[str, Dict[str, str]]) -> List[DailyBar]:
    """
    Reshape Alpha Vantage's date-keyed map into a list of bars, oldest first.

    Alpha Vantage returns the map newest-first; the list keeps that order while
    parsing and is reversed at the end.

    Raises:
        KeyError / ValueError: a bar is missing a field or has a non-numeric value
    """
    bars = [
        DailyBar(
            date=date_str,
            open=float(values["1. open"]),
            high=float(values["2. high"]),
            low=float(values["3. low"]),
            close=float(values["4. close"]),
            volume=int(values["5. volume"]),
        )
        for date_str, values in time_series.items()
    ]
    bars.reverse()
    return bars


class AlphaVantageService:
    """Service for interacting with Alpha Vantage API"""

    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Query endpoint, defaults to the public Alpha Vantage URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self._transport = transport

    async def _make_request(self, params: Dict[str, str], api_key: str) -> Dict[str, Any]:
        """
        Make a single request to Alpha Vantage and return the decoded JSON body.

        No caching and no retry: every call goes upstream exactly once.
        """
        function = params.get("function", "unknown")
        symbol = params.get("symbol", "")
        # The API key stays out of the logged endpoint
        endpoint = f"{self.base_url}?function={function}"
        if symbol:
            endpoint += f"&symbol={symbol}"

        start_time = time.perf_counter()

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(self.base_url, params={**params, "apikey": api_key})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            log_api_call(
                logger, "GET", endpoint,
                status_code=e.response.status_code,
                response_time_ms=(time.perf_counter() - start_time) * 1000,
                error=str(e),
                function=function,
                symbol=symbol
            )
            raise
        except httpx.RequestError as e:
            log_api_call(
                logger, "GET", endpoint,
                response_time_ms=(time.perf_counter() - start_time) * 1000,
                error=f"Request failed: {e}",
                function=function,
                symbol=symbol
            )
            raise

        log_api_call(
            logger, "GET", endpoint,
            status_code=response.status_code,
            response_time_ms=(time.perf_counter() - start_time) * 1000,
            function=function,
            symbol=symbol
        )

        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Alpha Vantage payload type: {type(data).__name__}")
        return data

    async def get_daily_history(self, symbol: str, api_key: str) -> List[DailyBar]:
        """
        Get the full daily history for a symbol, oldest bar first.

        Raises:
            UpstreamSymbolNotFound: Alpha Vantage answered "Invalid API call"
            UpstreamGenericError: Alpha Vantage answered any other error message
            NoDataError: the payload has no daily time series
            httpx.HTTPError, ValueError, KeyError: transport or parse failures
        """
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol,
            "outputsize": "full",
        }

        data = await self._make_request(params, api_key)

        api_message = data.get(ERROR_MESSAGE_KEY)
        if api_message:
            logger.warning(f"Alpha Vantage error for {symbol}: {api_message}")
            if INVALID_CALL_MARKER in api_message:
                raise UpstreamSymbolNotFound(api_message=api_message, symbol=symbol)
            raise UpstreamGenericError(api_message=api_message, symbol=symbol)

        time_series = data.get(TIME_SERIES_KEY)
        if time_series is None:
            logger.warning(f"No '{TIME_SERIES_KEY}' in Alpha Vantage payload for {symbol}")
            raise NoDataError(symbol=symbol)

        bars = parse_daily_series(time_series)
        logger.debug(f"Parsed {len(bars)} daily bars for {symbol}")
        return bars
