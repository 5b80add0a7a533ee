"""
Stock data routes - thin proxy in front of Alpha Vantage daily history

GET /api/stock?symbol=AAPL&range=1y
  200 {"stockData": [{date, open, high, low, close, volume}, ...], "percentageChange": float | null}
  400/404/500 {"error": str}
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional

from config import get_app_config, read_api_key
from exceptions import StockChartError, UnexpectedFailure
from models.stock import ErrorResponse, RangeSelector
from services.alpha_vantage import AlphaVantageService
from services.logging_config import get_logger
from services.quote_proxy import QuoteProxy

router = APIRouter()
logger = get_logger(__name__)


def get_quote_proxy() -> QuoteProxy:
    """Build the proxy from the app config; overridden in tests."""
    config = get_app_config()
    service = AlphaVantageService(
        base_url=config.alpha_vantage_base_url,
        timeout=config.http_timeout_seconds,
    )
    return QuoteProxy(service)


def get_api_key() -> Optional[str]:
    """Read the upstream credential at request time."""
    return read_api_key()


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing symbol or upstream rejected the symbol"},
    404: {"model": ErrorResponse, "description": "Upstream returned no daily series"},
    500: {"model": ErrorResponse, "description": "Missing API key or upstream failure"},
}


@router.get("", responses=ERROR_RESPONSES)
async def get_stock(
    symbol: Optional[str] = Query(default=None),
    range_code: Optional[str] = Query(default=None, alias="range"),
    proxy: QuoteProxy = Depends(get_quote_proxy),
    api_key: Optional[str] = Depends(get_api_key),
):
    """
    Get daily price history for a symbol, filtered to a date range.
    Unknown or missing range codes mean the full history.
    """
    range_ = RangeSelector.parse(range_code)

    try:
        quote = await proxy.fetch_quote(symbol, range_, api_key=api_key)
    except StockChartError as e:
        logger.warning(
            f"[QUOTE] {symbol or '<missing>'} failed: {e}",
            extra={"status_code": e.status_code, "error_code": e.error_code},
        )
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except Exception as e:
        logger.error(f"[QUOTE] Unexpected error for {symbol}: {e}", exc_info=True)
        error = UnexpectedFailure(cause=e)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    return quote.model_dump(by_alias=True)
