"""
Quote Fetch Proxy
Turns a (symbol, range) request into a QuoteResponse using Alpha Vantage daily history
"""
import calendar
from datetime import date
from typing import List, Optional, Sequence

import httpx

from models.stock import DailyBar, QuoteResponse, RangeSelector
from exceptions import (
    StockChartError,
    ClientInputError,
    ConfigurationError,
    UnexpectedFailure,
)
from services.alpha_vantage import AlphaVantageService
from services.logging_config import get_logger

logger = get_logger(__name__)

# Months to step back from today for each range; FULL has no cutoff
RANGE_MONTHS = {
    RangeSelector.ONE_MONTH: 1,
    RangeSelector.THREE_MONTHS: 3,
    RangeSelector.SIX_MONTHS: 6,
    RangeSelector.ONE_YEAR: 12,
    RangeSelector.FIVE_YEARS: 60,
}


def subtract_months(day: date, months: int) -> date:
    """
    Step back a number of calendar months, clamping to the last day of the target month.

    Example: 2024-03-31 minus 1 month -> 2024-02-29
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def range_cutoff(range_: RangeSelector, today: date) -> Optional[date]:
    """Lower bound (exclusive) for a range, or None when nothing is filtered."""
    months = RANGE_MONTHS.get(range_)
    if months is None:
        return None
    return subtract_months(today, months)


def filter_by_range(bars: Sequence[DailyBar], range_: RangeSelector, today: date) -> List[DailyBar]:
    """Keep only bars dated strictly after the range cutoff."""
    cutoff = range_cutoff(range_, today)
    if cutoff is None:
        return list(bars)
    return [bar for bar in bars if date.fromisoformat(bar.date) > cutoff]


def calculate_percentage_change(bars: Sequence[DailyBar]) -> Optional[float]:
    """
    Latest close vs. the previous close, in percent.

    None with fewer than two bars or when the previous close is zero.
    """
    if len(bars) < 2:
        return None
    latest_close = bars[-1].close
    previous_close = bars[-2].close
    if previous_close == 0:
        return None
    return (latest_close - previous_close) / previous_close * 100


class QuoteProxy:
    """
    Validates a quote request, calls Alpha Vantage once and shapes the result.

    The API key is an explicit argument of fetch_quote so that no process
    environment is read here.
    """

    def __init__(self, service: AlphaVantageService):
        self.service = service

    async def fetch_quote(
        self,
        symbol: Optional[str],
        range_: RangeSelector,
        api_key: Optional[str],
        today: Optional[date] = None,
    ) -> QuoteResponse:
        """
        Raises:
            StockChartError subclasses; every failure is terminal for the request
        """
        if not symbol:
            raise ClientInputError()

        if not api_key:
            logger.error("ALPHA_VANTAGE_API_KEY is not configured")
            raise ConfigurationError()

        today = today or date.today()
        logger.info(f"[QUOTE] Fetching {symbol} range={range_.value}")

        try:
            bars = await self.service.get_daily_history(symbol, api_key)
        except StockChartError:
            raise
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"[QUOTE] Error fetching stock data for {symbol}: {e}", exc_info=True)
            raise UnexpectedFailure(cause=e) from e

        filtered = filter_by_range(bars, range_, today)
        percentage_change = calculate_percentage_change(filtered)

        logger.info(
            f"[QUOTE] {symbol}: {len(filtered)} of {len(bars)} bars in range {range_.value}",
            extra={"symbol": symbol, "range": range_.value, "bars": len(filtered)},
        )
        return QuoteResponse(series=filtered, percentage_change=percentage_change)
