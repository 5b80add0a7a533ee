"""
Chart View
Client-side state holder for the stock chart screen.

The view owns a single ViewState and mutates it only through the transition
methods below:

    IDLE    --submit(symbol)-->   LOADING
    LOADING --complete(body)-->   LOADED
    LOADING --fail(message)-->    ERROR
    LOADED / ERROR --submit-->    LOADING

Every submit re-fetches from the proxy; nothing is cached. A submit that
overlaps an earlier one is not cancelled, so the later-finishing response wins.
"""
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from config import get_app_config
from models.stock import DailyBar, MA_PERIODS, RangeSelector
from models.view import ChartLine, ChartRender, ViewState, ViewStatus
from services.indicators import IndicatorService
from services.logging_config import get_logger

logger = get_logger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch stock data"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
NO_DATA_MESSAGE = "指定された銘柄のデータが見つかりませんでした。"

SUBMIT_LABEL = "検索"
LOADING_LABEL = "読み込み中..."

CLOSE_COLOR = "#8884d8"
MA_COLORS = {
    5: "#ff7300",
    25: "#82ca9d",
    75: "#0088FE",
    200: "#FF0000",
}
POSITIVE_CHANGE_COLOR = "#16a34a"
NEGATIVE_CHANGE_COLOR = "#dc2626"


def format_date(value: str) -> str:
    """Axis/tooltip date label (yyyy-mm-dd)."""
    return date.fromisoformat(value[:10]).strftime("%Y-%m-%d")


def average_label(period: int) -> str:
    return f"{period}日移動平均"


def format_change(percentage_change: float) -> str:
    return f"前日比: {percentage_change:.2f}%"


class ChartView:
    """Form-and-chart state machine backed by the quote proxy"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        indicators: Optional[IndicatorService] = None,
    ):
        """
        Args:
            base_url: Proxy base URL, defaults to the configured proxy_base_url
            timeout: Request timeout in seconds, defaults to http_timeout_seconds
            transport: Optional httpx transport (tests inject MockTransport or ASGITransport)
            indicators: Moving-average calculator
        """
        config = get_app_config()
        self.base_url = base_url or config.proxy_base_url
        self.timeout = timeout if timeout is not None else config.http_timeout_seconds
        self._transport = transport
        self.indicators = indicators or IndicatorService()
        self.state = ViewState()

    # ===== Input =====

    def set_symbol(self, text: str) -> None:
        """Symbols are upper-cased as they are typed."""
        self.state.symbol = text.upper()

    def set_range(self, range_code: str) -> None:
        self.state.range = RangeSelector.parse(range_code)

    def toggle_average(self, period: int, checked: bool) -> None:
        if period not in MA_PERIODS:
            raise ValueError(f"Unsupported moving average period: {period}")
        if checked:
            self.state.selected_averages.add(period)
        else:
            self.state.selected_averages.discard(period)

    # ===== Transitions =====

    def begin_loading(self) -> bool:
        """
        Enter LOADING and clear the previous result.

        Returns False (and changes nothing) when there is no symbol to fetch.
        """
        if not self.state.symbol.strip():
            return False
        self.state.loading = True
        self.state.error = None
        self.state.series = None
        self.state.percentage_change = None
        self.state.status = ViewStatus.LOADING
        return True

    def complete(self, body: Dict[str, Any]) -> None:
        """LOADING -> LOADED with the proxy's success body."""
        bars = [DailyBar.model_validate(item) for item in body.get("stockData") or []]
        self.state.series = self.indicators.add_moving_averages(bars, MA_PERIODS)
        self.state.percentage_change = body.get("percentageChange")
        self.state.error = None
        self.state.loading = False
        self.state.status = ViewStatus.LOADED

    def fail(self, message: str) -> None:
        """LOADING -> ERROR; the series stays absent."""
        self.state.error = message
        self.state.series = None
        self.state.percentage_change = None
        self.state.loading = False
        self.state.status = ViewStatus.ERROR

    async def submit(self) -> None:
        """Fetch the current symbol/range from the proxy and apply the result."""
        if not self.begin_loading():
            logger.debug("Submit ignored: empty symbol")
            return

        params = {"symbol": self.state.symbol, "range": self.state.range.value}
        logger.info(f"Fetching chart data symbol={params['symbol']} range={params['range']}")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.get("/api/stock", params=params)
            body = response.json()

            if not response.is_success:
                message = body.get("error") if isinstance(body, dict) else None
                self.fail(message or FETCH_FAILED_MESSAGE)
                return

            self.complete(body)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Chart data fetch failed: {e}", exc_info=True)
            self.fail(UNEXPECTED_ERROR_MESSAGE)
        finally:
            self.state.loading = False

    # ===== Rendering =====

    def render(self) -> ChartRender:
        """Describe the screen for the current state."""
        state = self.state
        series = state.series
        has_data = bool(series)

        render = ChartRender(
            title=f"{state.symbol} 株価チャート",
            submit_label=LOADING_LABEL if state.loading else SUBMIT_LABEL,
            submit_disabled=state.loading,
            show_average_toggles=has_data,
            error=state.error,
        )

        if series is not None and not series and not state.loading and not state.error:
            render.message = NO_DATA_MESSAGE
            return render

        if not has_data:
            return render

        if state.percentage_change is not None:
            render.change_label = format_change(state.percentage_change)
            render.change_color = (
                POSITIVE_CHANGE_COLOR if state.percentage_change >= 0 else NEGATIVE_CHANGE_COLOR
            )

        render.dates = [bar.date for bar in series]
        render.lines.append(ChartLine(
            key="close",
            label="終値",
            color=CLOSE_COLOR,
            values=[bar.close for bar in series],
            show_dots=True,
        ))
        for period in MA_PERIODS:
            if period in state.selected_averages:
                render.lines.append(ChartLine(
                    key=f"ma{period}",
                    label=average_label(period),
                    color=MA_COLORS[period],
                    values=[bar.moving_average(period) for bar in series],
                ))
        return render

    def tooltip(self, index: int) -> List[str]:
        """Tooltip rows for the bar at `index`: date first, then each visible line."""
        render = self.render()
        if not render.has_chart:
            return []
        rows = [format_date(render.dates[index])]
        for line in render.lines:
            value = line.values[index]
            if value is not None:
                rows.append(f"{line.label}: {value:.2f}")
        return rows
