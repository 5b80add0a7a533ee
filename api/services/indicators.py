"""
Technical Indicator Calculations
Pure Python simple moving averages for the chart overlays
"""
from typing import List, Optional, Sequence

from models.stock import AugmentedBar, DailyBar, MA_PERIODS


class IndicatorService:
    """Service for calculating technical indicators"""

    def calculate_sma(self, prices: Sequence[float], period: int) -> List[Optional[float]]:
        """
        Calculate a trailing Simple Moving Average

        Args:
            prices: List of closing prices, oldest first
            period: Number of periods for the average

        Returns:
            List aligned with `prices`: None for the first period-1 entries,
            then the mean of the `period` prices ending at that index
        """
        if period < 1:
            raise ValueError(f"period must be at least 1, got {period}")

        sma_values: List[Optional[float]] = [None] * min(period - 1, len(prices))
        for i in range(period - 1, len(prices)):
            window = prices[i - period + 1:i + 1]
            sma_values.append(sum(window) / period)

        return sma_values

    def add_moving_averages(
        self,
        bars: Sequence[DailyBar],
        periods: Sequence[int] = MA_PERIODS,
    ) -> List[AugmentedBar]:
        """
        Attach ma{P} fields for every period to each bar.

        All periods are computed regardless of which overlays are displayed.
        A field stays unset while fewer than P bars are available.
        """
        closes = [bar.close for bar in bars]
        averages = {period: self.calculate_sma(closes, period) for period in periods}

        augmented = []
        for i, bar in enumerate(bars):
            fields = {
                f"ma{period}": values[i]
                for period, values in averages.items()
                if values[i] is not None
            }
            augmented.append(AugmentedBar(**bar.model_dump(), **fields))
        return augmented
