"""
Stock data models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from enum import Enum


class RangeSelector(str, Enum):
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    FIVE_YEARS = "5y"
    FULL = "full"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RangeSelector":
        """Parse a range code, falling back to FULL for missing or unknown values"""
        try:
            return cls(value)
        except ValueError:
            return cls.FULL


# Period lengths drawn as moving-average overlays
MA_PERIODS = (5, 25, 75, 200)


class DailyBar(BaseModel):
    """Single daily price bar"""
    model_config = ConfigDict(frozen=True)

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int = Field(ge=0)


class AugmentedBar(DailyBar):
    """Daily bar with trailing simple moving averages of the close"""
    ma5: Optional[float] = None
    ma25: Optional[float] = None
    ma75: Optional[float] = None
    ma200: Optional[float] = None

    def moving_average(self, period: int) -> Optional[float]:
        return getattr(self, f"ma{period}")


class QuoteResponse(BaseModel):
    """Envelope returned by the quote proxy"""
    model_config = ConfigDict(populate_by_name=True)

    series: List[DailyBar] = Field(alias="stockData")
    percentage_change: Optional[float] = Field(default=None, alias="percentageChange")


class ErrorResponse(BaseModel):
    """Error envelope returned by the quote proxy"""
    error: str
