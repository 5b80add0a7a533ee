"""
Chart view state models
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from models.stock import AugmentedBar, RangeSelector


class ViewStatus(str, Enum):
    """Chart view lifecycle state"""
    IDLE = "IDLE"
    LOADING = "LOADING"
    LOADED = "LOADED"
    ERROR = "ERROR"


@dataclass
class ViewState:
    """Mutable state owned by a single ChartView"""
    symbol: str = ""
    range: RangeSelector = RangeSelector.FULL
    selected_averages: Set[int] = field(default_factory=lambda: {25})
    series: Optional[List[AugmentedBar]] = None
    percentage_change: Optional[float] = None
    loading: bool = False
    error: Optional[str] = None
    status: ViewStatus = ViewStatus.IDLE


@dataclass
class ChartLine:
    """One line series in the rendered chart"""
    key: str  # close, ma5, ma25, ...
    label: str
    color: str
    values: List[Optional[float]]
    show_dots: bool = False


@dataclass
class ChartRender:
    """
    Library-independent description of what the view shows.

    Exactly one of `lines` (non-empty) or `message` is meaningful for the
    chart area; `error` is shown above it regardless.
    """
    title: str
    submit_label: str
    submit_disabled: bool
    show_average_toggles: bool
    error: Optional[str] = None
    message: Optional[str] = None
    change_label: Optional[str] = None
    change_color: Optional[str] = None
    dates: List[str] = field(default_factory=list)
    lines: List[ChartLine] = field(default_factory=list)

    @property
    def has_chart(self) -> bool:
        return bool(self.lines)
