"""
Chart Renderer
Draws a ChartRender (see models.view) with matplotlib on the viewer's side.

The renderer only draws what it is given; it never fetches or computes
averages itself.
"""
import base64
import io
from datetime import datetime
from typing import List, Optional

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.dates as mdates

from models.view import ChartRender


class ChartRenderer:
    """Render chart descriptions to PNG images."""

    def __init__(self, width: float = 12.0, height: float = 6.0, dpi: int = 100):
        self.figsize = (width, height)
        self.dpi = dpi

    def _encode(self, fig: plt.Figure) -> bytes:
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=self.dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)
        return buf.getvalue()

    @staticmethod
    def _nan_gaps(values: List[Optional[float]]) -> List[float]:
        """Missing points become NaN so matplotlib leaves a gap instead of a zero."""
        return [float('nan') if v is None else v for v in values]

    def _draw(self, ax: plt.Axes, chart: ChartRender) -> None:
        """Draw the chart area onto ax: lines when there is data, otherwise the message."""
        if not chart.has_chart:
            ax.text(0.5, 0.5, chart.error or chart.message or '',
                    ha='center', va='center', fontsize=14)
            ax.set_axis_off()
            return

        dates = [datetime.strptime(d[:10], '%Y-%m-%d') for d in chart.dates]

        for line in chart.lines:
            ax.plot(
                dates,
                self._nan_gaps(line.values),
                color=line.color,
                linewidth=1.5 if line.key == 'close' else 1.0,
                marker='o' if line.show_dots and len(dates) <= 60 else None,
                markersize=3,
                label=line.label,
            )

        title = chart.title
        if chart.change_label:
            title += f"  ({chart.change_label})"
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.legend(loc='upper left', framealpha=0.9)
        ax.xaxis.set_major_formatter(mdates.DateFormatter('%Y-%m-%d'))
        ax.xaxis.set_major_locator(mdates.AutoDateLocator())
        plt.setp(ax.get_xticklabels(), rotation=45, ha='right')
        ax.grid(True, linestyle='--', alpha=0.3)

    def render_png(self, chart: ChartRender) -> bytes:
        fig, ax = plt.subplots(figsize=self.figsize)
        self._draw(ax, chart)
        fig.tight_layout()
        return self._encode(fig)

    def render_base64(self, chart: ChartRender) -> str:
        """Render to a data URI for embedding in a page."""
        encoded = base64.b64encode(self.render_png(chart)).decode('utf-8')
        return f"data:image/png;base64,{encoded}"
