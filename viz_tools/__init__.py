"""
Visualization tools for analysis charts.

Modules:
- chart: matplotlib rendering of a ChartSeries
"""
from __future__ import annotations

from viz_tools.chart import ChartStyleConfig
from viz_tools.chart import DEFAULT_STYLE
from viz_tools.chart import plot_chart_series

__all__ = [
    'plot_chart_series',
    'ChartStyleConfig',
    'DEFAULT_STYLE',
]
