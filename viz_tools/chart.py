from __future__ import annotations

from pathlib import Path

from configs.matplotlib_config import configure_matplotlib_for_backend
# Configure matplotlib for backend use BEFORE any matplotlib imports
configure_matplotlib_for_backend()

import matplotlib.pyplot as plt
import numpy as np
from pydantic import BaseModel
from pydantic import Field

from pylink_tools.schemas import ChartSeries


class ChartStyleConfig(BaseModel):
    """Pydantic configuration for chart styling"""

    x_color: str = Field(default='#1f77b4', description='Color of the x(t) series')
    y_color: str = Field(default='#ff7f0e', description='Color of the y(t) series')
    path_colormap: str = Field(default='Spectral', description='Colormap for the x-y path, by time')

    linewidth: float = Field(default=2.0, ge=0.1, le=10.0, description='Line width')
    markersize: float = Field(default=15.0, ge=1.0, le=50.0, description='Marker size')
    alpha: float = Field(default=0.9, ge=0.0, le=1.0, description='Transparency')

    show_grid: bool = Field(default=True, description='Show grid')
    show_legend: bool = Field(default=True, description='Show legend')

    dpi: int = Field(default=150, ge=72, le=600, description='DPI for saved figures')
    bbox_inches: str = Field(default='tight', description='Bounding box for saved figures')


DEFAULT_STYLE = ChartStyleConfig()


def _handle_output(
    fig,
    title: str,
    out_path: str | Path | None = None,
    style: ChartStyleConfig = DEFAULT_STYLE,
) -> Path | None:
    """Save if out_path is given (a directory or a file), otherwise show"""
    if out_path is None:
        plt.show()
        plt.close(fig)
        return None

    out_path = Path(out_path)
    full_path = out_path / f'{title}.png' if out_path.is_dir() else out_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(full_path, dpi=style.dpi, bbox_inches=style.bbox_inches)
    plt.close(fig)
    return full_path


def plot_chart_series(
    series: ChartSeries,
    title: str = 'Position',
    out_path: str | Path | None = None,
    style: ChartStyleConfig = DEFAULT_STYLE,
) -> Path | None:
    """
    Plot a chart series: x and y against time, and the traced x-y path.

    Args:
        series: Index aligned x/y/time-label data
        title: Figure title (and file name when out_path is a directory)
        out_path: Output path for saving (None to display)
        style: Style configuration

    Returns:
        Path of the saved figure, or None when displayed
    """
    fig, (ax_t, ax_xy) = plt.subplots(1, 2, figsize=(14, 6))
    fig.suptitle(title)

    if series.is_empty():
        for ax in (ax_t, ax_xy):
            ax.text(0.5, 0.5, 'No data', ha='center', va='center', transform=ax.transAxes)
        return _handle_output(fig, title, out_path, style)

    steps = np.arange(len(series))
    ax_t.plot(steps, series.x_data, color=style.x_color, linewidth=style.linewidth, alpha=style.alpha, label='x')
    ax_t.plot(steps, series.y_data, color=style.y_color, linewidth=style.linewidth, alpha=style.alpha, label='y')
    tick_every = max(1, len(series) // 8)
    ax_t.set_xticks(steps[::tick_every])
    ax_t.set_xticklabels(series.time_labels[::tick_every])
    ax_t.set_xlabel('Time (s)')
    ax_t.set_ylabel('Position')
    if style.show_legend:
        ax_t.legend()

    ax_xy.plot(series.x_data, series.y_data, color='gray', linewidth=style.linewidth / 2, alpha=style.alpha)
    ax_xy.scatter(
        series.x_data, series.y_data,
        c=steps, cmap=style.path_colormap, s=style.markersize, alpha=style.alpha, zorder=3,
    )
    ax_xy.set_xlabel('X')
    ax_xy.set_ylabel('Y')
    ax_xy.axis('equal')

    if style.show_grid:
        ax_t.grid(True, zorder=-1)
        ax_xy.grid(True, zorder=-1)

    return _handle_output(fig, title, out_path, style)
