"""Chart generation for Solar Savings Calculator reports.

Creates the three-line projection chart (Utility, PPA, Purchase) for the
annual or cumulative view. Charts are saved as PNG files for embedding in
PDF reports, or rendered to bytes for on-screen display.
"""

import io

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import numpy as np

from solar_savings.models.parameters import VIEW_ANNUAL, ProjectionResults
from solar_savings.models.projection import chart_series
from solar_savings.utils.formatters import format_currency

SERIES_COLORS = {
    "Utility": "#7aa2f7",
    "PPA": "#25d366",
    "Purchase": "#ff9f43",
}


def _dollar_tick(value, _pos):
    return format_currency(value, 1 if abs(value) >= 1e3 else 0)


def _draw_projection(results: ProjectionResults, view: str, figsize=(8, 4.5), dpi=150):
    series = chart_series(results, view)
    years = np.asarray(series["year"])

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    for name, color in SERIES_COLORS.items():
        ax.plot(years, series[name], label=name, color=color, linewidth=2)

    title = "Annual Cost by Path" if view == VIEW_ANNUAL else "Cumulative Cost by Path"
    ax.set_title(title, fontsize=13, fontweight="bold")
    ax.set_xlabel("Year", fontsize=11)
    ax.set_ylabel("Dollars", fontsize=11)
    ax.set_xticks(years[::2])
    ax.axhline(y=0, color="black", linewidth=0.5)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(_dollar_tick))
    ax.grid(alpha=0.3, linestyle="--")
    ax.legend(fontsize=10)
    fig.tight_layout()
    return fig


def create_projection_chart(results: ProjectionResults, view: str, output_path: str) -> None:
    """Create a line chart of the three cost paths.

    Args:
        results: Calculated projection.
        view: "annual" or "cumulative".
        output_path: File path to save the PNG chart.
    """
    fig = _draw_projection(results, view)
    fig.savefig(output_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def render_projection_chart(results: ProjectionResults, view: str, dpi: int = 100) -> bytes:
    """Render the projection chart to PNG bytes."""
    fig = _draw_projection(results, view, figsize=(7, 3.6), dpi=dpi)
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight", facecolor="white")
    plt.close(fig)
    return buf.getvalue()
