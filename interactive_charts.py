from __future__ import annotations

import logging
from typing import Sequence, Union

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from sample_data import clean_numeric_column, make_sales_frame, sum_by_category, to_long_format

logger = logging.getLogger(__name__)

BARMODES = ("group", "stack", "relative", "overlay")
ORIENTATIONS = ("v", "h")

THEME = {
    "bg_card": "#FFFFFF",
    "text_primary": "#111827",
    "text_secondary": "rgba(17, 24, 39, 0.72)",
    "border_color": "#E6E4E0",
    "grid": "rgba(17, 24, 39, 0.10)",
}


def create_plotly_theme() -> dict:
    """
    Shared Plotly styling for the guide:
    - white chart surface
    - the seaborn "muted" colors, so static and interactive charts match
    - soft grids, legend above the plot
    """
    return {
        "font_family": "DejaVu Sans, system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif",
        "font_color": THEME["text_primary"],
        "paper_bgcolor": THEME["bg_card"],
        "plot_bgcolor": THEME["bg_card"],
        "colorway": ["#4878D0", "#EE854A", "#6ACC64", "#D65F5F", "#956CB4", "#8C613C"],
        "gridcolor": THEME["grid"],
        "axis_linecolor": THEME["border_color"],
        "legend": {
            "orientation": "h",
            "yanchor": "bottom",
            "y": 1.02,
            "xanchor": "left",
            "x": 0,
            "font": {"color": THEME["text_secondary"]},
        },
        "title_font": {"color": THEME["text_primary"], "size": 16},
    }


def apply_plotly_theme(fig: go.Figure, x_title: str, y_title: str) -> go.Figure:
    theme = create_plotly_theme()
    fig.update_layout(
        margin=dict(l=10, r=10, t=60, b=10),
        font=dict(family=theme["font_family"], color=theme["font_color"]),
        paper_bgcolor=theme["paper_bgcolor"],
        plot_bgcolor=theme["plot_bgcolor"],
        colorway=theme["colorway"],
        legend=theme["legend"],
        title_font=theme["title_font"],
    )
    for update_axes in (fig.update_xaxes, fig.update_yaxes):
        update_axes(
            gridcolor=theme["gridcolor"],
            linecolor=theme["axis_linecolor"],
            tickfont=dict(color=THEME["text_secondary"]),
            title_font=dict(color=THEME["text_secondary"]),
        )
    fig.update_xaxes(title_text=x_title)
    fig.update_yaxes(title_text=y_title)
    return fig


def interactive_bar(
    df: pd.DataFrame,
    category: str,
    series: Union[str, Sequence[str]],
    barmode: str = "group",
    orientation: str = "v",
    title: str = "",
) -> go.Figure:
    """
    Plotly bar chart of one or more value columns. Rows that repeat a category
    are summed first, the same as the static charts.
    """
    if barmode not in BARMODES:
        raise ValueError(f"barmode must be one of {', '.join(BARMODES)}, got '{barmode}'.")
    if orientation not in ORIENTATIONS:
        raise ValueError(f"orientation must be 'v' or 'h', got '{orientation}'.")
    series = [series] if isinstance(series, str) else list(series)
    if not series:
        raise ValueError("No value columns selected.")
    missing = [c for c in [category, *series] if c not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {', '.join(missing)}.")

    data = df.copy()
    for col in series:
        data[col] = pd.to_numeric(clean_numeric_column(data[col]), errors="coerce")
    data[category] = data[category].astype(str)
    long_df = to_long_format(sum_by_category(data, category, series), category, series)

    if orientation == "v":
        fig = px.bar(long_df, x=category, y="Value", color="Series", barmode=barmode,
                     title=title, text_auto=True)
        # Keep the value axis anchored at zero.
        fig.update_yaxes(rangemode="tozero")
        apply_plotly_theme(fig, x_title=category, y_title="Value")
    else:
        fig = px.bar(long_df, x="Value", y=category, color="Series", barmode=barmode,
                     orientation="h", title=title, text_auto=True)
        fig.update_xaxes(rangemode="tozero")
        apply_plotly_theme(fig, x_title="Value", y_title=category)
    cat_axis, value_axis = ("x", "y") if orientation == "v" else ("y", "x")
    fig.update_traces(
        hovertemplate=f"{category}=%{{{cat_axis}}}<br>%{{fullData.name}}=%{{{value_axis}}}<extra></extra>"
    )
    return fig


def figure_to_html(fig: go.Figure, full_html: bool = False, include_plotlyjs: Union[str, bool] = "cdn") -> str:
    return fig.to_html(full_html=full_html, include_plotlyjs=include_plotlyjs)


def save_interactive(fig: go.Figure, path: str, include_plotlyjs: Union[str, bool] = "cdn") -> str:
    fig.write_html(path, include_plotlyjs=include_plotlyjs)
    logger.info("Saved interactive chart to %s", path)
    return path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    save_interactive(
        interactive_bar(make_sales_frame(), "Region", ["Q1_Sales", "Q2_Sales"], title="Quarterly Sales by Region"),
        "interactive_bar_chart.html",
    )
