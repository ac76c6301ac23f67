#!/usr/bin/env python3
"""
Static bar charts for the guide: vertical, grouped, stacked and horizontal.

Every plotting function takes the DataFrame, the category column and the
value column(s) and returns ``(fig, ax)`` so callers can tweak the chart
before saving it. ``generate_bar_chart_uri`` wraps them for the web app and
returns a base64 PNG data URI, or an error message instead of raising.
"""
import base64
import io
import logging
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd
from pandas.api.types import is_numeric_dtype

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from chart_advisor import validate_columns_for_bar_chart
from sample_data import clean_numeric_column, make_sales_frame, sum_by_category, to_long_format

logger = logging.getLogger(__name__)

PLOT_STYLE = 'seaborn-v0_8-whitegrid'
FIGSIZE = (7.5, 5)
PALETTE = "muted"


def _prepare(df: pd.DataFrame, category: str, series: Sequence[str]) -> pd.DataFrame:
    """
    Copies the needed columns, cleans the values to numbers and the category
    to text, then sums rows that share a category so each category is one bar.
    """
    if df is None or df.empty:
        raise ValueError("There is no data to plot.")
    missing = [c for c in [category, *series] if c not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {', '.join(missing)}.")
    data = df[[category, *series]].copy()
    for col in series:
        data[col] = clean_numeric_column(data[col])
        if not is_numeric_dtype(data[col].dtype):
            raise ValueError(f"Column '{col}' is not numerical, so it can't set bar lengths.")
    data[category] = data[category].astype(str)
    return sum_by_category(data, category, list(series))


def _new_figure():
    plt.style.use(PLOT_STYLE)
    return plt.subplots(figsize=FIGSIZE)


def annotate_bars(ax, fmt: str = "{:,.0f}", horizontal: bool = False, label_type: str = "edge"):
    """Writes the value of every bar next to it."""
    for container in ax.containers:
        labels = [fmt.format(v) for v in container.datavalues]
        ax.bar_label(container, labels=labels, label_type=label_type,
                     padding=3 if label_type == "edge" else 0, fontsize=9)
    if horizontal:
        ax.margins(x=0.12)
    else:
        ax.margins(y=0.1)
    return ax


def plot_vertical_bar(df: pd.DataFrame, category: str, value: str,
                      title: Optional[str] = None, annotate: bool = True):
    data = _prepare(df, category, [value])
    fig, ax = _new_figure()
    sns.barplot(data=data, x=category, y=value, hue=category, palette=PALETTE,
                errorbar=None, legend=False, ax=ax)
    ax.set_title(title or f"{value} by {category}", fontsize=12)
    ax.set_xlabel(category)
    ax.set_ylabel(value)
    if annotate:
        annotate_bars(ax)
    fig.tight_layout()
    return fig, ax


def plot_grouped_bar(df: pd.DataFrame, category: str, series: Sequence[str],
                     title: Optional[str] = None):
    """One bar per series, side by side within each category."""
    data = _prepare(df, category, series)
    long_df = to_long_format(data, category, series)
    fig, ax = _new_figure()
    sns.barplot(data=long_df, x=category, y="Value", hue="Series", palette=PALETTE,
                errorbar=None, ax=ax)
    ax.set_title(title or f"{' vs. '.join(series)} by {category}", fontsize=12)
    ax.set_xlabel(category)
    ax.set_ylabel("Value")
    ax.legend(title="Series", fontsize='small', title_fontsize='small')
    fig.tight_layout()
    return fig, ax


def plot_stacked_bar(df: pd.DataFrame, category: str, series: Sequence[str],
                     title: Optional[str] = None):
    """Stacks the series of each category so the bar height is the category total."""
    data = _prepare(df, category, series)
    fig, ax = _new_figure()
    data.set_index(category)[list(series)].plot(
        kind='bar', stacked=True, ax=ax, width=0.7,
        color=sns.color_palette(PALETTE, len(series)))
    ax.set_title(title or f"Total of {' + '.join(series)} by {category}", fontsize=12)
    ax.set_xlabel(category)
    ax.set_ylabel("Total")
    ax.tick_params(axis='x', rotation=0)
    ax.legend(title="Series", bbox_to_anchor=(1.02, 1), loc='upper left', fontsize='small')
    fig.tight_layout()
    return fig, ax


def plot_horizontal_bar(df: pd.DataFrame, category: str, value: str,
                        title: Optional[str] = None, sort: bool = True, annotate: bool = True):
    """Sideways bars; sorted ascending so the largest ends up on top."""
    data = _prepare(df, category, [value])
    if sort:
        data = data.sort_values(by=value, ascending=True)
    fig, ax = _new_figure()
    ax.barh(data[category], data[value], color=sns.color_palette("viridis", len(data)))
    ax.set_title(title or f"{value} by {category}", fontsize=12)
    ax.set_xlabel(value)
    ax.set_ylabel(category)
    if annotate:
        annotate_bars(ax, horizontal=True)
    fig.tight_layout()
    return fig, ax


PLOTTERS = {
    "vertical": plot_vertical_bar,
    "grouped": plot_grouped_bar,
    "stacked": plot_stacked_bar,
    "horizontal": plot_horizontal_bar,
}


def figure_to_data_uri(fig) -> str:
    img = io.BytesIO()
    fig.savefig(img, format='png', bbox_inches='tight')
    plt.close(fig)
    img.seek(0)
    return f"data:image/png;base64,{base64.b64encode(img.getvalue()).decode('utf8')}"


def save_figure(fig, path: str, dpi: int = 100) -> str:
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    logger.info("Saved chart to %s", path)
    return path


def generate_bar_chart_uri(df: pd.DataFrame, kind: str, category: str,
                           series: Union[str, List[str]], title: Optional[str] = None,
                           xlabel: Optional[str] = None,
                           ylabel: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
    """Draws the requested bar chart and returns (data URI, None), or (None, error message)."""
    series = [series] if isinstance(series, str) else list(series or [])
    if kind == "interactive":
        return None, "Interactive bar charts are rendered as HTML; use the interactive chart endpoint instead."
    validation_error = validate_columns_for_bar_chart(kind, category, series, df)
    if validation_error:
        return None, validation_error
    try:
        plotter = PLOTTERS[kind]
        if kind in ("vertical", "horizontal"):
            fig, ax = plotter(df, category, series[0], title=title)
        else:
            fig, ax = plotter(df, category, series, title=title)
        if xlabel is not None: ax.set_xlabel(xlabel)
        if ylabel is not None: ax.set_ylabel(ylabel)
        uri = figure_to_data_uri(fig)
        logger.info("Success: %s bar chart of %s by %s", kind, ", ".join(series), category)
        return uri, None
    except Exception as e:
        error_info = f"{type(e).__name__}: {e}"
        logger.error("Error during %s bar chart generation with %s: %s", kind, series, error_info)
        plt.close('all')
        return None, f"Failed to generate {kind} bar chart. ({error_info[:100]})"


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    sales = make_sales_frame()
    save_figure(plot_vertical_bar(sales, "Region", "Q1_Sales")[0], "vertical_bar_chart.png")
    save_figure(plot_grouped_bar(sales, "Region", ["Q1_Sales", "Q2_Sales"])[0], "grouped_bar_chart.png")
    save_figure(plot_stacked_bar(sales, "Region", ["Q1_Sales", "Q2_Sales"])[0], "stacked_bar_chart.png")
    save_figure(plot_horizontal_bar(sales, "Region", "Q2_Sales")[0], "horizontal_bar_chart.png")
