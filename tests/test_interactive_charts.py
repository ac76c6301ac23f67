"""Tests for the plotly bar charts and their theme."""

import pytest

from interactive_charts import (
    apply_plotly_theme,
    create_plotly_theme,
    figure_to_html,
    interactive_bar,
    save_interactive,
)


def test_grouped_interactive_bar_has_one_trace_per_series(sales_df):
    fig = interactive_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"], title="Sales")
    assert fig.layout.barmode == "group"
    assert [trace.name for trace in fig.data] == ["Q1_Sales", "Q2_Sales"]
    assert list(fig.data[0].x) == ["North", "South", "East", "West"]
    assert list(fig.data[0].y) == [250, 180, 310, 220]
    assert fig.layout.title.text == "Sales"


def test_stack_mode_and_zero_baseline(sales_df):
    fig = interactive_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"], barmode="stack")
    assert fig.layout.barmode == "stack"
    assert fig.layout.yaxis.rangemode == "tozero"


def test_horizontal_orientation_swaps_axes(sales_df):
    fig = interactive_bar(sales_df, "Region", "Q2_Sales", orientation="h")
    assert fig.data[0].orientation == "h"
    assert list(fig.data[0].y) == ["North", "South", "East", "West"]
    assert fig.layout.yaxis.title.text == "Region"
    assert fig.layout.xaxis.title.text == "Value"


def test_hover_shows_category_and_series(sales_df):
    fig = interactive_bar(sales_df, "Region", ["Q1_Sales"])
    assert fig.data[0].hovertemplate == "Region=%{x}<br>%{fullData.name}=%{y}<extra></extra>"


def test_repeated_categories_are_summed(repeated_df):
    fig = interactive_bar(repeated_df, "Region", "A")
    assert list(fig.data[0].x) == ["North", "South"]
    assert list(fig.data[0].y) == [40, 5]


@pytest.mark.parametrize("kwargs, message", [
    ({"barmode": "pile"}, "barmode"),
    ({"orientation": "x"}, "orientation"),
])
def test_invalid_layout_options_raise(sales_df, kwargs, message):
    with pytest.raises(ValueError, match=message):
        interactive_bar(sales_df, "Region", ["Q1_Sales"], **kwargs)


def test_missing_column_raises(sales_df):
    with pytest.raises(ValueError, match="Q4_Sales"):
        interactive_bar(sales_df, "Region", ["Q4_Sales"])


def test_no_series_raises(sales_df):
    with pytest.raises(ValueError, match="No value columns"):
        interactive_bar(sales_df, "Region", [])


def test_theme_is_applied(sales_df):
    theme = create_plotly_theme()
    fig = interactive_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"])
    assert fig.layout.paper_bgcolor == theme["paper_bgcolor"]
    assert list(fig.layout.colorway) == theme["colorway"]
    assert fig.layout.xaxis.title.text == "Region"


def test_apply_plotly_theme_sets_axis_titles(sales_df):
    fig = interactive_bar(sales_df, "Region", ["Q1_Sales"])
    apply_plotly_theme(fig, x_title="Area", y_title="Units")
    assert fig.layout.xaxis.title.text == "Area"
    assert fig.layout.yaxis.title.text == "Units"


def test_figure_to_html_returns_fragment(sales_df):
    html = figure_to_html(interactive_bar(sales_df, "Region", ["Q1_Sales"]))
    assert "<div" in html
    assert "<html>" not in html


def test_save_interactive_writes_html(tmp_path, sales_df):
    path = tmp_path / "chart.html"
    save_interactive(interactive_bar(sales_df, "Region", ["Q1_Sales"]), str(path))
    assert "plotly" in path.read_text(encoding="utf-8").lower()
