"""Tests for the static bar chart functions and the data URI wrapper."""

import base64

import pandas as pd
import pytest

from bar_charts import (
    figure_to_data_uri,
    generate_bar_chart_uri,
    plot_grouped_bar,
    plot_horizontal_bar,
    plot_stacked_bar,
    plot_vertical_bar,
    save_figure,
)


def _bar_heights(ax):
    return sorted(bar.get_height() for container in ax.containers for bar in container)


# ---------------------------------------------------------------------------
# Plotting functions
# ---------------------------------------------------------------------------

def test_vertical_bar_draws_one_bar_per_region(sales_df):
    fig, ax = plot_vertical_bar(sales_df, "Region", "Q1_Sales")
    assert _bar_heights(ax) == [180, 220, 250, 310]
    assert ax.get_title() == "Q1_Sales by Region"
    assert ax.get_ylabel() == "Q1_Sales"


def test_vertical_bar_labels_every_bar(sales_df):
    _, ax = plot_vertical_bar(sales_df, "Region", "Q1_Sales")
    assert sorted(t.get_text() for t in ax.texts) == ["180", "220", "250", "310"]


def test_vertical_bar_without_annotations(sales_df):
    _, ax = plot_vertical_bar(sales_df, "Region", "Q1_Sales", annotate=False, title="Q1")
    assert len(ax.texts) == 0
    assert ax.get_title() == "Q1"


def test_grouped_bar_has_one_container_per_series(sales_df):
    _, ax = plot_grouped_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"])
    assert len(ax.containers) == 2
    assert [t.get_text() for t in ax.get_legend().get_texts()] == ["Q1_Sales", "Q2_Sales"]
    assert _bar_heights(ax) == sorted([250, 180, 310, 220, 270, 195, 290, 240])


def test_stacked_bar_puts_second_series_on_top_of_first(sales_df):
    _, ax = plot_stacked_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"])
    q1_bars, q2_bars = ax.containers
    for q1, q2 in zip(q1_bars, q2_bars):
        assert q2.get_y() == pytest.approx(q1.get_height())
    totals = [q1.get_height() + q2.get_height() for q1, q2 in zip(q1_bars, q2_bars)]
    assert totals == [520, 375, 600, 460]


def test_horizontal_bar_is_sorted_ascending(sales_df):
    _, ax = plot_horizontal_bar(sales_df, "Region", "Q2_Sales")
    widths = [bar.get_width() for bar in ax.containers[0]]
    assert widths == [195, 240, 270, 290]
    assert ax.get_xlabel() == "Q2_Sales"


def test_horizontal_bar_keeps_order_when_unsorted(sales_df):
    _, ax = plot_horizontal_bar(sales_df, "Region", "Q2_Sales", sort=False, annotate=False)
    assert [bar.get_width() for bar in ax.containers[0]] == [270, 195, 290, 240]


def test_currency_strings_are_plotted_as_numbers():
    df = pd.DataFrame({"Store": ["A", "B"], "Revenue": ["$1,000", "$2,500"]})
    _, ax = plot_vertical_bar(df, "Store", "Revenue", annotate=False)
    assert _bar_heights(ax) == [1000, 2500]


def test_empty_frame_raises():
    with pytest.raises(ValueError, match="no data"):
        plot_vertical_bar(pd.DataFrame(), "Region", "Q1_Sales")


def test_text_values_raise(sales_df):
    with pytest.raises(ValueError, match="not numerical"):
        plot_horizontal_bar(sales_df, "Q1_Sales", "Region")


def test_missing_column_raises(sales_df):
    with pytest.raises(ValueError, match="Q9"):
        plot_grouped_bar(sales_df, "Region", ["Q1_Sales", "Q9"])


# ---------------------------------------------------------------------------
# Repeated categories are summed into one bar
# ---------------------------------------------------------------------------

def test_vertical_bar_sums_repeated_categories(repeated_df):
    _, ax = plot_vertical_bar(repeated_df, "Region", "A")
    assert _bar_heights(ax) == [5, 40]
    assert [t.get_text() for t in ax.get_xticklabels()] == ["North", "South"]


def test_horizontal_bar_draws_one_bar_per_repeated_category(repeated_df):
    _, ax = plot_horizontal_bar(repeated_df, "Region", "A", annotate=False)
    assert [bar.get_width() for bar in ax.containers[0]] == [5, 40]
    assert [t.get_text() for t in ax.get_yticklabels()] == ["South", "North"]


def test_stacked_bar_totals_repeated_categories(repeated_df):
    _, ax = plot_stacked_bar(repeated_df, "Region", ["A", "B"])
    assert [t.get_text() for t in ax.get_xticklabels()] == ["North", "South"]
    a_bars, b_bars = ax.containers
    totals = [a.get_height() + b.get_height() for a, b in zip(a_bars, b_bars)]
    assert totals == [43, 8]


def test_grouped_bar_sums_repeated_categories(repeated_df):
    _, ax = plot_grouped_bar(repeated_df, "Region", ["A", "B"])
    assert _bar_heights(ax) == [3, 3, 5, 40]


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def test_figure_to_data_uri_is_a_png(sales_df):
    fig, _ = plot_vertical_bar(sales_df, "Region", "Q1_Sales")
    uri = figure_to_data_uri(fig)
    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(b"\x89PNG")


def test_save_figure_writes_file(tmp_path, sales_df):
    fig, _ = plot_stacked_bar(sales_df, "Region", ["Q1_Sales", "Q2_Sales"])
    path = save_figure(fig, str(tmp_path / "stacked.png"))
    assert (tmp_path / "stacked.png").stat().st_size > 0
    assert path.endswith("stacked.png")


@pytest.mark.parametrize("kind, series", [
    ("vertical", "Q1_Sales"),
    ("grouped", ["Q1_Sales", "Q2_Sales"]),
    ("stacked", ["Q1_Sales", "Q2_Sales"]),
    ("horizontal", ["Q2_Sales"]),
])
def test_generate_bar_chart_uri_for_each_static_kind(sales_df, kind, series):
    uri, error = generate_bar_chart_uri(sales_df, kind, "Region", series)
    assert error is None
    assert uri.startswith("data:image/png;base64,")


def test_generate_bar_chart_uri_returns_validation_message(sales_df):
    uri, error = generate_bar_chart_uri(sales_df, "grouped", "Region", ["Q1_Sales"])
    assert uri is None
    assert "at least 2 value columns" in error


def test_generate_bar_chart_uri_points_interactive_elsewhere(sales_df):
    uri, error = generate_bar_chart_uri(sales_df, "interactive", "Region", ["Q1_Sales"])
    assert uri is None
    assert "HTML" in error


def test_generate_bar_chart_uri_applies_custom_labels(sales_df, monkeypatch):
    captured = {}

    def fake_uri(fig):
        ax = fig.axes[0]
        captured.update(xlabel=ax.get_xlabel(), ylabel=ax.get_ylabel(), title=ax.get_title())
        return "data:image/png;base64,"

    monkeypatch.setattr("bar_charts.figure_to_data_uri", fake_uri)
    generate_bar_chart_uri(sales_df, "vertical", "Region", "Q1_Sales",
                           title="Sales", xlabel="Area", ylabel="Units")
    assert captured == {"xlabel": "Area", "ylabel": "Units", "title": "Sales"}


def test_generate_bar_chart_uri_accepts_year_categories():
    df = pd.DataFrame({"Year": [2019, 2020, 2021, 2022], "Sales": [120, 135, 150, 160]})
    uri, error = generate_bar_chart_uri(df, "vertical", "Year", "Sales")
    assert error is None
    assert uri.startswith("data:image/png;base64,")
