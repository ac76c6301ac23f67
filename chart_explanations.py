# This file contains the detailed explanations for the bar chart family,
# plus the comparison table, pitfalls, exercises and glossary of the guide.
import re
from typing import Any, Dict, List

BAR_CHART_DETAILS = {
    "📊 Vertical Bar Chart": {
        "kind": "vertical",
        "title": "📊 Vertical Bar Chart: Comparing Categories",
        "description": "A Vertical Bar Chart (often called a column chart) uses upright rectangular bars to compare a single numerical value across discrete categories. The height of each bar is proportional to the value it represents, so the tallest and shortest categories stand out immediately.",
        "when_to_use": [
            "Comparing one numerical measure across a handful of groups (e.g., Q1 sales per region).",
            "Showing counts of items in different categories (e.g., number of orders per product).",
            "When the category labels are short and there are fewer than about 12 of them."
        ],
        "example": "With quarterly sales for North, South, East and West, a vertical bar chart of Q1_Sales shows at a glance that East led the quarter.",
        "best_for": "Comparing one value across a small number of distinct categories.",
        "library_calls": ["seaborn.barplot", "matplotlib.axes.Axes.bar_label"],
        "image_name": "vertical_bar_chart.png"
    },
    "👥 Grouped Bar Chart": {
        "kind": "grouped",
        "title": "👥 Grouped Bar Chart: Comparing Series Side by Side",
        "description": "A Grouped Bar Chart (or clustered bar chart) draws several bars per category, one for each data series, placed side by side. It lets you compare the series within a category and the categories against each other.",
        "when_to_use": [
            "Comparing two to five related measures for each category (e.g., Q1 vs. Q2 sales per region).",
            "Spotting which categories grew or shrank between periods.",
            "When the individual values matter more than their total."
        ],
        "example": "Placing Q1_Sales and Q2_Sales next to each other for every region reveals that the West grew while the East slipped slightly.",
        "best_for": "Comparing a few series within and across categories.",
        "library_calls": ["pandas.DataFrame.melt", "seaborn.barplot"],
        "image_name": "grouped_bar_chart.png"
    },
    "🧱 Stacked Bar Chart": {
        "kind": "stacked",
        "title": "🧱 Stacked Bar Chart: Showing Parts of a Whole",
        "description": "A Stacked Bar Chart renders the series of each category as segments stacked on top of one another, so the full bar height is the category total. It answers 'how big is the whole?' and 'what is it made of?' in one picture.",
        "when_to_use": [
            "The total per category is the main message and the parts are secondary (e.g., half-year sales built from Q1 and Q2).",
            "All values are positive, so the segments add up cleanly.",
            "There are only a few series; comparing middle segments gets hard as stacks grow."
        ],
        "example": "Stacking Q1_Sales and Q2_Sales per region shows each region's half-year total, with the quarters visible as the two segments.",
        "best_for": "Showing category totals together with their composition.",
        "library_calls": ["pandas.DataFrame.plot"],
        "image_name": "stacked_bar_chart.png"
    },
    "↔️ Horizontal Bar Chart": {
        "kind": "horizontal",
        "title": "↔️ Horizontal Bar Chart: Long Labels and Rankings",
        "description": "A Horizontal Bar Chart lays the bars out sideways, with categories on the vertical axis. Long category names stay readable without rotation, and sorted bars read naturally as a ranking.",
        "when_to_use": [
            "Category labels are long (e.g., product names or survey answers).",
            "You have many categories and want a ranked list (top 10, top 20).",
            "The order of the categories carries the message."
        ],
        "example": "Sorting regions by Q2_Sales and drawing them horizontally produces a leaderboard with the best region at the top.",
        "best_for": "Ranking many categories or showing long labels.",
        "library_calls": ["matplotlib.axes.Axes.barh", "pandas.DataFrame.sort_values"],
        "image_name": "horizontal_bar_chart.png"
    },
    "🖱️ Interactive Bar Chart": {
        "kind": "interactive",
        "title": "🖱️ Interactive Bar Chart: Hover, Zoom and Toggle",
        "description": "An Interactive Bar Chart is rendered in the browser. Readers can hover for exact values, zoom into a range, and click legend entries to hide or show series. The same chart can switch between grouped and stacked layouts.",
        "when_to_use": [
            "Sharing charts in notebooks, dashboards or web pages rather than static reports.",
            "Readers need exact values without cluttering the chart with labels.",
            "Exploring data where toggling series on and off helps the comparison."
        ],
        "example": "A plotly grouped bar chart of Q1_Sales and Q2_Sales saved as HTML lets a reader hover over each bar for its exact value.",
        "best_for": "Exploration and sharing in a browser.",
        "library_calls": ["plotly.express.bar", "plotly.graph_objects.Figure.write_html"],
        "image_name": "interactive_bar_chart.html"
    }
}

COMPARISON_TABLE = [
    ("Vertical", "One value across few categories", "1", "More than ~12 categories"),
    ("Grouped", "Comparing series within each category", "2-5", "Too many series per group"),
    ("Stacked", "Totals and their composition", "2-5", "Negative values, comparing middle segments"),
    ("Horizontal", "Rankings and long labels", "1", "Unsorted bars hide the ranking"),
    ("Interactive", "Exploration in a browser", "1+", "Static exports lose the interactivity"),
]

PITFALLS = {
    "misleading_axis": {
        "title": "Misleading value axis",
        "advice": "Bar length encodes magnitude, so the value axis must start at zero. A truncated axis exaggerates small differences."
    },
    "overcrowded_categories": {
        "title": "Overcrowded categories",
        "advice": "More than about 12 bars become hard to read. Switch to a horizontal chart, keep the top N, or group the rest into 'Other'."
    },
    "negative_stacking": {
        "title": "Stacking negative values",
        "advice": "Negative segments hang below the axis and break the 'parts add up to the total' reading. Use a grouped chart instead."
    },
    "too_many_series": {
        "title": "Too many series",
        "advice": "Beyond about five series per category the bars get thin and the colors hard to tell apart. Split the chart or use small multiples."
    },
    "long_labels": {
        "title": "Long category labels",
        "advice": "Rotated or overlapping tick labels are hard to read. A horizontal bar chart keeps long labels level."
    },
}

BEST_PRACTICES = [
    "Start the value axis at zero.",
    "Sort bars by value unless the categories have a natural order (months, age bands).",
    "Label the axes and give the chart a title that states the takeaway.",
    "Use one color per series and keep the palette consistent across charts.",
    "Add value labels when exact numbers matter, and drop the gridlines they make redundant.",
    "Leave a small gap between groups so readers can tell where a category ends.",
]

EXERCISES = [
    "Draw a vertical bar chart of Q2_Sales and add value labels above each bar.",
    "Turn the grouped chart into a stacked chart. Which question does each version answer better?",
    "Add a third quarter column with one negative value and stack it. What goes wrong?",
    "Sort the horizontal bar chart in descending order and highlight the top region in a different color.",
    "Make the interactive chart switch between grouped and stacked layouts using plotly's barmode.",
    "Set the y-axis to start at 150 on the vertical chart and describe how the impression changes.",
]

GLOSSARY = {
    "Bar chart": "A chart encoding magnitude as rectangular bar length along one axis, against a categorical axis.",
    "Grouped bar chart": "Multiple bars per category, placed side by side, one per data series.",
    "Stacked bar chart": "Multiple series per category rendered as vertically stacked segments summing to a total.",
    "Horizontal bar chart": "A bar chart with the categorical axis on the vertical side and bars extending to the right.",
    "Interactive chart": "A chart rendered in the browser that responds to hover, zoom and legend clicks.",
}

REFERENCE_LINKS = {
    "pandas plotting": "https://pandas.pydata.org/docs/reference/api/pandas.DataFrame.plot.bar.html",
    "matplotlib bar": "https://matplotlib.org/stable/api/_as_gen/matplotlib.axes.Axes.bar.html",
    "seaborn barplot": "https://seaborn.pydata.org/generated/seaborn.barplot.html",
    "plotly bar charts": "https://plotly.com/python/bar-charts/",
}

_KIND_SUFFIX = re.compile(r"\s*bar\s*chart\s*$")


def _normalize_name(name: str) -> str:
    """Lowercases and drops emoji, punctuation and the trailing 'bar chart'."""
    cleaned = re.sub(r"[^a-z ]", " ", name.lower())
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return _KIND_SUFFIX.sub("", cleaned).strip()


def list_chart_types() -> List[str]:
    return [details["kind"] for details in BAR_CHART_DETAILS.values()]


def get_chart_explanation(name: str) -> Dict[str, Any]:
    """Looks up an explanation by display key, kind, or a loose name like 'Stacked Bar Chart'."""
    if name in BAR_CHART_DETAILS:
        return BAR_CHART_DETAILS[name]
    wanted = _normalize_name(name)
    for details in BAR_CHART_DETAILS.values():
        if wanted == details["kind"]:
            return details
    raise KeyError(f"No explanation for chart type '{name}'. Known types: {', '.join(list_chart_types())}")


def format_explanation_html(details: Dict[str, Any]) -> str:
    html = f"<strong>{details['title']}</strong><br><br>{details['description']}<br><br>"
    html += "<strong>When to use it:</strong><ul>"
    for item in details.get("when_to_use", []):
        html += f"<li>{item}</li>"
    html += "</ul>"
    if details.get("example"):
        html += f"<strong>Example:</strong> {details['example']}<br>"
    if details.get("best_for"):
        html += f"<strong>Best for:</strong> <em>{details['best_for']}</em>"
    return html
