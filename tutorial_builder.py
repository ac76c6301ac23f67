#!/usr/bin/env python3
"""
Builds the bar chart guide as a single Markdown document.

The prose comes from chart_explanations; the code blocks are the SNIPPETS
below. Each snippet is a complete script that rebuilds the example sales
table and saves exactly one chart, so every block in the document can be
copied and run on its own.
"""
import argparse
import logging
import os
import subprocess
import sys
from typing import Iterable, List, Sequence

from chart_explanations import (BAR_CHART_DETAILS, BEST_PRACTICES, COMPARISON_TABLE,
                                EXERCISES, GLOSSARY, PITFALLS, REFERENCE_LINKS,
                                get_chart_explanation, list_chart_types)
from sample_data import make_sales_frame

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "bar_charts_tutorial.md"
SNIPPET_TIMEOUT = int(os.environ.get('BARCHART_SNIPPET_TIMEOUT', '120'))

_DATA_BLOCK = '''df = pd.DataFrame({
    "Region": ["North", "South", "East", "West"],
    "Q1_Sales": [250, 180, 310, 220],
    "Q2_Sales": [270, 195, 290, 240],
})
'''

_MPL_IMPORTS = '''import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

'''

SNIPPETS = {
    "vertical": _MPL_IMPORTS + _DATA_BLOCK + '''
fig, ax = plt.subplots(figsize=(7.5, 5))
sns.barplot(data=df, x="Region", y="Q1_Sales", hue="Region", palette="muted",
            errorbar=None, legend=False, ax=ax)
for container in ax.containers:
    ax.bar_label(container, padding=3)
ax.set_title("Q1 Sales by Region")
ax.set_ylabel("Sales (units)")
fig.tight_layout()
fig.savefig("vertical_bar_chart.png", dpi=100)
plt.close(fig)
''',
    "grouped": _MPL_IMPORTS + _DATA_BLOCK + '''
long_df = df.melt(id_vars="Region", value_vars=["Q1_Sales", "Q2_Sales"],
                  var_name="Quarter", value_name="Sales")

fig, ax = plt.subplots(figsize=(7.5, 5))
sns.barplot(data=long_df, x="Region", y="Sales", hue="Quarter", palette="muted",
            errorbar=None, ax=ax)
ax.set_title("Q1 vs. Q2 Sales by Region")
ax.set_ylabel("Sales (units)")
fig.tight_layout()
fig.savefig("grouped_bar_chart.png", dpi=100)
plt.close(fig)
''',
    "stacked": _MPL_IMPORTS + _DATA_BLOCK + '''
ax = df.set_index("Region")[["Q1_Sales", "Q2_Sales"]].plot(
    kind="bar", stacked=True, figsize=(7.5, 5), width=0.7,
    color=sns.color_palette("muted", 2))
ax.set_title("Half-Year Sales by Region")
ax.set_ylabel("Sales (units)")
ax.tick_params(axis="x", rotation=0)
ax.legend(title="Quarter")
plt.tight_layout()
plt.savefig("stacked_bar_chart.png", dpi=100)
plt.close()
''',
    "horizontal": _MPL_IMPORTS + _DATA_BLOCK + '''
ranked = df.sort_values("Q2_Sales")

fig, ax = plt.subplots(figsize=(7.5, 5))
bars = ax.barh(ranked["Region"], ranked["Q2_Sales"], color=sns.color_palette("viridis", len(ranked)))
ax.bar_label(bars, padding=3)
ax.set_title("Q2 Sales Ranking")
ax.set_xlabel("Sales (units)")
fig.tight_layout()
fig.savefig("horizontal_bar_chart.png", dpi=100)
plt.close(fig)
''',
    "interactive": '''import pandas as pd
import plotly.express as px

''' + _DATA_BLOCK + '''
long_df = df.melt(id_vars="Region", value_vars=["Q1_Sales", "Q2_Sales"],
                  var_name="Quarter", value_name="Sales")

fig = px.bar(long_df, x="Region", y="Sales", color="Quarter", barmode="group",
             title="Quarterly Sales by Region", text_auto=True)
fig.update_yaxes(rangemode="tozero")
fig.write_html("interactive_bar_chart.html", include_plotlyjs="cdn")
''',
}


def render_markdown_table(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    def _cell(value) -> str:
        return str(value).replace("|", "\\|")
    lines = ["| " + " | ".join(_cell(h) for h in headers) + " |",
             "| " + " | ".join("---" for _ in headers) + " |"]
    for row in rows:
        lines.append("| " + " | ".join(_cell(v) for v in row) + " |")
    return "\n".join(lines)


def render_comparison_table(rows=COMPARISON_TABLE) -> str:
    return render_markdown_table(("Chart type", "Best for", "Series", "Watch out for"), rows)


def _code_block(code: str, language: str = "python") -> str:
    return f"```{language}\n{code.rstrip()}\n```"


def _chart_section(details: dict) -> List[str]:
    parts = [f"## {details['title']}", "", details["description"], "", "**When to use it:**", ""]
    parts += [f"- {item}" for item in details["when_to_use"]]
    parts += ["", f"**Example:** {details['example']}", "",
              f"**Best for:** *{details['best_for']}*", "",
              "Calls demonstrated: " + ", ".join(f"`{c}`" for c in details["library_calls"]), "",
              _code_block(SNIPPETS[details["kind"]]), ""]
    if details["image_name"].endswith(".png"):
        parts += [f"![{details['title']}]({details['image_name']})", ""]
    else:
        parts += [f"Open `{details['image_name']}` in a browser to explore the chart.", ""]
    return parts


def build_tutorial_markdown() -> str:
    """Assembles the complete guide as one Markdown string."""
    sales = make_sales_frame()
    parts = [
        "# Bar Charts in Python: A Practical Guide",
        "",
        "Bar charts encode magnitude as the length of a rectangle drawn against a categorical axis. "
        "They are the first chart most analysts reach for, and also one of the easiest to get subtly wrong. "
        "This guide walks through five variants with pandas, matplotlib, seaborn and plotly, "
        "then covers style, common pitfalls and a few exercises.",
        "",
        "## The Example Data",
        "",
        "Every example uses the same small table of quarterly sales per region:",
        "",
        render_markdown_table(list(sales.columns), sales.itertuples(index=False)),
        "",
        _code_block("import pandas as pd\n\n" + _DATA_BLOCK),
        "",
    ]
    for details in BAR_CHART_DETAILS.values():
        parts += _chart_section(details)

    parts += ["## Choosing a Bar Chart", "", render_comparison_table(), ""]
    parts += ["## Best Practices", ""] + [f"- {tip}" for tip in BEST_PRACTICES] + [""]
    parts += ["## Common Pitfalls", ""]
    parts += [f"- **{p['title']}**: {p['advice']}" for p in PITFALLS.values()] + [""]
    parts += ["## Exercises", ""] + [f"{i}. {e}" for i, e in enumerate(EXERCISES, start=1)] + [""]
    parts += ["## Glossary", ""] + [f"- **{term}**: {meaning}" for term, meaning in GLOSSARY.items()] + [""]
    parts += ["## Further Reading", ""] + [f"- [{name}]({url})" for name, url in REFERENCE_LINKS.items()]
    return "\n".join(parts) + "\n"


def write_tutorial(path: str = DEFAULT_OUTPUT) -> str:
    with open(path, 'w', encoding='utf-8') as f:
        f.write(build_tutorial_markdown())
    logger.info("Wrote tutorial to %s", path)
    return path


def run_snippet(kind: str, workdir: str, timeout: int = SNIPPET_TIMEOUT) -> str:
    """
    Runs one snippet in a fresh interpreter with workdir as its working
    directory and returns the path of the file it saved. The caller's
    process and working directory are left untouched.
    """
    details = get_chart_explanation(kind)
    code = SNIPPETS[details["kind"]]
    workdir = os.path.abspath(workdir)
    os.makedirs(workdir, exist_ok=True)
    try:
        subprocess.run(
            [sys.executable, "-c", code],
            cwd=workdir,
            env={**os.environ, "MPLBACKEND": "Agg"},
            check=True,
            capture_output=True,
            text=True,
            timeout=timeout
        )
    except subprocess.CalledProcessError as e:
        logger.error("Snippet %s exited with %s: %s", details["kind"], e.returncode, e.stderr)
        raise RuntimeError(f"Snippet '{details['kind']}' failed: {(e.stderr or '').strip()[-300:]}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Snippet %s timed out after %ss", details["kind"], timeout)
        raise RuntimeError(f"Snippet '{details['kind']}' timed out after {timeout}s.") from e
    output_path = os.path.join(workdir, details["image_name"])
    if not os.path.exists(output_path):
        raise FileNotFoundError(f"Snippet '{details['kind']}' did not produce {details['image_name']}.")
    logger.info("Snippet %s produced %s", details["kind"], output_path)
    return output_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate the bar chart guide as Markdown.")
    parser.add_argument('--output', default=DEFAULT_OUTPUT, help='Where to write the Markdown file.')
    parser.add_argument(
        '--run-snippets',
        metavar='DIR',
        help='Also execute every code example and save its chart into DIR.'
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    write_tutorial(args.output)
    if args.run_snippets:
        for kind in list_chart_types():
            try:
                run_snippet(kind, args.run_snippets)
            except Exception as e:
                logger.error("Snippet %s failed: %s", kind, e)
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
