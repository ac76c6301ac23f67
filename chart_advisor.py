"""
Column validation and pitfall review for bar charts.

Validation answers "can this chart be drawn from these columns?" and returns
a friendly error message when it cannot. Review answers "will this chart
mislead or overwhelm the reader?" and returns advisory warnings. Warnings
never stop a chart from being drawn.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd
from pandas.api.types import is_numeric_dtype

from chart_explanations import PITFALLS
from sample_data import clean_numeric_column

logger = logging.getLogger(__name__)

BAR_CHART_KINDS = ("vertical", "grouped", "stacked", "horizontal", "interactive")
SINGLE_SERIES_KINDS = ("vertical", "horizontal")
MULTI_SERIES_KINDS = ("grouped", "stacked")

MAX_CATEGORIES = 12
MAX_SERIES = 5
LONG_LABEL_CHARS = 15
CATEGORICAL_NUMERIC_MAX_UNIQUE = 10


@dataclass(frozen=True)
class Pitfall:
    code: str
    message: str
    severity: str = "warning"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _as_list(series: Union[str, Sequence[str], None]) -> List[str]:
    if series is None:
        return []
    if isinstance(series, str):
        return [series]
    return list(series)


def get_simplified_column_types(df: pd.DataFrame) -> Dict[str, str]:
    simplified_types = {}
    if df is None or df.empty: return simplified_types
    for col_name in df.columns:
        series = clean_numeric_column(df[col_name])
        non_null_count = series.count()
        if non_null_count == 0:
            simplified_types[col_name] = 'empty'
            continue
        if is_numeric_dtype(series.dtype) and series.dtype != bool:
            values = series.dropna()
            unique_count = values.nunique()
            is_whole = bool((values % 1 == 0).all())
            if is_whole and unique_count <= CATEGORICAL_NUMERIC_MAX_UNIQUE and unique_count < non_null_count * 0.5:
                simplified_types[col_name] = 'categorical_numeric'
            else:
                simplified_types[col_name] = 'numerical'
        else:
            simplified_types[col_name] = 'categorical'
    return simplified_types


def _is_whole_number_key(series: pd.Series) -> bool:
    """Whole numbers with few distinct values, like years, read fine as bar labels."""
    values = pd.to_numeric(clean_numeric_column(series), errors='coerce').dropna()
    if values.empty:
        return False
    return bool((values % 1 == 0).all()) and values.nunique() <= MAX_CATEGORIES


def validate_columns_for_bar_chart(kind: str, category: Optional[str], series, df: pd.DataFrame) -> Optional[str]:
    """Returns an error message when the columns cannot make this kind of bar chart, else None."""
    if kind not in BAR_CHART_KINDS:
        return f"Unknown bar chart type '{kind}'. Choose one of: {', '.join(BAR_CHART_KINDS)}."
    series = _as_list(series)
    if df is None or df.empty: return "There is no data to plot."
    if not category: return "No category column selected."
    if not series: return "No value columns selected."
    missing = [col for col in [category, *series] if col not in df.columns]
    if missing: return f"Column(s) not found: {', '.join(missing)}. Check spelling?"
    if category in series: return f"'{category}' cannot be both the category and a value column."
    if len(set(series)) != len(series): return "Each value column can only be selected once."

    col_types = get_simplified_column_types(df[[category, *series]])
    if col_types.get(category) == 'numerical' and not _is_whole_number_key(df[category]):
        return (f"'{category}' looks like a continuous number, so it can't be the category axis of a bar chart. "
                f"Pick a column like 'Region' or 'Product', or use a histogram instead.")
    if col_types.get(category) == 'empty':
        return f"'{category}' has no values."
    non_numeric = [c for c in series if col_types.get(c) not in ('numerical', 'categorical_numeric')]
    if non_numeric:
        details = "; ".join(f"'{c}' (as {col_types.get(c, 'unknown')})" for c in non_numeric)
        return f"Bar heights need numerical columns. These are not numerical: {details}."

    label = f"{kind.capitalize()} bar chart"
    if kind in SINGLE_SERIES_KINDS and len(series) != 1:
        return f"{label} needs exactly 1 value column, but you selected {len(series)}. Try a grouped or stacked chart for several."
    if kind in MULTI_SERIES_KINDS and len(series) < 2:
        return f"{label} needs at least 2 value columns, but you selected {len(series)}. Try a vertical chart for a single column."
    return None


def review_bar_chart(df: pd.DataFrame, kind: str, category: str, series,
                     y_axis_min: Optional[float] = None, barmode: Optional[str] = None) -> List[Pitfall]:
    """
    Checks a planned bar chart for the common pitfalls: a truncated value axis,
    too many categories or series, long labels, and negative values in stacks.
    """
    series = _as_list(series)
    warnings: List[Pitfall] = []

    if y_axis_min is not None and float(y_axis_min) != 0:
        warnings.append(Pitfall(
            "misleading_axis",
            f"The value axis starts at {float(y_axis_min):g}. {PITFALLS['misleading_axis']['advice']}"))

    n_categories = df[category].nunique(dropna=True) if category in df.columns else 0
    if n_categories > MAX_CATEGORIES:
        warnings.append(Pitfall(
            "overcrowded_categories",
            f"'{category}' has {n_categories} categories (more than {MAX_CATEGORIES}). {PITFALLS['overcrowded_categories']['advice']}"))

    stacking = kind == "stacked" or (kind == "interactive" and barmode in ("stack", "relative"))
    if stacking:
        present = [c for c in series if c in df.columns]
        values = pd.DataFrame({c: pd.to_numeric(clean_numeric_column(df[c]), errors='coerce') for c in present})
        negative_cols = [c for c in present if (values[c] < 0).any()]
        if negative_cols:
            warnings.append(Pitfall(
                "negative_stacking",
                f"Negative values in {', '.join(negative_cols)}. {PITFALLS['negative_stacking']['advice']}"))

    if kind in (*MULTI_SERIES_KINDS, "interactive") and len(series) > MAX_SERIES:
        warnings.append(Pitfall(
            "too_many_series",
            f"{len(series)} series selected (more than {MAX_SERIES}). {PITFALLS['too_many_series']['advice']}"))

    if kind in ("vertical", *MULTI_SERIES_KINDS) and category in df.columns:
        labels = df[category].dropna().astype(str)
        longest = labels.str.len().max() if not labels.empty else 0
        if longest > LONG_LABEL_CHARS:
            warnings.append(Pitfall(
                "long_labels",
                f"Some '{category}' labels are {longest} characters long. {PITFALLS['long_labels']['advice']}",
                severity="info"))

    for w in warnings:
        logger.info("Pitfall %s for %s chart of %s: %s", w.code, kind, category, w.message)
    return warnings


def suggest_bar_chart(df: pd.DataFrame, category: str, series, part_to_whole: bool = False) -> str:
    """Recommends a bar chart kind for the selected columns."""
    series = _as_list(series)
    if len(series) <= 1:
        crowded = df[category].nunique(dropna=True) > MAX_CATEGORIES
        labels = df[category].dropna().astype(str)
        long_labels = not labels.empty and labels.str.len().max() > LONG_LABEL_CHARS
        return "horizontal" if crowded or long_labels else "vertical"
    if part_to_whole:
        values = pd.DataFrame({c: pd.to_numeric(clean_numeric_column(df[c]), errors='coerce') for c in series})
        if not (values < 0).any().any():
            return "stacked"
    return "grouped"
