# sample_data.py
import logging
from typing import List

import pandas as pd
from pandas.api.types import is_numeric_dtype, is_string_dtype

logger = logging.getLogger(__name__)

SALES_DATA = {
    "Region": ["North", "South", "East", "West"],
    "Q1_Sales": [250, 180, 310, 220],
    "Q2_Sales": [270, 195, 290, 240],
}


def make_sales_frame() -> pd.DataFrame:
    """
    Builds the example table used throughout the guide: four regions and
    their sales for the first two quarters.
    """
    return pd.DataFrame({key: list(values) for key, values in SALES_DATA.items()})


def clean_numeric_column(series: pd.Series) -> pd.Series:
    if series is None: return series
    if is_numeric_dtype(series.dtype): return series
    if series.dtype == 'object' or is_string_dtype(series.dtype):
        s_cleaned = series.astype(str).str.replace(r'[$,%]', '', regex=True).str.strip()
        s_cleaned = s_cleaned.replace({'': pd.NA, 'nan': pd.NA, 'None': pd.NA})
        s_numeric = pd.to_numeric(s_cleaned, errors='coerce')
        if s_numeric.notna().any(): return s_numeric
    return series


def load_table(filepath: str) -> pd.DataFrame:
    """Reads a CSV or Excel file, retrying CSVs with latin1 when the default encoding fails."""
    lower = filepath.lower()
    if lower.endswith(".csv"):
        try:
            return pd.read_csv(filepath, low_memory=False)
        except UnicodeDecodeError as e:
            logger.warning("Initial read error for %s: %s. Retrying with latin1.", filepath, e)
            return pd.read_csv(filepath, encoding='latin1', low_memory=False)
    if lower.endswith(('.xls', '.xlsx')):
        return pd.read_excel(filepath, engine='openpyxl' if lower.endswith('.xlsx') else None)
    raise ValueError(f"Unsupported file type for '{filepath}'. Use CSV or Excel.")


def to_long_format(df: pd.DataFrame, category: str, series: List[str],
                   var_name: str = "Series", value_name: str = "Value") -> pd.DataFrame:
    """Melts the wide series columns into one value column for seaborn's hue."""
    missing = [c for c in [category, *series] if c not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {', '.join(missing)}.")
    return df.melt(id_vars=[category], value_vars=list(series),
                   var_name=var_name, value_name=value_name)


def sum_by_category(df: pd.DataFrame, category: str, series: List[str]) -> pd.DataFrame:
    """
    Collapses repeated category values into one row each, summing the value
    columns. Categories keep the order they first appear in. Long-form tables
    (one row per region and month, say) then draw one bar per category.
    """
    missing = [c for c in [category, *series] if c not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {', '.join(missing)}.")
    if not df[category].duplicated().any():
        return df[[category, *series]].reset_index(drop=True)
    return (df.groupby(category, sort=False, dropna=False)[list(series)]
              .sum(min_count=1)
              .reset_index())


if __name__ == '__main__':
    df = make_sales_frame()
    print("Example data:")
    print(df)
    print("\nLong format:")
    print(to_long_format(df, "Region", ["Q1_Sales", "Q2_Sales"]))
