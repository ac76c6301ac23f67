"""Shared test fixtures for the bar chart guide.

Forces the non-interactive matplotlib backend and provides the example
sales table, a wider table for pitfall checks, and a Flask test client.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from sample_data import make_sales_frame


@pytest.fixture(autouse=True)
def close_figures():
    """Close every figure a test leaves open."""
    yield
    plt.close("all")


@pytest.fixture
def sales_df() -> pd.DataFrame:
    return make_sales_frame()


@pytest.fixture
def crowded_df() -> pd.DataFrame:
    """Fifteen long-named products with one negative quarter."""
    return pd.DataFrame({
        "Product": [f"Premium Product Line {i:02d}" for i in range(15)],
        "Q1": [100 + i for i in range(15)],
        "Q2": [90 - i * 10 for i in range(15)],
    })


@pytest.fixture
def repeated_df() -> pd.DataFrame:
    """Long-form rows where North appears twice."""
    return pd.DataFrame({
        "Region": ["North", "North", "South"],
        "A": [10, 30, 5],
        "B": [1, 2, 3],
    })


@pytest.fixture
def app(tmp_path):
    from app import app as flask_app

    flask_app.config.update(TESTING=True, UPLOAD_FOLDER=str(tmp_path))
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()
