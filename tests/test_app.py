"""Route tests for the Flask app, driven through ``app.test_client()``."""

import io


def _upload(client, content: bytes, filename: str):
    return client.post(
        "/upload_file",
        data={"file": (io.BytesIO(content), filename)},
        content_type="multipart/form-data",
    )


# ---------------------------------------------------------------------------
# Content routes
# ---------------------------------------------------------------------------

def test_home_lists_chart_types(client):
    response = client.get("/")
    assert response.status_code == 200
    page = response.get_data(as_text=True)
    assert "Bar Chart Guide" in page
    assert 'data-kind="stacked"' in page


def test_chart_types(client):
    assert client.get("/api/chart_types").get_json() == {
        "chart_types": ["vertical", "grouped", "stacked", "horizontal", "interactive"]
    }


def test_explanation_found(client):
    data = client.get("/api/explanation/stacked").get_json()
    assert data["kind"] == "stacked"
    assert data["html"].startswith("<strong>")


def test_explanation_not_found(client):
    response = client.get("/api/explanation/pie")
    assert response.status_code == 404
    assert "pie" in response.get_json()["response"]


def test_tutorial_markdown_download(client):
    response = client.get("/tutorial.md")
    assert response.status_code == 200
    assert response.mimetype == "text/markdown"
    assert response.get_data(as_text=True).startswith("# Bar Charts in Python")


def test_lint_defaults_to_generated_tutorial(client):
    data = client.post("/api/lint").get_json()
    assert data["ok"] is True
    assert data["blocks_checked"] == 6


def test_lint_posted_markdown(client):
    data = client.post("/api/lint", data="```python\nif True print(1)\n```\n",
                       content_type="text/markdown").get_json()
    assert data["ok"] is False
    assert data["issues"][0]["rule"] == "syntax_error"


# ---------------------------------------------------------------------------
# Plotting on the example table
# ---------------------------------------------------------------------------

def test_plot_defaults_to_example_table(client):
    for kind in ("vertical", "grouped", "stacked", "horizontal"):
        data = client.post("/api/plot", json={"kind": kind}).get_json()
        assert data["image"].startswith("data:image/png;base64,"), kind


def test_plot_interactive_returns_html(client):
    data = client.post("/api/plot", json={"kind": "interactive", "barmode": "stack"}).get_json()
    assert "<div" in data["html"]


def test_plot_interactive_bad_barmode(client):
    response = client.post("/api/plot", json={"kind": "interactive", "barmode": "pile"})
    assert response.status_code == 400
    assert "barmode" in response.get_json()["response"]


def test_plot_rejects_bad_columns(client):
    response = client.post("/api/plot", json={"kind": "grouped", "series": ["Q1_Sales"]})
    assert response.status_code == 400
    assert "at least 2 value columns" in response.get_json()["response"]


def test_review_flags_truncated_axis(client):
    data = client.post("/api/review", json={"kind": "vertical", "y_axis_min": 100}).get_json()
    assert [w["code"] for w in data["warnings"]] == ["misleading_axis"]
    assert data["suggested_kind"] == "vertical"


def test_review_suggests_stacked_for_part_to_whole(client):
    data = client.post("/api/review", json={"kind": "grouped", "part_to_whole": True}).get_json()
    assert data["warnings"] == []
    assert data["suggested_kind"] == "stacked"


def test_review_rejects_non_numeric_axis_min(client):
    response = client.post("/api/review", json={"kind": "vertical", "y_axis_min": "abc"})
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

def test_upload_then_plot_uploaded_columns(client, tmp_path):
    response = _upload(client, b"Team,Score\nRed,3\nBlue,5\nGreen,4\n", "scores.csv")
    assert response.status_code == 200
    data = response.get_json()
    assert data["columns"] == ["Team", "Score"]
    assert "scores.csv" in data["response"]
    assert (tmp_path / "scores.csv").exists()

    plot = client.post("/api/plot", json={"kind": "horizontal", "category": "Team", "series": ["Score"]})
    assert plot.status_code == 200
    assert plot.get_json()["image"].startswith("data:image/png;base64,")


def test_uploaded_table_needs_explicit_columns(client):
    _upload(client, b"Team,Score\nRed,3\nBlue,5\n", "scores.csv")
    response = client.post("/api/plot", json={"kind": "vertical"})
    assert response.status_code == 400
    assert response.get_json()["response"] == "No category column selected."


def test_home_forgets_the_upload(client):
    _upload(client, b"Team,Score\nRed,3\nBlue,5\n", "scores.csv")
    client.get("/")
    data = client.post("/api/plot", json={"kind": "vertical"}).get_json()
    assert "image" in data


def test_upload_rejects_other_file_types(client):
    response = _upload(client, b"hello", "notes.txt")
    assert response.status_code == 400
    assert response.get_json()["response"] == "Invalid file type. Use CSV or Excel."


def test_upload_requires_a_file(client):
    response = client.post("/upload_file", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["response"] == "No file part in request."


def test_upload_rejects_header_only_csv(client):
    response = _upload(client, b"Team,Score\n", "empty.csv")
    assert response.status_code == 400
    assert "Could not read" in response.get_json()["response"]
