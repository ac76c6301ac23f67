import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from flask import Flask, Response, jsonify, render_template, request, session
from werkzeug.utils import secure_filename

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from bar_charts import generate_bar_chart_uri
from chart_advisor import review_bar_chart, suggest_bar_chart, validate_columns_for_bar_chart
from chart_explanations import BAR_CHART_DETAILS, format_explanation_html, get_chart_explanation, list_chart_types
from doc_linter import lint_markdown
from interactive_charts import figure_to_html, interactive_bar
from sample_data import load_table, make_sales_frame
from tutorial_builder import build_tutorial_markdown

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get('FLASK_SECRET_KEY', os.urandom(24))
app.config['UPLOAD_FOLDER'] = os.environ.get('BARCHART_UPLOAD_FOLDER', 'uploaded_files')
app.config['ALLOWED_EXTENSIONS'] = {'csv', 'xls', 'xlsx'}
os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

SAMPLE_CATEGORY = "Region"
SAMPLE_SERIES = ["Q1_Sales", "Q2_Sales"]


def allowed_file(filename: str) -> bool:
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in app.config['ALLOWED_EXTENSIONS']


def _active_frame() -> Tuple[pd.DataFrame, bool]:
    """The uploaded table when the session has one, else the example sales table."""
    filepath = session.get('uploaded_filepath')
    if filepath and os.path.exists(filepath):
        return load_table(filepath), True
    return make_sales_frame(), False


def _chart_request(payload: Dict[str, Any], uploaded: bool) -> Tuple[str, Optional[str], List[str]]:
    kind = str(payload.get('kind', 'vertical')).lower()
    category = payload.get('category')
    series = payload.get('series') or []
    if isinstance(series, str):
        series = [series]
    if not uploaded:
        # The example table has fixed columns, so fill in what the caller left out.
        category = category or SAMPLE_CATEGORY
        if not series:
            series = SAMPLE_SERIES[:1] if kind in ('vertical', 'horizontal') else list(SAMPLE_SERIES)
    return kind, category, list(series)


# --- Flask Routes ---
@app.route("/")
def home():
    for key in ('uploaded_filepath', 'uploaded_filename', 'df_columns'):
        session.pop(key, None)
    chart_types = [(details['kind'], details['title']) for details in BAR_CHART_DETAILS.values()]
    return render_template("index.html", chart_types=chart_types)


@app.route("/api/chart_types")
def chart_types():
    return jsonify({"chart_types": list_chart_types()})


@app.route("/api/explanation/<name>")
def explanation(name):
    try:
        details = get_chart_explanation(name)
    except KeyError as e:
        return jsonify({"response": str(e.args[0])}), 404
    return jsonify({**details, "html": format_explanation_html(details)})


@app.route("/api/plot", methods=["POST"])
def plot():
    payload = request.get_json(silent=True) or {}
    try:
        df, uploaded = _active_frame()
    except Exception as e:
        logger.error("Could not read uploaded file for plotting: %s", e)
        return jsonify({"response": f"Could not read the uploaded file: {str(e)[:100]}"}), 400
    kind, category, series = _chart_request(payload, uploaded)

    if kind == 'interactive':
        validation_error = validate_columns_for_bar_chart(kind, category, series, df)
        if validation_error:
            return jsonify({"response": validation_error}), 400
        try:
            fig = interactive_bar(df, category, series,
                                  barmode=payload.get('barmode', 'group'),
                                  orientation=payload.get('orientation', 'v'),
                                  title=payload.get('title') or "")
        except ValueError as e:
            return jsonify({"response": str(e)}), 400
        return jsonify({"html": figure_to_html(fig)})

    uri, error = generate_bar_chart_uri(df, kind, category, series,
                                        title=payload.get('title'),
                                        xlabel=payload.get('xlabel'),
                                        ylabel=payload.get('ylabel'))
    if error:
        return jsonify({"response": error}), 400
    return jsonify({"image": uri})


@app.route("/api/review", methods=["POST"])
def review():
    payload = request.get_json(silent=True) or {}
    try:
        df, uploaded = _active_frame()
    except Exception as e:
        logger.error("Could not read uploaded file for review: %s", e)
        return jsonify({"response": f"Could not read the uploaded file: {str(e)[:100]}"}), 400
    kind, category, series = _chart_request(payload, uploaded)
    validation_error = validate_columns_for_bar_chart(kind, category, series, df)
    if validation_error:
        return jsonify({"response": validation_error}), 400

    y_axis_min = payload.get('y_axis_min')
    try:
        y_axis_min = float(y_axis_min) if y_axis_min is not None else None
    except (TypeError, ValueError):
        return jsonify({"response": f"y_axis_min must be a number, got '{y_axis_min}'."}), 400

    warnings = review_bar_chart(df, kind, category, series, y_axis_min=y_axis_min,
                                barmode=payload.get('barmode'))
    return jsonify({
        "warnings": [w.to_dict() for w in warnings],
        "suggested_kind": suggest_bar_chart(df, category, series,
                                            part_to_whole=bool(payload.get('part_to_whole'))),
    })


@app.route("/tutorial.md")
def tutorial_markdown():
    return Response(build_tutorial_markdown(), mimetype="text/markdown",
                    headers={"Content-Disposition": "inline; filename=bar_charts_tutorial.md"})


@app.route("/api/lint", methods=["POST"])
def lint():
    text = request.get_data(as_text=True) or build_tutorial_markdown()
    return jsonify(lint_markdown(text, check_links=False).to_dict())


# --- Upload Route ---
@app.route("/upload_file", methods=["POST"])
def upload_file():
    """Handles file upload, validation and a quick quality summary."""
    if "file" not in request.files: return jsonify({"response": "No file part in request."}), 400
    file = request.files["file"]
    if file.filename == "": return jsonify({"response": "No file selected."}), 400
    if not allowed_file(file.filename):
        return jsonify({"response": "Invalid file type. Use CSV or Excel."}), 400

    filename = secure_filename(file.filename)
    filepath = os.path.join(app.config['UPLOAD_FOLDER'], filename)
    try:
        file.save(filepath)
        try:
            df = load_table(filepath)
        except Exception as read_err:
            logger.warning("Read error for %s: %s", filename, read_err)
            df = None
        if df is None or df.empty:
            return jsonify({"response": f"Could not read or understand the file format of '{filename}'. Please ensure it's a valid CSV or Excel file and not corrupted."}), 400

        session['uploaded_filepath'] = filepath
        session['uploaded_filename'] = filename
        session['df_columns'] = list(df.columns)
        preview_html = df.head(5).to_html(classes="preview-table", index=False, border=0)
        total_rows, total_columns = len(df), len(df.columns)
        missing_values = int(df.isnull().sum().sum())
        duplicate_rows = int(df.duplicated().sum())
        total_cells = total_rows * total_columns
        missing_percent = (missing_values / total_cells) * 100 if total_cells else 0
        message = (f"✅ <strong>{filename}</strong> uploaded.<br><br>"
                   f"🔍 Quality Check: {total_rows} R, {total_columns} C; {missing_values} missing ({missing_percent:.1f}%); {duplicate_rows} duplicates.<br><br>"
                   f"Pick a category column and one or more value columns to draw a bar chart.")
        return jsonify({"response": message, "preview": preview_html, "columns": list(df.columns)})
    except Exception as e:
        logger.error("Error processing uploaded file %s: %s", filename, e)
        return jsonify({"response": f"Error processing '{filename}': {str(e)[:100]}..."}), 500


# --- Main Execution ---
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    sns.set_theme(style="whitegrid", palette="muted")
    plt.rcParams.update({'figure.autolayout': True, 'figure.dpi': 90, 'font.size': 9})
    app.run(debug=os.environ.get('FLASK_DEBUG', '1') == '1')
