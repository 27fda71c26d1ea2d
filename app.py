from flask import Blueprint, Flask, current_app, flash, render_template, request
import logging
import os
import threading
from datetime import datetime

from bmi import compute_bmi, format_bmi, is_computable, parse_measurement_value
from history_store import HistoryStore


# ---------------- CONFIG ----------------
APP_SECRET = os.environ.get("APP_SECRET", "change-me-to-a-random-string")
DB_FILE = os.environ.get("DB_FILE", "bmi.db")

# Calendar date stored with each entry
DATE_FORMAT = os.environ.get("DATE_FORMAT", "%m/%d/%Y")

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)-16s  %(message)s"

bmi_bp = Blueprint("bmi", __name__)


# ---------------- App factory ----------------
def create_app(db_file=None, date_format=None, store=None):
    """
    Build the Flask app around one HistoryStore.

    Pass `store` to inject an already constructed store; otherwise one is
    created for `db_file` (default DB_FILE). The display history is seeded
    from the store so entries survive a restart.
    """
    app = Flask(__name__)
    app.secret_key = APP_SECRET
    app.config["DB_FILE"] = db_file or DB_FILE
    app.config["DATE_FORMAT"] = date_format or DATE_FORMAT

    if store is None:
        store = HistoryStore(app.config["DB_FILE"])
    if not store.initialize():
        app.logger.error("History store unavailable; new entries will not be saved.")

    app.extensions["history_store"] = store
    app.extensions["bmi_entries"] = store.load_all()
    # Serializes append-then-mirror so the list keeps id order across threads
    app.extensions["history_lock"] = threading.Lock()

    app.add_template_filter(format_bmi, "bmi")
    app.add_template_filter(format_amount, "amount")
    app.register_blueprint(bmi_bp)
    return app


def get_store() -> HistoryStore:
    return current_app.extensions["history_store"]


def get_entries() -> list:
    return current_app.extensions["bmi_entries"]


def format_amount(value) -> str:
    # 150.0 -> "150", 150.1234 -> "150.1234"
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


# ---------------- Recording ----------------
def record_measurement(store, entries, weight, height, date_format=DATE_FORMAT, now=None):
    """
    Compute, persist and mirror one measurement.

    `entries` is only appended to with the Measurement the store returns,
    so a failed write leaves it untouched. Returns that Measurement or None.
    """
    bmi_value = compute_bmi(weight, height)
    date = (now or datetime.now()).strftime(date_format)

    entry = store.append(date, weight, height, bmi_value)
    if entry is not None:
        entries.append(entry)
    return entry


# ---------------- Routes ----------------
@bmi_bp.route("/", methods=["GET", "POST"])
def index():
    entries = get_entries()
    weight_text = ""
    height_text = ""
    bmi_result = None
    category = None

    if request.method == "POST":
        weight_text = request.form.get("weight", "")
        height_text = request.form.get("height", "")

        weight = parse_measurement_value(weight_text)
        height = parse_measurement_value(height_text)

        if weight is None or height is None or not is_computable(weight, height):
            flash("Enter a positive weight (pounds) and height (inches).", "error")
        else:
            with current_app.extensions["history_lock"]:
                entry = record_measurement(
                    get_store(),
                    entries,
                    weight,
                    height,
                    date_format=current_app.config["DATE_FORMAT"],
                )
            if entry is None:
                current_app.logger.error("BMI entry was not saved (weight=%s, height=%s)", weight, height)
                flash("Could not save this entry.", "error")
            else:
                bmi_result = entry.bmi
                category = entry.category
                weight_text = ""
                height_text = ""

    # Nothing computed in this request: show the latest saved entry
    if bmi_result is None and entries:
        bmi_result = entries[-1].bmi
        category = entries[-1].category

    return render_template(
        "index.html",
        weight=weight_text,
        height=height_text,
        bmi_result=bmi_result,
        category=category,
        history=entries,
    )


@bmi_bp.route("/health")
def health():
    return {
        "status": "ok",
        "store": get_store().state,
        "entries": len(get_entries()),
    }


# ---------------- RUN ----------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    app = create_app()
    try:
        app.run(debug=True)
    finally:
        app.extensions["history_store"].close()
