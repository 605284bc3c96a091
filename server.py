"""
Local server for the Donation Calendar.
Run: python server.py
Then open http://localhost:5000 - add donations, edit or delete them, and watch the monthly chart.
Everything lives in memory; restarting the server starts from an empty list.
"""

import json
import os
import sys
from pathlib import Path

BASE = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE))

# Load .env so HOST/PORT/DEMO_MODE can live beside the code
from dotenv import load_dotenv

load_dotenv(BASE / ".env")

DEMO_MODE = os.environ.get("DEMO_MODE", "").lower() in ("1", "true", "yes")
SAMPLE_PATH = BASE / "sample_donations.json"


def build_store(demo_mode: bool = False, sample_path: Path = SAMPLE_PATH):
    """Fresh in-memory store; demo mode seeds it from sample_donations.json."""
    from donation_store import DonationStore
    store = DonationStore()
    if demo_mode and sample_path.exists():
        with open(sample_path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        added = store.load(rows)
        print(f"[Demo] Loaded {added} sample donations")
    return store


def main():
    try:
        from flask import Flask
    except ImportError:
        print("Flask is required. Run: pip install flask")
        sys.exit(1)

    from chart_projector import ChartProjector
    from dashboard import render_dashboard
    from routes import bp, init_routes

    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET", "donation-calendar-default-key-change-me")

    init_routes({
        "DEMO_MODE": DEMO_MODE,
        "store": build_store(DEMO_MODE),
        "projector": ChartProjector(),
        "render_dashboard": render_dashboard,
    })
    app.register_blueprint(bp)

    port = int(os.environ.get("PORT", 5000))
    host = os.environ.get("HOST", "0.0.0.0")
    print(f"Donation Calendar: http://{host}:{port}")
    if DEMO_MODE:
        print("[DEMO MODE] Write operations disabled. Sample data loaded.")
    print("Ctrl+C to stop.")
    # No reloader: it would fork a second process with its own empty store
    app.run(host=host, port=port, debug=False, use_reloader=False)


if __name__ == "__main__":
    main()
