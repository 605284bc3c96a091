"""WSGI entry point for production deployment (gunicorn --workers 1 wsgi:app)."""

import os
import sys
from pathlib import Path

BASE = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE))

from dotenv import load_dotenv

load_dotenv(BASE / ".env")

DEMO_MODE = os.environ.get("DEMO_MODE", "").lower() in ("1", "true", "yes")

from flask import Flask
from chart_projector import ChartProjector
from dashboard import render_dashboard
from routes import bp, init_routes
from server import build_store

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET", "donation-calendar-prod-key-change-me")

init_routes({
    "DEMO_MODE": DEMO_MODE,
    "store": build_store(DEMO_MODE),
    "projector": ChartProjector(),
    "render_dashboard": render_dashboard,
})
app.register_blueprint(bp)
