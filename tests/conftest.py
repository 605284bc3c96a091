import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from flask import Flask

from chart_projector import ChartProjector
from dashboard import render_dashboard
from donation_store import DonationStore
from routes import bp, init_routes


@pytest.fixture
def store():
    return DonationStore()


def make_app(store, demo_mode=False):
    app = Flask(__name__)
    app.config["TESTING"] = True
    init_routes({
        "DEMO_MODE": demo_mode,
        "store": store,
        "projector": ChartProjector(),
        "render_dashboard": render_dashboard,
    })
    app.register_blueprint(bp)
    return app


@pytest.fixture
def client(store):
    return make_app(store).test_client()
