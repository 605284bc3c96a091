"""Flask route handlers for the Donation Calendar (Blueprint)."""

from datetime import datetime
from flask import Blueprint, request, redirect, jsonify, abort

from donation_store import ValidationError, DonationNotFound

bp = Blueprint("main", __name__)

# Module-level references, set by init_routes()
DEMO_MODE = False
_deps = {}  # store, projector, render_dashboard


def init_routes(config):
    """Inject dependencies from main(). Call before registering blueprint."""
    global DEMO_MODE
    DEMO_MODE = config.get("DEMO_MODE", False)
    _deps.clear()
    _deps.update(config)


# ── Accessor helpers for injected dependencies ──
def get_store():
    return _deps["store"]

def get_projection():
    return _deps["projector"].project(get_store().donations)

def render_dashboard(view):
    return _deps["render_dashboard"](view, demo_mode=DEMO_MODE)


def _form_values():
    return (
        request.form.get("organization", ""),
        request.form.get("amount", ""),
        request.form.get("start_date", ""),
        request.form.get("end_date", ""),
    )


def _serialize(d):
    return {
        "id": d["id"],
        "organization": d["organization"],
        "amount": d["amount"],
        "start_date": d["start_date"].isoformat(),
        "end_date": d["end_date"].isoformat(),
    }


# Demo mode: block all write operations
@bp.before_request
def check_demo_mode():
    if not DEMO_MODE:
        return
    if request.method in ("GET", "HEAD", "OPTIONS"):
        return
    # Dismissing the banner is harmless
    if request.path == "/notice/dismiss":
        return
    if request.is_json or request.path.startswith("/api/"):
        return jsonify({"success": False, "error": "Demo mode - changes are disabled."}), 403
    get_store().notify("Demo mode - changes are disabled", kind="error")
    return redirect("/")


@bp.route("/")
def index():
    store = get_store()
    view = {
        "donations": store.donations,
        "editing_id": store.editing_id,
        "form": store.form,
        "notice": store.notice,
        "projection": get_projection(),
    }
    return render_dashboard(view)


@bp.route("/donations", methods=["POST"])
def add_donation():
    try:
        get_store().add(*_form_values())
    except ValidationError as e:
        # Already recorded as the error notice; form keeps what was typed
        print(f"[Store] Add rejected: {e}")
    return redirect("/")


@bp.route("/donations/<int:donation_id>/edit", methods=["POST"])
def start_edit(donation_id):
    try:
        get_store().start_edit(donation_id)
    except DonationNotFound:
        abort(404)
    return redirect("/")


@bp.route("/donations/<int:donation_id>/save", methods=["POST"])
def save_edit(donation_id):
    try:
        get_store().update(donation_id, *_form_values())
    except DonationNotFound:
        abort(404)
    except ValidationError as e:
        print(f"[Store] Update of #{donation_id} rejected: {e}")
    return redirect("/")


@bp.route("/donations/<int:donation_id>/delete", methods=["POST"])
def delete_donation(donation_id):
    try:
        get_store().delete(donation_id)
    except DonationNotFound:
        abort(404)
    return redirect("/")


@bp.route("/edit/cancel", methods=["POST"])
def cancel_edit():
    get_store().cancel_edit()
    return redirect("/")


@bp.route("/notice/dismiss", methods=["POST"])
def dismiss_notice():
    get_store().dismiss()
    return redirect("/")


@bp.route("/api/donations")
def api_donations():
    """Current donation list and edit cursor."""
    store = get_store()
    return jsonify({
        "donations": [_serialize(d) for d in store.donations],
        "editing_id": store.editing_id,
    })


@bp.route("/api/chart-data")
def api_chart_data():
    """Month buckets, aggregates and Chart.js series for the current list."""
    projection = get_projection()
    buckets = [{
        "month_start": b["month_start"].isoformat(),
        "month_end": b["month_end"].isoformat(),
        "label": b["label"],
        # JSON object keys are strings
        "amounts": {str(k): v for k, v in b["amounts"].items()},
        "organizations": {str(k): v for k, v in b["organizations"].items()},
        "total": b["total"],
    } for b in projection["buckets"]]
    return jsonify({
        "buckets": buckets,
        "aggregates": projection["aggregates"],
        "series": projection["series"],
    })


@bp.route("/api/export")
def api_export():
    """Export the donation list and totals as JSON."""
    store = get_store()
    return jsonify({
        "exported_at": datetime.now().isoformat(),
        "aggregates": get_projection()["aggregates"],
        "donations": [_serialize(d) for d in store.donations],
    })
