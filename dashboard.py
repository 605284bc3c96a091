"""Dashboard rendering: full HTML page for the Donation Calendar."""

import json
from datetime import datetime
from html import escape

from chart_projector import format_currency


def _notice_html(notice) -> str:
    if not notice:
        return ""
    kind = notice.get("kind", "success")
    title = "Success" if kind == "success" else "Error"
    return f"""<div class="notice {kind}" role="alert" id="notice">
    <div class="notice-title">{title}</div>
    <div class="notice-body">{escape(notice["message"])}</div>
    <form method="post" action="/notice/dismiss" class="notice-close"><button type="submit" class="icon" title="Dismiss">&times;</button></form>
  </div>"""


def _form_html(form: dict, editing_id) -> str:
    org = escape(form.get("organization", ""))
    amount = escape(form.get("amount", ""))
    start = escape(form.get("start_date", ""))
    end = escape(form.get("end_date", ""))
    if editing_id is None:
        title = "Add New Donation"
        action = "/donations"
        buttons = '<button type="submit" class="wide">Add Donation</button>'
    else:
        title = "Edit Donation"
        action = f"/donations/{editing_id}/save"
        buttons = ('<div class="btn-row"><button type="submit" class="success">Save Changes</button>'
                   '<button type="submit" class="secondary" formaction="/edit/cancel">Cancel</button></div>')
    return f"""<div class="card">
    <div class="card-title">{title}</div>
    <form method="post" action="{action}" id="donation-form">
      <div class="form-grid">
        <label>Organization<input type="text" name="organization" value="{org}" placeholder="Enter organization name"></label>
        <label>Amount<input type="number" step="0.01" name="amount" value="{amount}" placeholder="Enter donation amount"></label>
        <label>Start Date<input type="date" name="start_date" value="{start}"></label>
        <label>End Date<input type="date" name="end_date" value="{end}"></label>
      </div>
      {buttons}
    </form>
  </div>"""


def _list_html(donations, editing_id) -> str:
    if not donations:
        return """<div class="empty">
      <div class="empty-title">No donations yet</div>
      <p class="hint">Add a donation to see it in the list.</p>
    </div>"""
    rows = ""
    for d in donations:
        did = d["id"]
        dates = f'{d["start_date"].strftime("%m/%d/%Y")} - {d["end_date"].strftime("%m/%d/%Y")}'
        if did == editing_id:
            actions = (f'<button type="submit" form="donation-form" class="icon ok" title="Save">&#10003;</button>'
                       f'<form method="post" action="/edit/cancel"><button type="submit" class="icon danger" title="Cancel">&times;</button></form>')
        else:
            actions = (f'<form method="post" action="/donations/{did}/edit"><button type="submit" class="icon warn" title="Edit">&#9998;</button></form>'
                       f'<form method="post" action="/donations/{did}/delete"><button type="submit" class="icon danger" title="Delete">&#128465;</button></form>')
        editing_cls = " editing" if did == editing_id else ""
        rows += f"""<div class="donation-row{editing_cls}" data-key="{did}">
        <div class="donation-main">
          <div class="org">{escape(d["organization"])}</div>
          <div class="hint">{dates}</div>
        </div>
        <div class="donation-side"><span class="amount mono">{format_currency(d["amount"])}</span>{actions}</div>
      </div>"""
    return f'<div class="donation-list">{rows}</div>'


def render_dashboard(view: dict, demo_mode: bool = False) -> str:
    """
    Build the single page: summary cards, notice banner, add/edit form,
    donation list and the monthly stacked bar chart.

    view carries donations, editing_id, form, notice (from DonationStore) and
    projection (from ChartProjector.project).
    """
    donations = view.get("donations", ())
    editing_id = view.get("editing_id")
    projection = view.get("projection", {})
    aggregates = projection.get("aggregates", {"total": 0, "count": 0, "average": 0})
    series = projection.get("series", {"labels": [], "totals": [], "datasets": []})

    notice_html = _notice_html(view.get("notice"))
    form_html = _form_html(view.get("form", {}), editing_id)
    list_html = _list_html(donations, editing_id)

    # JSON for chart (escape for script tag)
    series_json = json.dumps(series).replace("</", "<\\/")

    if series["labels"]:
        chart_html = """<div class="card">
    <div class="card-title">Donation Overview</div>
    <div style="position:relative;height:400px;"><canvas id="donation-chart"></canvas></div>
  </div>"""
    else:
        chart_html = """<div class="empty">
    <div class="empty-title">No donations yet</div>
    <p class="hint">Add a donation to see it displayed on the calendar.</p>
  </div>"""

    demo_banner = ""
    if demo_mode:
        demo_banner = '<div class="demo-banner">Demo mode &mdash; sample donations loaded, changes are disabled.</div>'

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Donation Calendar</title>
<meta name="theme-color" content="#09090b">
<script src="https://cdn.jsdelivr.net/npm/chart.js@4.4.0/dist/chart.umd.min.js"></script>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&family=JetBrains+Mono:wght@400;500;600;700&display=swap" rel="stylesheet">
<style>
:root {{
  --bg-primary: #09090b;
  --bg-secondary: #111114;
  --bg-card: #161619;
  --bg-input: #1a1a1f;
  --border-subtle: rgba(255,255,255,0.06);
  --border-accent: rgba(212,160,23,0.3);
  --text-primary: #f1f5f9;
  --text-secondary: #94a3b8;
  --text-muted: #64748b;
  --accent-primary: #d4a017;
  --accent-glow: rgba(212,160,23,0.15);
  --success: #34d399;
  --success-glow: rgba(52,211,153,0.15);
  --danger: #f87171;
  --warning: #fbbf24;
  --radius: 12px;
  --mono: 'JetBrains Mono', monospace;
}}
*{{ box-sizing:border-box; margin:0; padding:0; }}
body {{
  font-family:'Inter',-apple-system,BlinkMacSystemFont,sans-serif;
  background:var(--bg-primary);
  color:var(--text-primary);
  min-height:100vh;
  line-height:1.6;
  -webkit-font-smoothing:antialiased;
}}
.main-content {{ max-width:1100px; margin:0 auto; padding:32px 24px; }}
h1 {{ font-size:1.8rem; font-weight:700; text-align:center; margin-bottom:28px; color:var(--accent-primary); }}
.demo-banner {{
  background:linear-gradient(90deg,#d4a017,#f0c040); color:#09090b;
  text-align:center; padding:8px 16px; font-size:0.85rem; font-weight:600;
}}
/* ── Card ── */
.card {{
  background:var(--bg-card);
  border:1px solid var(--border-subtle);
  border-radius:var(--radius); padding:20px;
  margin-bottom:16px;
  transition:border-color 0.2s ease;
}}
.card:hover {{ border-color:var(--border-accent); }}
.card-title {{
  font-size:0.7rem; font-weight:600; text-transform:uppercase;
  letter-spacing:0.1em; color:var(--text-muted); margin-bottom:14px;
}}
.stat-grid {{ display:grid; grid-template-columns:repeat(3, 1fr); gap:16px; margin-bottom:16px; }}
.stat-value {{ font-size:1.8rem; font-weight:700; font-family:var(--mono); }}
.stat-value.total {{ color:var(--success); }}
.stat-value.count {{ color:#60a5fa; }}
.stat-value.avg {{ color:#a78bfa; }}
.hint {{ font-size:0.78rem; color:var(--text-muted); }}
.mono {{ font-family:var(--mono); font-size:0.85rem; }}
/* ── Notice ── */
.notice {{
  position:relative; border-radius:var(--radius); padding:14px 44px 14px 20px;
  margin-bottom:16px; font-size:0.9rem;
}}
.notice.success {{ background:var(--success-glow); color:var(--success); border:1px solid rgba(52,211,153,0.25); }}
.notice.error {{ background:rgba(248,113,113,0.12); color:var(--danger); border:1px solid rgba(248,113,113,0.3); }}
.notice-title {{ font-weight:600; margin-bottom:2px; }}
.notice-close {{ position:absolute; top:8px; right:8px; }}
/* ── Form ── */
.form-grid {{ display:grid; grid-template-columns:1fr 1fr; gap:14px; }}
label {{ display:flex; flex-direction:column; gap:6px; font-size:0.8rem; color:var(--text-secondary); }}
input {{
  padding:9px 12px;
  background:var(--bg-input);
  border:1px solid var(--border-subtle);
  color:var(--text-primary);
  border-radius:8px; width:100%;
  font-family:inherit; font-size:0.88rem;
}}
input:focus {{ outline:none; border-color:var(--accent-primary); box-shadow:0 0 0 3px var(--accent-glow); }}
/* ── Buttons ── */
button {{
  padding:10px 20px;
  background:var(--accent-primary);
  color:#09090b; border:none;
  border-radius:8px; cursor:pointer;
  font-family:inherit; font-size:0.88rem; font-weight:600;
  transition:all 0.2s ease;
}}
button.wide {{ width:100%; margin-top:16px; }}
button.secondary {{ background:transparent; color:var(--text-secondary); border:1px solid var(--border-subtle); }}
button.success {{ background:linear-gradient(135deg,#059669,var(--success)); color:#fff; }}
button.icon {{ background:transparent; color:var(--text-secondary); padding:4px 10px; font-size:1rem; }}
button.icon.ok {{ color:var(--success); }}
button.icon.warn {{ color:var(--warning); }}
button.icon.danger {{ color:var(--danger); }}
.btn-row {{ display:flex; justify-content:space-between; margin-top:16px; }}
/* ── Donation list ── */
.donation-row {{
  display:flex; justify-content:space-between; align-items:center;
  padding:12px 16px; border-bottom:1px solid rgba(255,255,255,0.03);
}}
.donation-row.editing {{ background:rgba(212,160,23,0.06); }}
.donation-row .org {{ font-weight:600; }}
.donation-side {{ display:flex; align-items:center; gap:6px; }}
.donation-side form {{ display:inline; }}
.amount {{ color:var(--success); font-weight:600; margin-right:8px; }}
.empty {{ border:1px dashed var(--border-subtle); border-radius:var(--radius); padding:18px; margin-bottom:16px; }}
.empty-title {{ font-weight:600; margin-bottom:4px; }}
@media (max-width:720px) {{
  .stat-grid, .form-grid {{ grid-template-columns:1fr; }}
}}
</style>
</head>
<body>
{demo_banner}
<div class="main-content">
  <h1>&#128197; Donation Calendar</h1>

  <div class="stat-grid">
    <div class="card"><div class="card-title">Total Donations</div><div class="stat-value total">{format_currency(aggregates["total"])}</div></div>
    <div class="card"><div class="card-title">Number of Donations</div><div class="stat-value count">{aggregates["count"]}</div></div>
    <div class="card"><div class="card-title">Avg. Donation</div><div class="stat-value avg">{format_currency(aggregates["average"])}</div></div>
  </div>

  {notice_html}

  {form_html}

  <div class="card">
    <div class="card-title">Donation List</div>
    {list_html}
  </div>

  {chart_html}

  <p class="hint" style="text-align:center;margin-top:24px;">Donation Calendar &middot; {datetime.now().year}</p>
</div>

<script>
var DONATION_SERIES = {series_json};

function buildDonationChart() {{
  var ctx = document.getElementById("donation-chart");
  if (!ctx || typeof Chart === "undefined" || !DONATION_SERIES.labels.length) return;
  var money = function(v) {{ return "$" + Number(v).toFixed(2); }};
  new Chart(ctx, {{
    type: "bar",
    data: {{
      labels: DONATION_SERIES.labels,
      datasets: DONATION_SERIES.datasets.map(function(ds) {{
        return {{ label: ds.label, data: ds.data, backgroundColor: ds.color, stack: "donations", borderWidth: 0 }};
      }})
    }},
    options: {{
      responsive: true,
      maintainAspectRatio: false,
      scales: {{
        x: {{ stacked: true, ticks: {{ color: "#94a3b8" }}, grid: {{ display: false }} }},
        y: {{ stacked: true, ticks: {{ color: "#94a3b8", callback: function(v) {{ return "$" + Number(v).toFixed(0); }} }}, grid: {{ color: "rgba(255,255,255,0.05)" }} }}
      }},
      plugins: {{
        legend: {{ display: false }},
        tooltip: {{
          mode: "index",
          filter: function(item) {{ return item.raw > 0; }},
          backgroundColor: "rgba(9,9,11,0.95)",
          titleColor: "#f1f5f9", bodyColor: "#94a3b8",
          borderColor: "rgba(255,255,255,0.1)", borderWidth: 1,
          padding: 12, cornerRadius: 8,
          callbacks: {{
            label: function(c) {{ return c.dataset.label + ": " + money(c.raw); }},
            footer: function(items) {{
              var sum = items.reduce(function(s, it) {{ return s + it.raw; }}, 0);
              return "Total: " + money(sum);
            }}
          }}
        }}
      }}
    }}
  }});
}}
document.addEventListener("DOMContentLoaded", buildDonationChart);
</script>
</body>
</html>"""
    return html
