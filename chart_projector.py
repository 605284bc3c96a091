"""Month buckets, summary aggregates and Chart.js series derived from the donation list."""

from datetime import date
from typing import Optional

import pandas as pd


def format_month(d: date) -> str:
    """Axis tick text, e.g. 'Mar 2024'."""
    return d.strftime("%b %Y")


def format_currency(value: float) -> str:
    return f"${value:,.2f}"


def format_axis(value: float) -> str:
    return f"${value:.0f}"


def donation_color(key: int) -> str:
    """Stable bar colour for a donation key (golden-angle hue spacing)."""
    return f"hsl({key * 137.5 % 360:g}, 70%, 50%)"


def month_range(donations) -> pd.PeriodIndex:
    """Calendar months from the earliest start date through the latest end date."""
    first = min(d["start_date"] for d in donations)
    last = max(d["end_date"] for d in donations)
    return pd.period_range(start=pd.Timestamp(first), end=pd.Timestamp(last), freq="M")


def project_buckets(donations) -> list[dict]:
    """
    One bucket per calendar month covered by any donation, oldest first.

    A donation lands in every month its [start_date, end_date] interval overlaps,
    with its full amount (no proration). amounts/organizations are keyed by the
    donation id so colours and labels stay put when other rows are deleted.
    """
    if not donations:
        return []
    buckets = []
    for period in month_range(donations):
        month_start = period.start_time.date()
        month_end = period.end_time.date()
        amounts = {}
        organizations = {}
        for d in donations:
            if d["start_date"] <= month_end and d["end_date"] >= month_start:
                amounts[d["id"]] = d["amount"]
                organizations[d["id"]] = d["organization"]
        buckets.append({
            "month_start": month_start,
            "month_end": month_end,
            "label": format_month(month_start),
            "amounts": amounts,
            "organizations": organizations,
            "total": round(sum(amounts.values()), 2),
        })
    return buckets


def compute_aggregates(donations) -> dict:
    total = sum(d["amount"] for d in donations)
    count = len(donations)
    return {
        "total": total,
        "count": count,
        "average": total / count if count else 0,
    }


def chart_series(donations, buckets: list[dict]) -> dict:
    """Stacked-bar data for Chart.js: one dataset per donation, zero where inactive."""
    datasets = []
    for d in donations:
        key = d["id"]
        datasets.append({
            "key": key,
            "label": d["organization"],
            "color": donation_color(key),
            "data": [b["amounts"].get(key, 0) for b in buckets],
        })
    return {
        "labels": [b["label"] for b in buckets],
        "totals": [b["total"] for b in buckets],
        "datasets": datasets,
    }


class ChartProjector:
    """
    Recomputes the derived view only when handed a different donation sequence
    object. DonationStore replaces its tuple on every change, so identity is enough.
    """

    def __init__(self):
        self._source = None
        self._result: Optional[dict] = None
        self.computations = 0

    def project(self, donations) -> dict:
        if self._result is not None and donations is self._source:
            return self._result
        buckets = project_buckets(donations)
        self._result = {
            "buckets": buckets,
            "aggregates": compute_aggregates(donations),
            "series": chart_series(donations, buckets),
        }
        self._source = donations
        self.computations += 1
        return self._result
