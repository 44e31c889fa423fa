"""Turn raw store documents into an ordered metrics series."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from app.models.schemas import DailyMetric
from app.services.normalizer import parse_number

# Documents written by older clients use snake_case keys.
FIELD_KEYS = {
    "sales": ("sales",),
    "margin_pct": ("marginPct", "margin_pct"),
    "inv_turn": ("invTurn", "inv_turn"),
    "refund_pct": ("refundPct", "refund_pct"),
}


def clean_store_string(value: Any) -> str:
    """Strip stray double quotes and surrounding whitespace from a stored string."""
    if value is None:
        return ""
    return str(value).replace('"', "").strip()


def _first_present(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def parse_daily_metric(row: Dict[str, Any]) -> DailyMetric:
    return DailyMetric(
        date=clean_store_string(row.get("date")),
        **{field: parse_number(_first_present(row, keys)) for field, keys in FIELD_KEYS.items()},
    )


def build_series(rows: Iterable[Dict[str, Any]]) -> List[DailyMetric]:
    """Coerce every row and sort ascending by ISO date."""
    series = [parse_daily_metric(row) for row in rows]
    series.sort(key=lambda metric: metric.date)
    return series


def filter_by_date(
    series: List[DailyMetric],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[DailyMetric]:
    """Keep records inside the inclusive ``[date_from, date_to]`` window."""
    if date_from is None and date_to is None:
        return series

    lower = date_from.isoformat() if date_from else None
    upper = date_to.isoformat() if date_to else None
    return [
        metric
        for metric in series
        if metric.date
        and (lower is None or metric.date[:10] >= lower)
        and (upper is None or metric.date[:10] <= upper)
    ]


def latest_usable_record(series: List[DailyMetric]) -> Optional[DailyMetric]:
    """
    Return the most recent record with at least one defined metric.

    Falls back to the chronologically last record when none qualifies, and to
    None for an empty series.
    """
    for metric in reversed(series):
        if metric.is_usable():
            return metric
    return series[-1] if series else None
