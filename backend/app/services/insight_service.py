"""Health score, summary and recommendation for a store's latest metrics."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings
from app.models.schemas import DailyMetric, InsightMetrics, InsightResponse, TrendPoint
from app.services.health_scorer import compute_health_score
from app.services.normalizer import normalize_percent, to_number
from app.services.openrouter_client import get_openrouter_client
from app.services.recommendation import RecommendationGenerator
from app.services.series import build_series, filter_by_date, latest_usable_record
from app.services.series_store import SeriesStore, get_series_store
from app.services.trend_index import DEFAULT_WINDOW, compute_trend_index

logger = logging.getLogger(__name__)

NO_DATA_RECOMMENDATION = "No data available. Add at least one day's metrics."
NO_DATA_SUMMARY = "No metrics found for this store."


class InsightValidationError(ValueError):
    """Raised when an insight request cannot be served as given."""


def today_label(timezone_name: Optional[str] = None) -> str:
    """Today's date as ``YYYY-MM-DD`` in the report timezone."""
    tz_name = timezone_name or get_settings().report_timezone
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown report timezone %s; using UTC", tz_name)
        tz = ZoneInfo("UTC")
    return datetime.now(tz).date().isoformat()


def build_snapshot(record: DailyMetric, period_label: Optional[str] = None) -> InsightMetrics:
    """Normalize one record; percentages move to the 0-100 scale."""
    return InsightMetrics(
        period_label=record.date or period_label or today_label(),
        sales=to_number(record.sales),
        margin_pct=normalize_percent(to_number(record.margin_pct)),
        refund_pct=normalize_percent(to_number(record.refund_pct)),
        inv_turn=to_number(record.inv_turn),
        invested_cum=0,
    )


def build_summary(metrics: InsightMetrics) -> str:
    """Short, data-first explanation of the snapshot."""
    profit = metrics.sales * (metrics.margin_pct / 100)
    return (
        f"In {metrics.period_label}, sales were ${metrics.sales:,.2f} with an estimated profit of "
        f"${profit:,.2f} (margin {metrics.margin_pct:.2f}%). "
        f"Refunds were {metrics.refund_pct:.2f}% and inventory turnover was {metrics.inv_turn:.2f}×. "
        "Sales indicate current demand, margin shows pricing and cost control, refunds reflect "
        "customer satisfaction, and turnover shows how quickly stock sells; together these guide "
        "whether to invest, maintain, or pause."
    )


def empty_insight() -> InsightResponse:
    return InsightResponse(
        ok=True,
        metrics=None,
        health_score=None,
        summary=NO_DATA_SUMMARY,
        recommendation=NO_DATA_RECOMMENDATION,
        decision=None,
    )


class InsightService:
    """Fetch a store's series and score its latest usable day."""

    def __init__(
        self,
        series_store: SeriesStore,
        recommender: Optional[RecommendationGenerator] = None,
    ):
        self.series_store = series_store
        self.recommender = recommender or RecommendationGenerator()

    def load_series(
        self,
        store_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[DailyMetric]:
        rows = self.series_store.fetch_series(store_id)
        return filter_by_date(build_series(rows), date_from, date_to)

    def get_insight(
        self,
        store_id: Optional[str],
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        goal: Optional[str] = None,
    ) -> InsightResponse:
        """
        Score a store's latest usable record and recommend a decision.

        Raises:
            InsightValidationError: When the store id is missing or blank
        """
        store_id = (store_id or "").strip()
        if not store_id:
            raise InsightValidationError("Missing 'storeId'.")

        series = self.load_series(store_id, date_from, date_to)
        record = latest_usable_record(series)
        if record is None:
            logger.info("No metrics for store %s", store_id)
            return empty_insight()

        metrics = build_snapshot(record)
        health_score = compute_health_score(metrics.margin_pct, metrics.refund_pct, metrics.inv_turn)
        recommendation = self.recommender.generate(metrics, health_score, store_id=store_id, goal=goal)

        return InsightResponse(
            ok=True,
            metrics=metrics,
            health_score=health_score,
            summary=build_summary(metrics),
            recommendation=recommendation.text,
            decision=recommendation.decision,
        )

    def get_trend(self, store_id: str, window: int = DEFAULT_WINDOW) -> List[TrendPoint]:
        """Trend index points for a store's full series, rounded to 1 decimal."""
        series = self.load_series(store_id)
        index = compute_trend_index(series, window)
        return [
            TrendPoint(date=metric.date, index=round(value, 1))
            for metric, value in zip(series, index)
        ]


def get_insight_service() -> InsightService:
    """Get an insight service wired from settings."""
    return InsightService(
        series_store=get_series_store(),
        recommender=RecommendationGenerator(get_openrouter_client()),
    )
