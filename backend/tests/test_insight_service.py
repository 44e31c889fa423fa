"""Unit tests for the insight orchestrator."""
from datetime import date

import pytest
from app.models.schemas import DailyMetric
from app.services.insight_service import (
    NO_DATA_RECOMMENDATION,
    NO_DATA_SUMMARY,
    InsightService,
    InsightValidationError,
    build_snapshot,
    build_summary,
)
from app.services.openrouter_client import GenerationResult
from app.services.recommendation import RecommendationGenerator
from app.services.series_store import LocalSeriesStore

ONE_DAY = [{"date": "2024-01-01", "sales": 1000, "marginPct": 0.5, "invTurn": 2, "refundPct": 0.02}]


class StubClient:
    def __init__(self, result):
        self.result = result

    def generate(self, prompt):
        return self.result


def make_service(series_by_store, client=None) -> InsightService:
    store = LocalSeriesStore(series_by_store=series_by_store, stores={}, include_demo=False)
    return InsightService(store, RecommendationGenerator(client))


class TestGetInsight:
    """Test end-to-end insight generation."""

    def test_single_record(self):
        result = make_service({"s1": ONE_DAY}).get_insight("s1")

        assert result.ok
        assert result.metrics.period_label == "2024-01-01"
        assert result.metrics.sales == 1000
        assert result.metrics.margin_pct == pytest.approx(50)
        assert result.metrics.refund_pct == pytest.approx(2)
        assert result.metrics.inv_turn == 2
        assert result.health_score == pytest.approx(64.4)
        assert result.decision == "Maintain"
        assert "Maintain" in result.recommendation

    def test_summary_mentions_every_metric(self):
        summary = make_service({"s1": ONE_DAY}).get_insight("s1").summary

        assert "$1,000.00" in summary
        assert "estimated profit of $500.00" in summary
        assert "margin 50.00%" in summary
        assert "Refunds were 2.00%" in summary
        assert "2.00×" in summary

    def test_empty_series(self):
        result = make_service({}).get_insight("s1")

        assert result.ok
        assert result.metrics is None
        assert result.health_score is None
        assert result.recommendation == NO_DATA_RECOMMENDATION
        assert result.summary == NO_DATA_SUMMARY

    @pytest.mark.parametrize("store_id", [None, "", "   "])
    def test_missing_store_id(self, store_id):
        with pytest.raises(InsightValidationError):
            make_service({}).get_insight(store_id)

    def test_uses_latest_usable_record(self):
        rows = [
            {"date": "2024-01-02"},
            {"date": "2024-01-01", "sales": 800, "marginPct": 0.9, "invTurn": 4, "refundPct": 0.01},
        ]
        result = make_service({"s1": rows}).get_insight("s1")

        assert result.metrics.period_label == "2024-01-01"
        assert result.metrics.sales == 800
        assert result.decision == "Invest"

    def test_percent_fields_already_scaled(self):
        rows = [{"date": "2024-01-01", "sales": "500", "marginPct": 43, "invTurn": "1", "refundPct": 3}]
        result = make_service({"s1": rows}).get_insight("s1")

        assert result.metrics.margin_pct == 43
        assert result.metrics.refund_pct == 3

    def test_date_window(self):
        rows = ONE_DAY + [{"date": "2024-02-01", "sales": 10, "marginPct": 0.05, "invTurn": 0.2, "refundPct": 0.5}]
        service = make_service({"s1": rows})

        assert service.get_insight("s1").metrics.period_label == "2024-02-01"
        assert service.get_insight("s1", date_to=date(2024, 1, 31)).metrics.period_label == "2024-01-01"
        assert service.get_insight("s1", date_from=date(2025, 1, 1)).metrics is None

    def test_external_recommendation(self):
        client = StubClient(GenerationResult.success("Refunds are low at 2%. Decision: Invest."))
        result = make_service({"s1": ONE_DAY}, client).get_insight("s1", goal="Be brief")

        assert result.recommendation == "Refunds are low at 2%. Decision: Invest."
        assert result.decision == "Invest"
        assert result.health_score == pytest.approx(64.4)

    def test_external_failure_is_absorbed(self):
        client = StubClient(GenerationResult.failure("timed out"))
        result = make_service({"s1": ONE_DAY}, client).get_insight("s1")
        assert "Decision: Maintain." in result.recommendation


class TestSnapshot:
    """Test snapshot helpers."""

    def test_period_label_falls_back_to_today(self):
        snapshot = build_snapshot(DailyMetric(date="", sales=1), period_label=None)
        assert len(snapshot.period_label) == 10
        assert snapshot.period_label[4] == "-"

    def test_missing_fields_become_zero(self):
        snapshot = build_snapshot(DailyMetric(date="2024-01-01"))
        assert (snapshot.sales, snapshot.margin_pct, snapshot.refund_pct, snapshot.inv_turn) == (0, 0, 0, 0)
        assert snapshot.invested_cum == 0

    def test_summary_profit(self):
        snapshot = build_snapshot(DailyMetric(date="2024-01-01", sales=200, margin_pct=0.25))
        assert "estimated profit of $50.00" in build_summary(snapshot)


class TestGetTrend:
    def test_trend_points(self):
        rows = [
            {"date": f"2024-01-{day:02d}", "sales": 100, "marginPct": 0.5, "invTurn": 1.75, "refundPct": 0.1}
            for day in (3, 1, 2)
        ]
        points = make_service({"s1": rows}).get_trend("s1")

        assert [point.date for point in points] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert [point.index for point in points] == [100.0, 88.5, 79.9]
