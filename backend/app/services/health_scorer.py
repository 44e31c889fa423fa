"""Point-in-time store health score calculation service."""
from typing import Any, Dict, Optional

from app.models.schemas import InsightMetrics
from app.services.normalizer import clamp


class HealthScorer:
    """Score a normalized snapshot on a 0-100 scale."""

    # Component weights (sum to 1). Margin dominates: this is a financial
    # health judgment, not a momentum index.
    WEIGHTS = {
        "margin": 0.5,
        "refunds": 0.3,
        "turnover": 0.2,
    }

    # Inventory turnover that earns a full turnover score
    TURNOVER_CAP = 4.0

    # Decision bands (min threshold, decision) - uses >= comparison in order
    DECISION_BANDS = [
        (75, "Invest"),
        (50, "Maintain"),
        (0, "Pause"),
    ]

    # Plain-language name of each component when it is the main drag on the score
    RISK_DRIVERS = {
        "margin": "thin margins (costs)",
        "refunds": "high refunds (returns)",
        "turnover": "slow inventory turnover (stock)",
    }

    def __init__(self, margin_pct: float, refund_pct: float, inv_turn: float):
        """
        Initialize health scorer.

        Args:
            margin_pct: Profit margin on the 0-100 scale
            refund_pct: Refund rate on the 0-100 scale
            inv_turn: Inventory turnover ratio
        """
        self.margin_pct = margin_pct
        self.refund_pct = refund_pct
        self.inv_turn = inv_turn
        self.component_scores: Dict[str, float] = {}

    @classmethod
    def from_metrics(cls, metrics: InsightMetrics) -> "HealthScorer":
        return cls(metrics.margin_pct, metrics.refund_pct, metrics.inv_turn)

    def calculate_health_score(self) -> Dict[str, Any]:
        """
        Calculate the health score and its breakdown.

        Returns:
            Dictionary with overall score, decision, component scores and the
            largest risk driver
        """
        self._calculate_component_scores()
        overall_score = self._calculate_weighted_score()

        return {
            "overall_score": overall_score,
            "decision": self.get_decision(overall_score),
            "component_scores": dict(self.component_scores),
            "component_weights": dict(self.WEIGHTS),
            "risk_driver": self.largest_risk_driver(),
        }

    def _calculate_component_scores(self):
        self.component_scores = {
            "margin": clamp(self.margin_pct),
            "refunds": clamp(100 - self.refund_pct),
            "turnover": clamp((self.inv_turn / self.TURNOVER_CAP) * 100),
        }

    def _calculate_weighted_score(self) -> float:
        total = sum(
            self.component_scores[component] * weight
            for component, weight in self.WEIGHTS.items()
        )
        return clamp(total)

    def largest_risk_driver(self) -> str:
        """Return the component losing the most weighted points."""
        if not self.component_scores:
            self._calculate_component_scores()
        return max(
            self.WEIGHTS,
            key=lambda component: self.WEIGHTS[component] * (100 - self.component_scores[component]),
        )

    @classmethod
    def get_decision(cls, score: float) -> str:
        """Get the decision word for a health score."""
        for threshold, decision in cls.DECISION_BANDS:
            if score >= threshold:
                return decision
        return "Pause"


def compute_health_score(margin_pct: float, refund_pct: float, inv_turn: float) -> float:
    """
    Compute the 0-100 health score.

    Args:
        margin_pct: Profit margin on the 0-100 scale
        refund_pct: Refund rate on the 0-100 scale
        inv_turn: Inventory turnover ratio (4.0 maps to a full turnover score)
    """
    return HealthScorer(margin_pct, refund_pct, inv_turn).calculate_health_score()["overall_score"]


def calculate_health_score(metrics: InsightMetrics) -> Dict[str, Any]:
    """Score a snapshot and return the full breakdown."""
    return HealthScorer.from_metrics(metrics).calculate_health_score()


def describe_risk_driver(component: Optional[str]) -> str:
    return HealthScorer.RISK_DRIVERS.get(component or "", "the weakest metric")
