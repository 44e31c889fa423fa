"""Recommendation text for a scored store snapshot."""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.models.schemas import InsightMetrics
from app.services.health_scorer import HealthScorer, describe_risk_driver
from app.services.openrouter_client import TextGenClient

logger = logging.getLogger(__name__)

DEFAULT_TASK = (
    "Write ONE short, decisive recommendation (2 sentences max) using the metrics provided. "
    "Conclude with 'Invest', 'Maintain', or 'Pause'."
)

# Guidance handed to the text generation service alongside the metrics
RULE_HINTS: List[str] = [
    "If Health >= 75 → bias toward Invest (expand inventory/marketing modestly).",
    "If 50–74 → Maintain with one low-risk experiment (price, promo, or SKU focus).",
    "If < 50 → Pause new investment and fix the largest issue (costs, returns, or slow stock).",
    "Be concrete and reference at least one metric (e.g., margin, refunds, or turnover).",
]

_DECISION_PATTERN = re.compile(r"\b(Invest|Maintain|Pause)\b", re.IGNORECASE)


@dataclass(frozen=True)
class Recommendation:
    text: str
    decision: str
    source: str  # "external" or "fallback"


def _metric_reference(component: str, metrics: InsightMetrics) -> str:
    if component == "margin":
        return f"margin {metrics.margin_pct:.1f}%"
    if component == "refunds":
        return f"refunds {metrics.refund_pct:.1f}%"
    return f"turnover {metrics.inv_turn:.2f}×"


def fallback_recommendation(metrics: InsightMetrics, health_score: float) -> Recommendation:
    """Deterministic rule-table recommendation; always available."""
    decision = HealthScorer.get_decision(health_score)

    if decision == "Invest":
        text = (
            f"Strong performance (margin {metrics.margin_pct:.1f}%, refunds {metrics.refund_pct:.1f}%). "
            "Invest modestly in inventory or marketing and track weekend results. Decision: Invest."
        )
    elif decision == "Maintain":
        text = (
            f"Stable but mixed signals (margin {metrics.margin_pct:.1f}%, turnover {metrics.inv_turn:.2f}×). "
            "Maintain inventory and run one small experiment (price or promo) to probe demand. "
            "Decision: Maintain."
        )
    else:
        driver = HealthScorer.from_metrics(metrics).largest_risk_driver()
        text = (
            f"Risk is elevated, driven mostly by {describe_risk_driver(driver)} "
            f"({_metric_reference(driver, metrics)}). "
            "Pause new investment and fix the biggest driver first. Decision: Pause."
        )

    return Recommendation(text=text, decision=decision, source="fallback")


def detect_decision(text: str) -> Optional[str]:
    """Return the last decision word mentioned in free text, if any."""
    matches = _DECISION_PATTERN.findall(text or "")
    return matches[-1].capitalize() if matches else None


class RecommendationGenerator:
    """Produce one recommendation per snapshot, preferring the external generator."""

    def __init__(self, external_client: Optional[TextGenClient] = None):
        self.external_client = external_client

    def build_prompt(
        self,
        metrics: InsightMetrics,
        health_score: float,
        store_id: Optional[str] = None,
        goal: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "task": goal or DEFAULT_TASK,
            "storeId": store_id,
            "metrics": metrics.model_dump(by_alias=True),
            "healthScore": health_score,
            "rules": RULE_HINTS,
        }

    def generate(
        self,
        metrics: InsightMetrics,
        health_score: float,
        store_id: Optional[str] = None,
        goal: Optional[str] = None,
    ) -> Recommendation:
        """
        Generate a recommendation for a scored snapshot.

        The external generator gets exactly one attempt. Its text is used
        verbatim when non-empty; otherwise the rule table answers.
        """
        if self.external_client is None:
            return fallback_recommendation(metrics, health_score)

        result = self.external_client.generate(
            self.build_prompt(metrics, health_score, store_id=store_id, goal=goal)
        )
        text = (result.text or "").strip()
        if result.ok and text:
            decision = detect_decision(text) or HealthScorer.get_decision(health_score)
            return Recommendation(text=text, decision=decision, source="external")

        logger.info(
            "Using rule-based recommendation for store %s: %s",
            store_id,
            result.error or "empty response",
        )
        return fallback_recommendation(metrics, health_score)
