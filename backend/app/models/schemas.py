"""Pydantic schemas for API models."""
from __future__ import annotations

import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Decision = Literal["Invest", "Maintain", "Pause"]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Series schemas
class DailyMetric(CamelModel):
    """One day of store metrics; None marks an absent or unparseable field."""

    date: str = ""
    sales: Optional[float] = None
    margin_pct: Optional[float] = None
    inv_turn: Optional[float] = None
    refund_pct: Optional[float] = None

    def is_usable(self) -> bool:
        return any(
            value is not None
            for value in (self.sales, self.margin_pct, self.inv_turn, self.refund_pct)
        )


class StoreProfile(CamelModel):
    id: str
    name: str
    sector: Optional[str] = None
    goal: Optional[float] = None
    funded_pct: Optional[float] = None
    current_index: Optional[float] = None


class TrendPoint(CamelModel):
    date: str
    index: float


class TrendResponse(CamelModel):
    store_id: str
    window: int
    points: List[TrendPoint]
    current: Optional[float] = None


# Insight schemas
class InsightRequest(CamelModel):
    collection: Optional[str] = None
    store_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("storeId", "businessId", "store_id", "business_id"),
    )
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    goal: Optional[str] = None


class InsightMetrics(CamelModel):
    """The snapshot that was scored, with percentages on the 0-100 scale."""

    period_label: str
    sales: float
    margin_pct: float
    refund_pct: float
    inv_turn: float
    invested_cum: float = 0


class InsightResponse(CamelModel):
    ok: bool = True
    metrics: Optional[InsightMetrics] = None
    health_score: Optional[float] = None
    summary: str
    recommendation: str
    decision: Optional[Decision] = None
