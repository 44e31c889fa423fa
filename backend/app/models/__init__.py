"""Database models and schemas."""
from app.models.database import get_supabase_client
from app.models.schemas import (
    DailyMetric,
    InsightMetrics,
    InsightRequest,
    InsightResponse,
    StoreProfile,
    TrendPoint,
    TrendResponse,
)

__all__ = [
    "get_supabase_client",
    "DailyMetric",
    "InsightMetrics",
    "InsightRequest",
    "InsightResponse",
    "StoreProfile",
    "TrendPoint",
    "TrendResponse",
]
