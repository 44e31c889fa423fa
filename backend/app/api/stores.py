"""Store listing and trend index endpoints."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import get_settings
from app.models.schemas import StoreProfile, TrendResponse
from app.services.insight_service import InsightService, get_insight_service
from app.services.normalizer import parse_number
from app.services.series import clean_store_string

logger = logging.getLogger(__name__)

router = APIRouter()


def _default_window() -> int:
    return get_settings().trend_window


@router.get("", response_model=List[StoreProfile], response_model_by_alias=True)
def list_stores(service: InsightService = Depends(get_insight_service)):
    """Return store profiles with their current trend index."""
    try:
        profiles = service.series_store.list_stores()
        window = _default_window()
        stores: List[StoreProfile] = []
        for profile in profiles:
            store_id = clean_store_string(profile.get("id") or profile.get("store_id"))
            if not store_id:
                continue
            points = service.get_trend(store_id, window)
            stores.append(StoreProfile(
                id=store_id,
                name=clean_store_string(profile.get("name")) or store_id,
                sector=clean_store_string(profile.get("sector")) or None,
                goal=parse_number(profile.get("goal")),
                funded_pct=parse_number(profile.get("fundedPct", profile.get("funded_pct"))),
                current_index=points[-1].index if points else None,
            ))
        return stores
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unable to list stores")
        raise HTTPException(status_code=500, detail="Unable to load stores.") from exc


@router.get("/{store_id}/trend", response_model=TrendResponse, response_model_by_alias=True)
def get_store_trend(
    store_id: str,
    window: int | None = Query(default=None, ge=1, le=60),
    service: InsightService = Depends(get_insight_service),
):
    """Return the smoothed trend index for every day of a store's series."""
    window = window or _default_window()
    try:
        points = service.get_trend(store_id, window)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Trend computation failed for store %s", store_id)
        raise HTTPException(status_code=500, detail="Unable to compute trend.") from exc

    if not points:
        raise HTTPException(status_code=404, detail="No metrics found for this store.")

    return TrendResponse(
        store_id=store_id,
        window=window,
        points=points,
        current=points[-1].index,
    )
