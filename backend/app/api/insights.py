"""Insight API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.models.schemas import InsightRequest, InsightResponse
from app.services.insight_service import (
    InsightService,
    InsightValidationError,
    get_insight_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SUPPORTED_COLLECTION = "stores"


@router.post("", response_model=InsightResponse, response_model_by_alias=True)
def create_insight(
    request: InsightRequest,
    service: InsightService = Depends(get_insight_service),
):
    """
    Score a store's latest metrics and return a summary and recommendation.

    Stores without any metrics get a well-formed empty result rather than an
    error.
    """
    if request.collection is not None and request.collection != SUPPORTED_COLLECTION:
        raise HTTPException(status_code=400, detail=f"Use collection: '{SUPPORTED_COLLECTION}'.")

    try:
        return service.get_insight(
            request.store_id,
            date_from=request.date_from,
            date_to=request.date_to,
            goal=request.goal,
        )
    except InsightValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Insight generation failed for store %s", request.store_id)
        raise HTTPException(status_code=500, detail="Unable to generate insight.") from exc
