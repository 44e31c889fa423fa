"""Where store profiles and daily metric documents come from."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from app.config import Settings, get_settings, supabase_configured
from app.services.local_cache import fallback_series, fallback_stores
from app.services.sample_data import generate_demo_series, sample_stores

logger = logging.getLogger(__name__)


class SeriesStore(Protocol):
    def fetch_series(self, store_id: str) -> List[Dict[str, Any]]:
        """Return the raw daily documents for a store, in any order."""
        ...

    def list_stores(self) -> List[Dict[str, Any]]:
        """Return store profile documents."""
        ...


def is_table_missing_error(error: Exception) -> bool:
    """
    Return True when Supabase reports that a referenced table is missing.

    This typically surfaces as PostgREST error code PGRST205 with a message like
    "Could not find the table 'public.xyz' in the schema cache".
    """
    lowered = str(error).lower()
    return (
        "could not find the table" in lowered
        or "pgrst205" in lowered
        or "does not exist" in lowered
    )


class LocalSeriesStore:
    """Series from the on-disk local cache, then the built-in demo stores."""

    def __init__(
        self,
        series_by_store: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        stores: Optional[Dict[str, Dict[str, Any]]] = None,
        include_demo: bool = True,
    ):
        self.series_by_store = fallback_series if series_by_store is None else series_by_store
        self.stores = fallback_stores if stores is None else stores
        self.include_demo = include_demo

    def fetch_series(self, store_id: str) -> List[Dict[str, Any]]:
        rows = self.series_by_store.get(store_id)
        if rows is not None:
            return list(rows)
        if self.include_demo:
            return generate_demo_series(store_id)
        return []

    def list_stores(self) -> List[Dict[str, Any]]:
        profiles: Dict[str, Dict[str, Any]] = {}
        if self.include_demo:
            profiles.update({key: dict(value) for key, value in sample_stores.items()})
        profiles.update({key: {"id": key, **value} for key, value in self.stores.items()})
        return list(profiles.values())


class SupabaseSeriesStore:
    """Series from the Supabase ``stores`` and ``store_series`` tables."""

    def __init__(self, client, settings: Settings, fallback: Optional[SeriesStore] = None):
        self.client = client
        self.stores_table = settings.stores_table
        self.series_table = settings.series_table
        self.fallback = fallback or LocalSeriesStore()

    def fetch_series(self, store_id: str) -> List[Dict[str, Any]]:
        try:
            response = self.client.table(self.series_table)\
                .select("*")\
                .eq("store_id", store_id)\
                .execute()
        except Exception as exc:  # noqa: BLE001
            if is_table_missing_error(exc):
                logger.warning("Supabase table %s missing; using local series", self.series_table)
                return self.fallback.fetch_series(store_id)
            raise
        return list(response.data or [])

    def list_stores(self) -> List[Dict[str, Any]]:
        try:
            response = self.client.table(self.stores_table).select("*").execute()
        except Exception as exc:  # noqa: BLE001
            if is_table_missing_error(exc):
                logger.warning("Supabase table %s missing; using local stores", self.stores_table)
                return self.fallback.list_stores()
            raise
        return list(response.data or [])


def get_series_store() -> SeriesStore:
    """Supabase when it is configured, the local cache otherwise."""
    settings = get_settings()
    if not supabase_configured(settings):
        return LocalSeriesStore()

    from app.models.database import get_supabase_client

    return SupabaseSeriesStore(get_supabase_client(), settings)
