"""On-disk fallback caches used when Supabase is unavailable."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[2]
CACHE_DIR = BACKEND_DIR / "data" / "local_cache"
STORES_CACHE_FILE = CACHE_DIR / "stores.json"
SERIES_CACHE_FILE = CACHE_DIR / "series.json"


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _load_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable local cache %s: %s", path, exc)
        return {}
    return payload if isinstance(payload, dict) else {}


def _save_json(path: Path, payload: Dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, default=_json_default, indent=2))
    except OSError as exc:  # pragma: no cover - best-effort persistence
        logger.warning("Unable to persist local cache %s: %s", path, exc)


# Store profile dictionaries keyed by store ID
fallback_stores: Dict[str, Dict[str, Any]] = _load_json(STORES_CACHE_FILE)

# Raw daily metric documents keyed by store ID, in no particular order
fallback_series: Dict[str, List[Dict[str, Any]]] = _load_json(SERIES_CACHE_FILE)


def save_fallback_stores() -> None:
    """Persist current fallback store profiles to disk."""
    _save_json(STORES_CACHE_FILE, fallback_stores)


def save_fallback_series() -> None:
    """Persist current fallback series to disk."""
    _save_json(SERIES_CACHE_FILE, fallback_series)
