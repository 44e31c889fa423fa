"""Demo stores used when no series store is configured."""

from __future__ import annotations

import math
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

DEMO_SERIES_DAYS = 60

# Shape of each demo store's synthetic history. Margin and refund are
# fractions, matching what the trend index expects.
_SERIES_PROFILES: Dict[str, Dict[str, Any]] = {
    "main-street-coffee": {
        "seed": 11,
        "sales_base": 600, "sales_amplitude": 60, "sales_noise": 30,
        "wave": lambda i: math.sin(i / 6),
        "margin": (0.58, 0.03),
        "inv_turn": (2.0, 0.3),
        "refund": (0.02, 0.005),
    },
    "pine-bluff-auto": {
        "seed": 23,
        "sales_base": 900, "sales_amplitude": 120, "sales_noise": 60,
        "wave": lambda i: math.cos(i / 7),
        "margin": (0.42, 0.03),
        "inv_turn": (1.3, 0.25),
        "refund": (0.015, 0.005),
    },
    "downtown-boutique": {
        "seed": 37,
        "sales_base": 500, "sales_amplitude": 80, "sales_noise": 40,
        "wave": lambda i: math.sin(i / 5 + 1),
        "margin": (0.52, 0.04),
        "inv_turn": (2.4, 0.35),
        "refund": (0.03, 0.007),
    },
}

sample_stores: Dict[str, Dict[str, Any]] = {
    "main-street-coffee": {
        "id": "main-street-coffee",
        "name": "Main Street Coffee",
        "sector": "Cafe",
        "goal": 2000,
        "fundedPct": 0.8,
    },
    "pine-bluff-auto": {
        "id": "pine-bluff-auto",
        "name": "Pine Bluff Auto Repair",
        "sector": "Auto",
        "goal": 1500,
        "fundedPct": 0.6,
    },
    "downtown-boutique": {
        "id": "downtown-boutique",
        "name": "Downtown Boutique",
        "sector": "Retail",
        "goal": 3000,
        "fundedPct": 0.5,
    },
}


def _jitter(rng: random.Random, center: float, spread: float) -> float:
    return center + (rng.random() * 2 * spread - spread)


def generate_demo_series(
    store_id: str,
    days: int = DEMO_SERIES_DAYS,
    end: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Return ``days`` daily documents ending at ``end`` (today by default)."""
    profile = _SERIES_PROFILES.get(store_id)
    if profile is None:
        return []

    end = end or date.today()
    rng = random.Random(profile["seed"])
    rows: List[Dict[str, Any]] = []
    for i in range(days):
        day = end - timedelta(days=days - 1 - i)
        sales = (
            profile["sales_base"]
            + round(profile["sales_amplitude"] * profile["wave"](i))
            + round(rng.random() * profile["sales_noise"])
        )
        rows.append({
            "date": day.isoformat(),
            "sales": sales,
            "marginPct": _jitter(rng, *profile["margin"]),
            "invTurn": _jitter(rng, *profile["inv_turn"]),
            "refundPct": _jitter(rng, *profile["refund"]),
        })
    return rows
