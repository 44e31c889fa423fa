"""Smoothed composite trend index over a store's daily metrics."""
from functools import reduce
from typing import List, Sequence

from app.models.schemas import DailyMetric
from app.services.normalizer import clamp, rescale

BASELINE = 100.0
ALPHA = 0.25
DEFAULT_WINDOW = 7

# Blend weights (sum to 1)
WEIGHTS = {
    "sales_growth": 0.45,
    "margin": 0.25,
    "inv_turn": 0.20,
    "refund": 0.10,
}

GROWTH_RANGE = (-0.20, 0.20)
INV_TURN_RANGE = (0.5, 3.0)


def _value(number) -> float:
    return 0.0 if number is None else number


def compute_daily_growth(series: Sequence[DailyMetric], window: int = DEFAULT_WINDOW) -> List[float]:
    """
    Growth of each day's sales against the mean of the ``window`` days before it.

    Days without a full window of history, and days whose prior mean is zero,
    get a growth of exactly 0.
    """
    sales = [_value(metric.sales) for metric in series]
    growth: List[float] = []
    for i, current in enumerate(sales):
        if i < window:
            growth.append(0.0)
            continue
        prev_avg = sum(sales[i - window:i]) / window
        growth.append(0.0 if prev_avg == 0 else (current - prev_avg) / prev_avg)
    return growth


def compute_raw_scores(series: Sequence[DailyMetric], window: int = DEFAULT_WINDOW) -> List[float]:
    """Blend normalized sub-scores into one unsmoothed 0-100 value per day.

    Margin and refund are read as fractions here, as written by the demo
    generator, and are not passed through ``normalize_percent``.
    """
    growth = compute_daily_growth(series, window)
    raw: List[float] = []
    for metric, day_growth in zip(series, growth):
        sales_growth_norm = rescale(day_growth, *GROWTH_RANGE)
        margin_norm = clamp(_value(metric.margin_pct) * 100)
        inv_turn_norm = rescale(_value(metric.inv_turn), *INV_TURN_RANGE)
        refund_norm = 100 - clamp(_value(metric.refund_pct) * 100)

        raw.append(
            WEIGHTS["sales_growth"] * sales_growth_norm
            + WEIGHTS["margin"] * margin_norm
            + WEIGHTS["inv_turn"] * inv_turn_norm
            + WEIGHTS["refund"] * refund_norm
        )
    return raw


def smooth_step(previous: float, raw: float, alpha: float = ALPHA) -> float:
    """One step of the exponential moving average."""
    return alpha * raw + (1 - alpha) * previous


def compute_trend_index(series: Sequence[DailyMetric], window: int = DEFAULT_WINDOW) -> List[float]:
    """
    Compute the smoothed trend index for a date-ordered series.

    The first value is pinned to 100 so the index reads as "100 = neutral";
    every later value folds the day's raw blend into the previous index.
    """
    raw = compute_raw_scores(series, window)
    if not raw:
        return []

    def _fold(index: List[float], value: float) -> List[float]:
        index.append(smooth_step(index[-1], value))
        return index

    return reduce(_fold, raw[1:], [BASELINE])
