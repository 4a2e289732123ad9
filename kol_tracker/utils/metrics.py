"""Pure metric math helpers used by the aggregation layer.

Every helper here is total: malformed input (None, NaN, infinities,
negatives, non-numbers) is coerced to 0 instead of raising.
"""
from __future__ import annotations

import math
from decimal import Decimal
from numbers import Real

from kol_tracker.config import METRICS_SETTINGS


def non_negative(value: object) -> float | int:
    """Return ``value`` if it is a finite number >= 0, otherwise 0.

    ints stay ints so follower/impression sums remain integral.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, Decimal):
        value = float(value)
    if not isinstance(value, Real):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if value < 0:
        return 0
    return value


def safe_div(numerator: float | int, denominator: float | int) -> float:
    if denominator in (0, 0.0):
        return 0.0
    return float(numerator) / float(denominator)


def blended_cpm(total_cost: float | int, total_impressions: float | int) -> float:
    """Cost per mille over totals; 0 when there are no impressions."""
    if total_impressions <= 0:
        return 0.0
    return safe_div(total_cost, total_impressions) * float(METRICS_SETTINGS["cpm_multiplier"])


__all__ = ["non_negative", "safe_div", "blended_cpm"]
