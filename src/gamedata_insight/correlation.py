#!/usr/bin/env python3
"""
Pairwise correlation between numeric fields.

Pearson's r classifies a pair as unrelated, moving together, or moving in
opposite directions. Strong positive pairs are further split into steady
(linear) growth and accelerating (power) growth by looking at how the
discrete growth rate changes over the first points. Strong negative pairs
get no such split.
"""
from __future__ import annotations

import math
from typing import Sequence

from .constants import (
    POWER_GROWTH_INCREASING_SHARE,
    POWER_GROWTH_MIN_POINTS,
    POWER_GROWTH_MIN_RATES,
    POWER_GROWTH_RATE_STEP,
    POWER_GROWTH_WINDOW,
    STRONG_CORRELATION_THRESHOLD,
    WEAK_CORRELATION_THRESHOLD,
)
from .models import CorrelationType, FieldCorrelation

INSUFFICIENT_DATA_INSIGHT = "insufficient data or mismatched lengths"


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation coefficient, 0.0 when either side has no variance."""
    n = len(xs)
    sum_x = sum_y = sum_xy = sum_x2 = sum_y2 = 0.0
    for x, y in zip(xs, ys):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x
        sum_y2 += y * y

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # rounding can push a zero-variance product slightly negative
    if spread <= 0:
        return 0.0
    denominator = math.sqrt(spread)
    if denominator == 0:
        return 0.0
    return numerator / denominator


def detect_power_growth(xs: Sequence[float], ys: Sequence[float]) -> bool:
    """True when the growth rate of ``ys`` over ``xs`` keeps accelerating."""
    if len(xs) < POWER_GROWTH_MIN_POINTS:
        return False

    rates = []
    for i in range(1, min(len(xs), POWER_GROWTH_WINDOW)):
        dx = xs[i] - xs[i - 1]
        dy = ys[i] - ys[i - 1]
        if dx > 0:
            rates.append(dy / dx)

    if len(rates) < POWER_GROWTH_MIN_RATES:
        return False

    transitions = len(rates) - 1
    increasing = sum(
        1 for i in range(1, len(rates)) if rates[i] > rates[i - 1] * POWER_GROWTH_RATE_STEP
    )
    return increasing >= transitions * POWER_GROWTH_INCREASING_SHARE


def analyze_correlation(
    name1: str,
    values1: Sequence[float],
    name2: str,
    values2: Sequence[float],
) -> FieldCorrelation:
    """Correlate two equally long value sequences taken from the same records."""
    if len(values1) != len(values2) or not values1:
        return FieldCorrelation(
            field1=name1,
            field2=name2,
            correlation=0.0,
            type=CorrelationType.NO_CORRELATION,
            insight=INSUFFICIENT_DATA_INSIGHT,
        )

    r = pearson(values1, values2)

    if abs(r) <= WEAK_CORRELATION_THRESHOLD:
        kind = CorrelationType.NO_CORRELATION
        insight = f"{name1} and {name2} are unrelated and can be tuned independently"
    elif r > STRONG_CORRELATION_THRESHOLD:
        if detect_power_growth(values1, values2):
            kind = CorrelationType.POWER_GROWTH
            insight = (
                f"{name2} grows exponentially with {name1}; "
                "watch for late-game value inflation"
            )
        else:
            kind = CorrelationType.LINEAR_GROWTH
            insight = f"{name2} grows linearly with {name1} at a steady pace"
    elif r > 0:
        kind = CorrelationType.POSITIVE_LINEAR
        insight = f"{name1} and {name2} are positively correlated and grow together"
    else:
        kind = CorrelationType.NEGATIVE_LINEAR
        insight = f"{name2} falls as {name1} rises; the two balance each other"

    return FieldCorrelation(
        field1=name1, field2=name2, correlation=r, type=kind, insight=insight
    )


__all__ = [
    "analyze_correlation",
    "pearson",
    "detect_power_growth",
    "INSUFFICIENT_DATA_INSIGHT",
]
