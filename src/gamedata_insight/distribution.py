#!/usr/bin/env python3
"""
Shape analysis of a numeric field's values.

Classification precedence, first match wins:

1. near-symmetric and evenly spread      -> UNIFORM
2. near-symmetric                        -> NORMAL
3. strong right skew                     -> SKEWED_RIGHT
4. strong left skew                      -> SKEWED_LEFT
5. top 10% of values hold most of the sum -> POWER_LAW
6. anything else                         -> DISCRETE

Gaps (unusually wide holes between consecutive sorted values) are reported
alongside the classification.
"""
from __future__ import annotations

from typing import List, Sequence

from .constants import (
    EVENNESS_BUCKETS,
    GAP_FACTOR,
    GAP_MIN_ABSOLUTE,
    POWER_LAW_MIN_VALUES,
    POWER_LAW_TOP_SHARE,
    STRONG_SKEW_LIMIT,
    UNIFORM_EVENNESS_MIN,
    UNIFORM_SKEW_LIMIT,
)
from .models import DistributionProfile, DistributionType, GapInfo

EMPTY_DATA_INSIGHT = "empty data"

_INSIGHTS = {
    DistributionType.UNIFORM: (
        "Values are spread evenly; every range holds a similar number of "
        "entries, which suggests a balanced design"
    ),
    DistributionType.NORMAL: (
        "Close to a normal distribution; most values sit in the middle, "
        "as is usual for tuned content"
    ),
    DistributionType.SKEWED_RIGHT: (
        "Skewed right: many low values and a few high ones; "
        "check whether the high end is too strong"
    ),
    DistributionType.SKEWED_LEFT: (
        "Skewed left: many high values and a few low ones; "
        "low-tier content may be missing"
    ),
    DistributionType.POWER_LAW: (
        "Power-law shaped: a handful of very high values dominate, "
        "which may indicate a serious imbalance"
    ),
    DistributionType.DISCRETE: "Discrete distribution with clearly separated tiers",
}


def skewness(sorted_values: Sequence[float], mean: float) -> float:
    """Population skewness m3 / m2^1.5, 0.0 when all values are equal."""
    n = len(sorted_values)
    m2 = sum((v - mean) ** 2 for v in sorted_values) / n
    m3 = sum((v - mean) ** 3 for v in sorted_values) / n
    if m2 == 0:
        return 0.0
    return m3 / m2**1.5


def evenness(sorted_values: Sequence[float]) -> float:
    """How evenly values fill equal-width buckets over [min, max].

    1.0 means every bucket holds the same number of values; the score drops
    (below zero for heavy clustering) as values pile into fewer buckets.
    """
    n = len(sorted_values)
    if n < 2:
        return 1.0

    low, high = sorted_values[0], sorted_values[-1]
    value_range = high - low
    if value_range == 0:
        return 1.0

    buckets = min(EVENNESS_BUCKETS, n)
    counts = [0] * buckets
    for v in sorted_values:
        counts[min(buckets - 1, int((v - low) / value_range * buckets))] += 1

    expected = n / buckets
    variance = sum((c - expected) ** 2 for c in counts) / buckets
    max_variance = expected**2 * (buckets - 1) / buckets
    if max_variance == 0:
        return 1.0
    return 1.0 - variance / max_variance


def find_gaps(sorted_values: Sequence[float]) -> List[GapInfo]:
    if len(sorted_values) < 2:
        return []

    diffs = [b - a for a, b in zip(sorted_values, sorted_values[1:])]
    threshold = sum(diffs) / len(diffs) * GAP_FACTOR

    gaps = []
    for (start, end), diff in zip(zip(sorted_values, sorted_values[1:]), diffs):
        if diff > threshold and diff > GAP_MIN_ABSOLUTE:
            gaps.append(
                GapInfo(
                    start=start,
                    end=end,
                    description=f"No values between {start:.1f} and {end:.1f}",
                )
            )
    return gaps


def is_power_law(sorted_values: Sequence[float]) -> bool:
    n = len(sorted_values)
    if n < POWER_LAW_MIN_VALUES:
        return False
    top_count = n // 10
    top_sum = sum(sorted_values[n - top_count :])
    total = sum(sorted_values)
    if total == 0:
        return False
    return top_sum / total > POWER_LAW_TOP_SHARE


def analyze_distribution(name: str, values: Sequence[float]) -> DistributionProfile:
    if not values:
        return DistributionProfile(
            field_name=name,
            type=DistributionType.DISCRETE,
            skewness=0.0,
            evenness=0.0,
            insight=EMPTY_DATA_INSIGHT,
        )

    ordered = sorted(values)
    mean = sum(ordered) / len(ordered)
    skew = skewness(ordered, mean)
    spread = evenness(ordered)
    gaps = find_gaps(ordered)

    if abs(skew) < UNIFORM_SKEW_LIMIT and spread > UNIFORM_EVENNESS_MIN:
        kind = DistributionType.UNIFORM
    elif abs(skew) < UNIFORM_SKEW_LIMIT:
        kind = DistributionType.NORMAL
    elif skew > STRONG_SKEW_LIMIT:
        kind = DistributionType.SKEWED_RIGHT
    elif skew < -STRONG_SKEW_LIMIT:
        kind = DistributionType.SKEWED_LEFT
    elif is_power_law(ordered):
        kind = DistributionType.POWER_LAW
    else:
        kind = DistributionType.DISCRETE

    return DistributionProfile(
        field_name=name,
        type=kind,
        skewness=skew,
        evenness=spread,
        insight=_INSIGHTS[kind],
        gaps=gaps,
    )


__all__ = [
    "analyze_distribution",
    "skewness",
    "evenness",
    "find_gaps",
    "is_power_law",
    "EMPTY_DATA_INSIGHT",
]
