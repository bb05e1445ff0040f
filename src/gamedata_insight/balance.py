#!/usr/bin/env python3
"""
Extreme-outlier detection for balance review.

A value is extreme when it lies more than three interquartile ranges beyond
the quartiles. Quartiles are read straight off the sorted values at
``n // 4`` and ``3n // 4`` without interpolation.

A field with more than five extreme values is treated as a broad pattern
rather than an anomaly and is not reported.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .constants import (
    MAX_OUTLIER_EXAMPLES,
    MAX_REPORTED_OUTLIERS,
    MIN_OUTLIER_VALUES,
    OUTLIER_IQR_MULTIPLIER,
)
from .logging_config import get_logger
from .models import BalanceIssue, InsightSeverity

logger = get_logger(__name__)

Record = Mapping[str, str]

OUTLIER_CATEGORY = "Extreme outliers"
OUTLIER_SUGGESTION = (
    "Check whether these values are intended, or bring them back into the normal range"
)


def _to_float(raw: Optional[str]) -> Optional[float]:
    try:
        return float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def extract_numeric_values(records: Sequence[Record], field_name: str) -> List[float]:
    """Parseable, non-blank values of ``field_name`` in record order."""
    values = []
    for record in records:
        raw = record.get(field_name)
        if raw is None or not raw.strip():
            continue
        number = _to_float(raw.strip())
        if number is not None:
            values.append(number)
    return values


def detect_balance_issues(
    records_by_field: Mapping[str, Sequence[Record]], id_field: str
) -> List[BalanceIssue]:
    """Flag fields with a handful of extreme values.

    ``records_by_field`` maps each numeric field to the records to scan for
    it. Outliers are labelled with the record's ``id_field`` value, or
    ``record <index>`` when the record has none.
    """
    issues = []
    for field_name, records in records_by_field.items():
        values = extract_numeric_values(records, field_name)
        if len(values) < MIN_OUTLIER_VALUES:
            continue

        ordered = sorted(values)
        n = len(ordered)
        q1 = ordered[n // 4]
        q3 = ordered[n * 3 // 4]
        iqr = q3 - q1
        lower = q1 - OUTLIER_IQR_MULTIPLIER * iqr
        upper = q3 + OUTLIER_IQR_MULTIPLIER * iqr

        outliers = []
        for i, record in enumerate(records):
            # an absent field reads as 0, like the collaborator's flattened view
            value = _to_float(record.get(field_name, "0"))
            if value is None:
                continue
            if value < lower or value > upper:
                label = record.get(id_field, f"record {i}")
                outliers.append(f"{label} (value: {value:.2f})")

        if not outliers:
            continue
        if len(outliers) > MAX_REPORTED_OUTLIERS:
            logger.debug(
                "Field %s has %d extreme values; treated as a pattern, not reported",
                field_name,
                len(outliers),
            )
            continue

        issues.append(
            BalanceIssue(
                category=OUTLIER_CATEGORY,
                severity=InsightSeverity.WARNING,
                description=(
                    f"{field_name} has {len(outliers)} extreme outlier(s); "
                    "this may be a configuration error or a deliberate design"
                ),
                suggestion=OUTLIER_SUGGESTION,
                affected_records=outliers[:MAX_OUTLIER_EXAMPLES],
            )
        )
    return issues


def records_by_numeric_field(
    records: Sequence[Record], field_names: Sequence[str]
) -> Dict[str, Sequence[Record]]:
    """Pair every numeric field with the full record list."""
    return {name: records for name in field_names}


__all__ = [
    "detect_balance_issues",
    "extract_numeric_values",
    "records_by_numeric_field",
    "OUTLIER_CATEGORY",
]
