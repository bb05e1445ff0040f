#!/usr/bin/env python3
"""
Per-field statistics over flattened records.

The aggregator is a two-phase object: records are fed through ``accept``
and, once every record was seen, ``finalize`` resolves the derived facts
(primary-key candidate, coverage) and returns an immutable snapshot.
Accepting more records after that is an error.

One aggregator serves one analysis run for a single caller; it is not safe
to share across threads without external synchronization.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .constants import (
    EMPTY_VALUE_LABEL,
    MAX_TRACKED_UNIQUE_VALUES,
    NUMERIC_VALUE_PATTERN,
    PRIMARY_KEY_MIN_COVERAGE,
    TOP_VALUE_LIMIT,
    TRUNCATED_VALUES_LABEL,
)
from .exceptions import AggregatorFinalizedError
from .logging_config import get_logger
from .models import AttributeInsight, AttributeValueDistribution, ValueCount

logger = get_logger(__name__)

_NUMERIC_RE = re.compile(NUMERIC_VALUE_PATTERN)


class BoundedCounter:
    """Occurrence counter that stops tracking new keys once full.

    Keys already tracked keep counting after the cap is reached; unseen keys
    are dropped and set ``truncated``.
    """

    def __init__(self, capacity: int = MAX_TRACKED_UNIQUE_VALUES):
        self.capacity = capacity
        self.truncated = False
        self._counts: Dict[str, int] = {}

    def add(self, key: str) -> Optional[int]:
        """Count one occurrence of ``key``.

        Returns the updated count, or None when the key was dropped.
        """
        if key in self._counts:
            self._counts[key] += 1
            return self._counts[key]
        if len(self._counts) >= self.capacity:
            self.truncated = True
            return None
        self._counts[key] = 1
        return 1

    def most_common(self) -> List[Tuple[str, int]]:
        # sorted() is stable, so ties keep first-seen order
        return sorted(self._counts.items(), key=lambda kv: kv[1], reverse=True)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __getitem__(self, key: str) -> int:
        return self._counts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)


class AttributeStats:
    """Running statistics for one field."""

    def __init__(self, name: str):
        self.name = name
        self.present_count = 0
        self.blank_count = 0
        self.duplicate_samples = 0
        self.values = BoundedCounter()
        self.numeric_samples = 0
        self.minimum: Optional[float] = None
        self.maximum: Optional[float] = None
        self.mean = 0.0

    def record(self, raw_value: Optional[str]) -> None:
        self.present_count += 1
        value = (raw_value or "").strip()
        if not value:
            self.blank_count += 1

        if self.values.add(value) == 2:
            self.duplicate_samples += 1

        if _NUMERIC_RE.match(value):
            number = float(value)
            self.numeric_samples += 1
            self.minimum = number if self.minimum is None else min(self.minimum, number)
            self.maximum = number if self.maximum is None else max(self.maximum, number)
            self.mean += (number - self.mean) / self.numeric_samples

    @property
    def truncated(self) -> bool:
        return self.values.truncated

    def coverage_ratio(self, entry_count: int) -> float:
        if entry_count == 0:
            return 0.0
        return self.present_count / entry_count

    def to_insight(self) -> AttributeInsight:
        has_numbers = self.numeric_samples > 0
        return AttributeInsight(
            name=self.name,
            present_count=self.present_count,
            unique_count=len(self.values),
            unique_count_truncated=self.truncated,
            duplicate_samples=self.duplicate_samples,
            blank_count=self.blank_count,
            minimum_value=self.minimum if has_numbers else None,
            maximum_value=self.maximum if has_numbers else None,
            average_value=self.mean if has_numbers else None,
        )

    def to_distribution(self, entry_count: int) -> AttributeValueDistribution:
        """Most frequent values, with a trailing bucket when values were dropped.

        The trailing bucket counts the tracked values beyond the window and
        always reports a percentage of 0.
        """
        ranked = self.values.most_common()
        top_values = []
        for value, count in ranked[:TOP_VALUE_LIMIT]:
            percentage = count * 100.0 / entry_count if entry_count else 0.0
            top_values.append(
                ValueCount(
                    value=value if value else EMPTY_VALUE_LABEL,
                    count=count,
                    percentage=percentage,
                )
            )

        if self.truncated and len(ranked) > TOP_VALUE_LIMIT:
            top_values.append(
                ValueCount(
                    value=TRUNCATED_VALUES_LABEL,
                    count=len(ranked) - TOP_VALUE_LIMIT,
                    percentage=0.0,
                )
            )

        return AttributeValueDistribution(attribute_name=self.name, top_values=top_values)


@dataclass(frozen=True)
class AggregationSnapshot:
    """Immutable result of a finalized aggregation."""

    entry_count: int
    field_names: Tuple[str, ...]
    primary_key_candidate: Optional[str]
    insights: Tuple[AttributeInsight, ...]
    distributions: Tuple[AttributeValueDistribution, ...]
    coverage: Dict[str, float] = field(default_factory=dict)

    def insight_for(self, name: str) -> Optional[AttributeInsight]:
        for insight in self.insights:
            if insight.name == name:
                return insight
        return None


class AttributeAggregator:
    """Routes record fields to their AttributeStats, in first-seen order."""

    def __init__(self) -> None:
        self.attribute_stats: Dict[str, AttributeStats] = {}
        self._finalized = False

    def accept(self, record: Mapping[str, Optional[str]]) -> None:
        if self._finalized:
            raise AggregatorFinalizedError()
        for name, value in record.items():
            stats = self.attribute_stats.get(name)
            if stats is None:
                stats = self.attribute_stats[name] = AttributeStats(name)
            stats.record(value)

    @property
    def field_names(self) -> List[str]:
        return list(self.attribute_stats)

    def resolve_primary_key_candidate(self, entry_count: int) -> Optional[str]:
        """Best fully unique, non-blank field covering at least 95% of entries.

        On equal coverage the field seen first wins.
        """
        candidate = None
        best_ratio = 0.0
        for name, stats in self.attribute_stats.items():
            ratio = stats.coverage_ratio(entry_count)
            if ratio < PRIMARY_KEY_MIN_COVERAGE:
                continue
            if stats.duplicate_samples > 0 or stats.blank_count > 0:
                continue
            if ratio > best_ratio:
                best_ratio = ratio
                candidate = name
        return candidate

    def finalize(self, entry_count: int) -> AggregationSnapshot:
        if self._finalized:
            raise AggregatorFinalizedError()
        self._finalized = True

        primary_key = self.resolve_primary_key_candidate(entry_count)
        logger.debug(
            "Aggregated %d fields over %d entries, primary key candidate: %s",
            len(self.attribute_stats),
            entry_count,
            primary_key,
        )
        stats = list(self.attribute_stats.values())
        return AggregationSnapshot(
            entry_count=entry_count,
            field_names=tuple(self.attribute_stats),
            primary_key_candidate=primary_key,
            insights=tuple(s.to_insight() for s in stats),
            distributions=tuple(s.to_distribution(entry_count) for s in stats),
            coverage={s.name: s.coverage_ratio(entry_count) for s in stats},
        )


__all__ = [
    "BoundedCounter",
    "AttributeStats",
    "AttributeAggregator",
    "AggregationSnapshot",
]
