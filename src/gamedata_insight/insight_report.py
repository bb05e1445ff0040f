#!/usr/bin/env python3
"""
Designer insight reports for one data file.

The builder runs the attribute aggregation over a file's flattened records,
derives headline metrics and designer suggestions, and then runs the
advanced statistical phase (attribute types, correlations, distribution
shapes, balance issues). The advanced phase is fail-soft: if it raises, the
error is logged and the report keeps only the basic aggregation results.
"""
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Sequence

from .attribute_stats import AggregationSnapshot, AttributeAggregator
from .attribute_types import identify_attribute_type
from .balance import detect_balance_issues, extract_numeric_values, records_by_numeric_field
from .config import Config
from .constants import (
    LARGE_RECORD_VOLUME,
    LOW_COVERAGE_PERCENT,
    MAX_CORRELATION_FIELDS,
    MAX_DISTRIBUTION_FIELDS,
    MAX_TRACKED_UNIQUE_VALUES,
    MIN_NUMERIC_VALUES,
    MODERATE_COVERAGE_PERCENT,
    SYNC_CHECK_LENIENT_DIFF,
    SYNC_CHECK_MIN_ENTRIES,
    SYNC_CHECK_RATIO,
    SYNC_CHECK_STRICT_DIFF,
    WEAK_CORRELATION_THRESHOLD,
)
from .correlation import analyze_correlation
from .distribution import analyze_distribution
from .logging_config import get_logger, log_performance
from .models import (
    AttributeType,
    BalanceIssue,
    DesignerInsight,
    DistributionProfile,
    FieldCorrelation,
    FileSummary,
    InsightSeverity,
    Metric,
    Suggestion,
)

logger = get_logger(__name__)

Record = Mapping[str, str]

_TABLE_PREFIX_RE = re.compile(r"^(client_|server_|svr_|clt_)")
_TABLE_SUFFIX_RE = re.compile(r"_(config|data|info)$")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]+")
_REPEATED_UNDERSCORE_RE = re.compile(r"__+")


def infer_table_name(file_name: str) -> Optional[str]:
    """Guess the database table a data file is loaded into.

    >>> infer_table_name("client_item_data.xml")
    'item'
    """
    dot = file_name.rfind(".")
    base = file_name[:dot] if dot > 0 else file_name
    base = _TABLE_PREFIX_RE.sub("", base)
    base = _TABLE_SUFFIX_RE.sub("", base)
    base = _NON_IDENTIFIER_RE.sub("_", base)
    base = _REPEATED_UNDERSCORE_RE.sub("_", base).lower()
    return base or None


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB")
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(units) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {units[unit]}"


def _table_detail(table_exists: Optional[bool]) -> str:
    if table_exists is None:
        return "Guessed from the file name; not checked against a database."
    if table_exists:
        return "Matching table found in the database for cross checking."
    return (
        "No matching table was found in the database; review "
        "mapping or initialisation scripts."
    )


def find_id_field(field_names: Sequence[str]) -> Optional[str]:
    """``id`` when present, else the first field whose name contains "id"."""
    if "id" in field_names:
        return "id"
    for name in field_names:
        if "id" in name.lower():
            return name
    return None


class InsightReportBuilder:
    """Builds one DesignerInsight per analyzed file."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    @staticmethod
    def unparseable(summary: FileSummary) -> DesignerInsight:
        """Minimal report for a file the collaborator could not parse."""
        return DesignerInsight(
            file_summary=summary,
            parsed=False,
            entry_count=0,
            suggestions=[
                Suggestion(
                    title="Unable to Parse",
                    description=(
                        "The file could not be parsed. Check the file contents "
                        "or whether another program holds a lock on it."
                    ),
                    severity=InsightSeverity.CRITICAL,
                )
            ],
        )

    @log_performance
    def build(
        self,
        records: Sequence[Record],
        summary: Optional[FileSummary] = None,
        entry_count: Optional[int] = None,
        sample_limit: Optional[int] = None,
    ) -> DesignerInsight:
        if summary is None:
            summary = FileSummary(source="", display_name="")
        if entry_count is None:
            entry_count = len(records)
        if sample_limit is None:
            sample_limit = self.config.sample_record_limit

        aggregator = AttributeAggregator()
        analyzed: List[Record] = []
        samples: List[Dict[str, str]] = []
        for record in records:
            if record:
                aggregator.accept(record)
                analyzed.append(record)
            if len(samples) < sample_limit:
                samples.append(dict(record))

        snapshot = aggregator.finalize(entry_count)

        advanced = self._advanced_analysis(analyzed, snapshot)

        return DesignerInsight(
            file_summary=summary,
            parsed=True,
            entry_count=entry_count,
            metrics=self._metrics(summary, snapshot),
            suggestions=self._suggestions(summary, snapshot, aggregator),
            attribute_insights=list(snapshot.insights),
            distributions=list(snapshot.distributions),
            sample_records=samples,
            **advanced,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Metrics and suggestions
    # ──────────────────────────────────────────────────────────────────────

    def _metrics(self, summary: FileSummary, snapshot: AggregationSnapshot) -> List[Metric]:
        entry_count = snapshot.entry_count
        metrics = [
            Metric(
                name="Record Count",
                value=f"{entry_count:,}",
                detail="Total number of parsed data entries.",
            ),
            Metric(
                name="Field Count",
                value=str(len(snapshot.field_names)),
                detail="Distinct field names observed across all records.",
            ),
        ]

        if snapshot.primary_key_candidate is not None:
            metrics.append(
                Metric(
                    name="Primary Key Candidate",
                    value=snapshot.primary_key_candidate,
                    detail=(
                        "Field covers at least 95% of records without duplicates; "
                        "likely a primary key."
                    ),
                )
            )

        metrics.append(
            Metric(
                name="File Size",
                value=format_file_size(summary.file_size),
                detail="Approximate size of the data file on disk.",
            )
        )

        if summary.inferred_table_name:
            metrics.append(
                Metric(
                    name="Inferred Table Name",
                    value=summary.inferred_table_name,
                    detail=_table_detail(summary.table_exists),
                )
            )

        if summary.table_exists and summary.database_row_count is not None:
            metrics.append(
                Metric(
                    name="Database Row Count",
                    value=f"{summary.database_row_count:,}",
                    detail="Rows currently stored in the mapped database table.",
                )
            )
            diff = summary.database_row_count - entry_count
            if diff != 0:
                metrics.append(
                    Metric(
                        name="Record Delta",
                        value=str(diff),
                        detail=(
                            "Database contains more rows than the data file; "
                            "export may be incomplete."
                            if diff > 0
                            else "Data file contains more rows than the database "
                            "table; data might not be synced."
                        ),
                    )
                )

        return metrics

    def _suggestions(
        self,
        summary: FileSummary,
        snapshot: AggregationSnapshot,
        aggregator: AttributeAggregator,
    ) -> List[Suggestion]:
        entry_count = snapshot.entry_count
        if entry_count == 0:
            return [
                Suggestion(
                    title="No Records Found",
                    description=(
                        "No data entries were detected in the file; "
                        "verify element configuration."
                    ),
                    severity=InsightSeverity.WARNING,
                )
            ]

        suggestions = []
        if entry_count > LARGE_RECORD_VOLUME:
            suggestions.append(
                Suggestion(
                    title="Large Record Volume",
                    description=(
                        f"More than {LARGE_RECORD_VOLUME:,} records were parsed. "
                        "Consider pagination or splitting the file to improve "
                        "responsiveness."
                    ),
                    severity=InsightSeverity.INFO,
                )
            )

        if summary.inferred_table_name and summary.table_exists is False:
            suggestions.append(
                Suggestion(
                    title="Missing Database Table",
                    description=(
                        f'The inferred table "{summary.inferred_table_name}" does '
                        "not exist in the active database."
                    ),
                    severity=InsightSeverity.WARNING,
                )
            )

        if (
            self.config.check_database_sync
            and summary.table_exists
            and summary.database_row_count is not None
        ):
            sync = self._sync_suggestion(summary.database_row_count, entry_count)
            if sync is not None:
                suggestions.append(sync)

        for name, stats in aggregator.attribute_stats.items():
            coverage = snapshot.coverage[name] * 100.0
            if coverage < LOW_COVERAGE_PERCENT:
                suggestions.append(
                    Suggestion(
                        title=f"Low Coverage Field: {name}",
                        description=(
                            f"{name} appears in only {coverage:.0f}% of records. "
                            "Check whether it is optional or missing data."
                        ),
                        severity=InsightSeverity.WARNING,
                    )
                )
            elif coverage < MODERATE_COVERAGE_PERCENT:
                suggestions.append(
                    Suggestion(
                        title=f"Moderate Coverage Field: {name}",
                        description=(
                            f"{name} covers about {coverage:.0f}% of records. "
                            "Confirm whether additional values are required."
                        ),
                        severity=InsightSeverity.INFO,
                    )
                )

            if stats.blank_count > 0:
                suggestions.append(
                    Suggestion(
                        title=f"Null Values Detected: {name}",
                        description=(
                            f"{name} contains {stats.blank_count} blank values. "
                            "Provide defaults or remove empty entries."
                        ),
                        severity=InsightSeverity.INFO,
                    )
                )

            if stats.duplicate_samples > 0:
                suggestions.append(
                    Suggestion(
                        title=f"Duplicate Values: {name}",
                        description=(
                            "Sampled records include duplicate values. Review "
                            "uniqueness constraints if necessary."
                        ),
                        severity=InsightSeverity.INFO,
                    )
                )

            if stats.truncated:
                suggestions.append(
                    Suggestion(
                        title=f"Many Distinct Values: {name}",
                        description=(
                            f"{name} has more than {MAX_TRACKED_UNIQUE_VALUES} "
                            "distinct values; only the most frequent ones are shown."
                        ),
                        severity=InsightSeverity.INFO,
                    )
                )

            if name == snapshot.primary_key_candidate and stats.blank_count > 0:
                suggestions.append(
                    Suggestion(
                        title=f"Primary Key Candidate Missing Values: {name}",
                        description=(
                            "Field is considered a primary key but still contains "
                            "blanks. Review data integrity."
                        ),
                        severity=InsightSeverity.WARNING,
                    )
                )

        return suggestions

    @staticmethod
    def _sync_suggestion(row_count: int, entry_count: int) -> Optional[Suggestion]:
        diff = row_count - entry_count
        ratio = abs(diff) / entry_count if entry_count else 0.0
        direction = "more" if diff > 0 else "fewer"

        if (
            entry_count >= SYNC_CHECK_MIN_ENTRIES
            and ratio > SYNC_CHECK_RATIO
            and abs(diff) > SYNC_CHECK_STRICT_DIFF
        ):
            return Suggestion(
                title="Database Sync Difference",
                description=(
                    f"The database table has {abs(diff)} {direction} rows than the "
                    f"data file ({ratio * 100:.0f}% difference). This is expected "
                    "when the file is a partial export or test data. Set "
                    "check_database_sync to false to disable this check."
                ),
                severity=InsightSeverity.INFO,
            )
        if diff != 0 and abs(diff) > SYNC_CHECK_LENIENT_DIFF:
            return Suggestion(
                title="Record Count Difference",
                description=(
                    f"The database table has {abs(diff)} {direction} rows than the "
                    "data file. Files and databases are often not fully in sync."
                ),
                severity=InsightSeverity.INFO,
            )
        return None

    # ──────────────────────────────────────────────────────────────────────
    # Advanced analysis
    # ──────────────────────────────────────────────────────────────────────

    def _advanced_analysis(
        self, records: Sequence[Record], snapshot: AggregationSnapshot
    ) -> Dict[str, object]:
        """Types, correlations, distribution profiles and balance issues.

        Returns keyword arguments for DesignerInsight. Everything is dropped
        when any step fails.
        """
        if not records:
            logger.debug("Skipping advanced analysis: no records")
            return {}

        try:
            return self._run_advanced_analysis(records, snapshot)
        except Exception:
            logger.exception("Advanced analysis failed; keeping basic results only")
            return {}

    def _run_advanced_analysis(
        self, records: Sequence[Record], snapshot: AggregationSnapshot
    ) -> Dict[str, object]:
        field_names = snapshot.field_names
        logger.debug(
            "Advanced analysis over %d records and %d fields",
            len(records),
            len(field_names),
        )

        attribute_types: Dict[str, AttributeType] = {
            name: identify_attribute_type(name) for name in field_names
        }

        numeric_fields: Dict[str, List[float]] = {}
        for name in field_names:
            values = extract_numeric_values(records, name)
            if len(values) >= MIN_NUMERIC_VALUES:
                numeric_fields[name] = values
        logger.debug("Found %d numeric fields", len(numeric_fields))

        names = list(numeric_fields)
        correlated = names[:MAX_CORRELATION_FIELDS]
        correlations: List[FieldCorrelation] = []
        for i, first in enumerate(correlated):
            for second in correlated[i + 1 :]:
                result = analyze_correlation(
                    first, numeric_fields[first], second, numeric_fields[second]
                )
                if abs(result.correlation) > WEAK_CORRELATION_THRESHOLD:
                    correlations.append(result)
        logger.debug("Found %d significant correlations", len(correlations))

        profiles: List[DistributionProfile] = [
            analyze_distribution(name, numeric_fields[name])
            for name in names[:MAX_DISTRIBUTION_FIELDS]
        ]

        id_field = find_id_field(field_names) or "id"
        balance_issues: List[BalanceIssue] = detect_balance_issues(
            records_by_numeric_field(records, names), id_field
        )

        logger.info(
            "Advanced analysis done: %d types, %d numeric fields, %d correlations, "
            "%d distributions, %d balance issues",
            len(attribute_types),
            len(numeric_fields),
            len(correlations),
            len(profiles),
            len(balance_issues),
        )
        return {
            "attribute_types": attribute_types,
            "correlations": correlations,
            "distribution_profiles": profiles,
            "balance_issues": balance_issues,
        }


__all__ = [
    "InsightReportBuilder",
    "infer_table_name",
    "format_file_size",
    "find_id_field",
]
