#!/usr/bin/env python3
"""
Canonical data structures for gamedata-insight.

Value objects shared by the relationship index, the impact analyzer, the
attribute aggregator and the statistical analyzers, plus the report objects
handed to the presentation layer.

Using Pydantic for validation, serialization, and type safety.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    """Base class for immutable value objects."""

    model_config = ConfigDict(frozen=True)


# ──────────────────────────────────────────────────────────────────────────────
# Relationships and impact analysis
# ──────────────────────────────────────────────────────────────────────────────


class Relationship(FrozenModel):
    """A discovered reference from one (table, field) to another."""

    source_table: str
    source_field: str
    source_field_path: str = ""
    target_table: str
    target_field: str
    target_field_path: str = ""
    confidence: float = 0.0
    match_count: int = 0

    def __str__(self) -> str:
        return (
            f"{self.source_table}.{self.source_field} -> "
            f"{self.target_table}.{self.target_field}"
        )


class ImpactType(str, Enum):
    """Kind of change being analyzed."""

    DELETE = "delete"
    UPDATE = "update"

    @property
    def display_name(self) -> str:
        return "Delete" if self is ImpactType.DELETE else "Update"


class ImpactSeverity(str, Enum):
    """How dangerous a change is for referencing tables."""

    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ImpactedReference(FrozenModel):
    """One referencing field that a change would affect."""

    table_name: str
    field_name: str
    confidence: float
    suggestion: str


class CascadeAction(FrozenModel):
    """One recommended remediation step, grouped by affected table."""

    step: int
    table_name: str
    references: List[ImpactedReference] = Field(default_factory=list)
    description: str


class ImpactReport(BaseModel):
    """Result of a delete or update impact query."""

    type: ImpactType
    table_name: str
    field_name: str
    value: str
    new_value: Optional[str] = None
    severity: ImpactSeverity = ImpactSeverity.SAFE
    summary: str = ""
    impacted_references: List[ImpactedReference] = Field(default_factory=list)
    cascade_actions: List[CascadeAction] = Field(default_factory=list)

    def references_by_table(self) -> Dict[str, List[ImpactedReference]]:
        """Group impacted references by table, in first-seen order."""
        grouped: Dict[str, List[ImpactedReference]] = {}
        for ref in self.impacted_references:
            grouped.setdefault(ref.table_name, []).append(ref)
        return grouped

    def generate_cascade_actions(self) -> None:
        """Rebuild the cascade actions from the impacted references.

        Steps are numbered in the order tables were first encountered. For
        updates only the first reference's field is named for each table.
        """
        actions: List[CascadeAction] = []
        for step, (table, refs) in enumerate(self.references_by_table().items(), 1):
            if self.type is ImpactType.DELETE:
                description = (
                    f"Delete or clear {len(refs)} record(s) referencing this data "
                    f"in table {table}"
                )
            else:
                description = (
                    f"Update field {refs[0].field_name} in table {table} "
                    f"from '{self.value}' to '{self.new_value}'"
                )
            actions.append(
                CascadeAction(
                    step=step, table_name=table, references=refs, description=description
                )
            )
        self.cascade_actions = actions


class DependencyGraph(BaseModel):
    """Table dependency graph reached from a root table.

    ``dependencies`` maps a depended-upon table to the tables depending on it
    (insertion ordered, no duplicates).
    """

    root_table: str
    dependencies: Dict[str, List[str]] = Field(default_factory=dict)
    relationships: Dict[str, Dict[str, List[Relationship]]] = Field(
        default_factory=dict
    )

    def add_dependency(
        self, from_table: str, to_table: str, rels: List[Relationship]
    ) -> None:
        targets = self.dependencies.setdefault(from_table, [])
        if to_table not in targets:
            targets.append(to_table)
        self.relationships.setdefault(from_table, {})[to_table] = list(rels)

    def all_tables(self) -> List[str]:
        """Every table appearing in the graph, root first."""
        seen = [self.root_table]
        for from_table, targets in self.dependencies.items():
            for table in [from_table, *targets]:
                if table not in seen:
                    seen.append(table)
        return seen

    def dependent_tables(self, table: str) -> List[str]:
        return list(self.dependencies.get(table, []))

    def relationships_between(self, from_table: str, to_table: str) -> List[Relationship]:
        return list(self.relationships.get(from_table, {}).get(to_table, []))

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.dependencies.values())


# ──────────────────────────────────────────────────────────────────────────────
# Attribute aggregation
# ──────────────────────────────────────────────────────────────────────────────


class AttributeInsight(FrozenModel):
    """Finalized per-field statistics."""

    name: str
    present_count: int
    unique_count: int
    unique_count_truncated: bool
    duplicate_samples: int
    blank_count: int
    minimum_value: Optional[float] = None
    maximum_value: Optional[float] = None
    average_value: Optional[float] = None


class ValueCount(FrozenModel):
    value: str
    count: int
    percentage: float


class AttributeValueDistribution(FrozenModel):
    attribute_name: str
    top_values: List[ValueCount] = Field(default_factory=list)


# ──────────────────────────────────────────────────────────────────────────────
# Statistical insights
# ──────────────────────────────────────────────────────────────────────────────


class CorrelationType(str, Enum):
    """Relationship pattern between two numeric fields."""

    POSITIVE_LINEAR = "positive_linear"
    NEGATIVE_LINEAR = "negative_linear"
    POWER_GROWTH = "power_growth"
    LINEAR_GROWTH = "linear_growth"
    STEP_GROWTH = "step_growth"
    NO_CORRELATION = "no_correlation"

    @property
    def display_name(self) -> str:
        return _CORRELATION_NAMES[self]


_CORRELATION_NAMES = {
    CorrelationType.POSITIVE_LINEAR: "Positive correlation - grow together",
    CorrelationType.NEGATIVE_LINEAR: "Negative correlation - move in opposite directions",
    CorrelationType.POWER_GROWTH: "Power growth - accelerating",
    CorrelationType.LINEAR_GROWTH: "Linear growth - steady",
    CorrelationType.STEP_GROWTH: "Step growth - tiered",
    CorrelationType.NO_CORRELATION: "No clear relationship",
}


class FieldCorrelation(FrozenModel):
    field1: str
    field2: str
    correlation: float
    type: CorrelationType
    insight: str


class DistributionType(str, Enum):
    """Shape of a numeric field's value distribution."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    SKEWED_LEFT = "skewed_left"
    SKEWED_RIGHT = "skewed_right"
    POWER_LAW = "power_law"
    DISCRETE = "discrete"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").capitalize()


class GapInfo(FrozenModel):
    """A range with no values between two consecutive sorted values."""

    start: float
    end: float
    description: str


class DistributionProfile(FrozenModel):
    field_name: str
    type: DistributionType
    skewness: float
    evenness: float
    insight: str
    gaps: List[GapInfo] = Field(default_factory=list)


class InsightSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class BalanceIssue(FrozenModel):
    """A flagged statistical anomaly in a numeric field."""

    category: str
    severity: InsightSeverity
    description: str
    suggestion: str
    affected_records: List[str] = Field(default_factory=list)


class GameAttributeCategory(str, Enum):
    """Game-design role of a field, inferred from its name."""

    IDENTIFIER = "identifier"
    COMBAT_STAT = "combat_stat"
    ECONOMY = "economy"
    PROGRESSION = "progression"
    QUALITY = "quality"
    PROBABILITY = "probability"
    REFERENCE = "reference"
    DESCRIPTIVE = "descriptive"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _CATEGORY_INFO[self][0]

    @property
    def description(self) -> str:
        return _CATEGORY_INFO[self][1]


_CATEGORY_INFO = {
    GameAttributeCategory.IDENTIFIER: ("Identifier", "Uniquely identifies data"),
    GameAttributeCategory.COMBAT_STAT: ("Combat stat", "Affects combat strength"),
    GameAttributeCategory.ECONOMY: ("Economy", "Gold, prices and costs"),
    GameAttributeCategory.PROGRESSION: ("Progression", "Levels and experience"),
    GameAttributeCategory.QUALITY: ("Quality", "Rarity and grade"),
    GameAttributeCategory.PROBABILITY: ("Probability weight", "Random drops and rolls"),
    GameAttributeCategory.REFERENCE: ("Reference", "Links to other tables"),
    GameAttributeCategory.DESCRIPTIVE: ("Descriptive", "Names and description text"),
    GameAttributeCategory.UNKNOWN: ("Unclassified", ""),
}


class AttributeType(FrozenModel):
    field_name: str
    category: GameAttributeCategory
    description: str


# ──────────────────────────────────────────────────────────────────────────────
# Designer insight report
# ──────────────────────────────────────────────────────────────────────────────


class Metric(FrozenModel):
    name: str
    value: str
    detail: str


class Suggestion(FrozenModel):
    title: str
    description: str
    severity: InsightSeverity


class FileSummary(FrozenModel):
    """Facts about the analyzed file, supplied by the caller."""

    source: str
    display_name: str
    file_size: int = 0
    root_element: str = ""
    entry_element: str = ""
    inferred_table_name: Optional[str] = None
    # None when no database was consulted
    table_exists: Optional[bool] = None
    database_row_count: Optional[int] = None


class DesignerInsight(FrozenModel):
    """Everything the presentation layer shows for one analyzed file."""

    file_summary: FileSummary
    parsed: bool = True
    entry_count: int = 0
    metrics: List[Metric] = Field(default_factory=list)
    suggestions: List[Suggestion] = Field(default_factory=list)
    attribute_insights: List[AttributeInsight] = Field(default_factory=list)
    distributions: List[AttributeValueDistribution] = Field(default_factory=list)
    sample_records: List[Dict[str, str]] = Field(default_factory=list)
    correlations: List[FieldCorrelation] = Field(default_factory=list)
    distribution_profiles: List[DistributionProfile] = Field(default_factory=list)
    balance_issues: List[BalanceIssue] = Field(default_factory=list)
    attribute_types: Dict[str, AttributeType] = Field(default_factory=dict)


__all__ = [
    "Relationship",
    "ImpactType",
    "ImpactSeverity",
    "ImpactedReference",
    "CascadeAction",
    "ImpactReport",
    "DependencyGraph",
    "AttributeInsight",
    "ValueCount",
    "AttributeValueDistribution",
    "CorrelationType",
    "FieldCorrelation",
    "DistributionType",
    "GapInfo",
    "DistributionProfile",
    "InsightSeverity",
    "BalanceIssue",
    "GameAttributeCategory",
    "AttributeType",
    "Metric",
    "Suggestion",
    "FileSummary",
    "DesignerInsight",
]
