#!/usr/bin/env python3
"""
Impact analysis for deleting or changing referenced values.

Answers "what breaks if I delete or change this value?" against a
RelationshipIndex, and builds table dependency graphs around a root table.

Field matching is fuzzy: a relationship is relevant when its target field
contains the queried field name, case-insensitively; a query for ``id`` also
catches ``item_id`` style target fields.
A table missing from the index, or a catalogue entry that never matches, is
the SAFE case rather than an error.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .constants import WARNING_TABLE_LIMIT
from .logging_config import get_logger
from .models import (
    DependencyGraph,
    ImpactedReference,
    ImpactReport,
    ImpactSeverity,
    ImpactType,
    Relationship,
)
from .relationships import CatalogueEntry, RelationshipIndex

logger = get_logger(__name__)

SAFE_DELETE_SUMMARY = "No other tables reference this data; it is safe to delete."
SAFE_UPDATE_SUMMARY = "No other tables reference this field; it is safe to update."
DELETE_SUGGESTION = "Must delete or clear this field's value"


def severity_for(impacted_tables: int) -> ImpactSeverity:
    """Map a number of impacted tables to a severity."""
    if impacted_tables == 0:
        return ImpactSeverity.SAFE
    if impacted_tables <= WARNING_TABLE_LIMIT:
        return ImpactSeverity.WARNING
    return ImpactSeverity.CRITICAL


class ImpactAnalyzer:
    """Read-only queries over a previously built RelationshipIndex."""

    def __init__(self, index: RelationshipIndex):
        self.index = index

    @classmethod
    def from_catalogue(
        cls, entries: Iterable[CatalogueEntry | Relationship]
    ) -> "ImpactAnalyzer":
        return cls(RelationshipIndex.build(entries))

    def _matching_references(
        self, table: str, field: str
    ) -> List[Tuple[str, List[Relationship]]]:
        """Relationships into ``table`` whose target field contains ``field``."""
        needle = field.lower()
        matches = []
        for referencing_table, rels in self.index.referencing(table).items():
            relevant = [r for r in rels if needle in r.target_field.lower()]
            if relevant:
                matches.append((referencing_table, relevant))
        logger.debug(
            "Field %r of %s is referenced from %d table(s)", field, table, len(matches)
        )
        return matches

    def analyze_delete_impact(self, table: str, field: str, value: str) -> ImpactReport:
        """Which references would dangle if ``table.field == value`` were deleted."""
        report = ImpactReport(
            type=ImpactType.DELETE, table_name=table, field_name=field, value=value
        )

        if not self.index.referencing(table):
            report.summary = SAFE_DELETE_SUMMARY
            return report

        matches = self._matching_references(table, field)
        for referencing_table, rels in matches:
            for rel in rels:
                report.impacted_references.append(
                    ImpactedReference(
                        table_name=referencing_table,
                        field_name=rel.source_field,
                        confidence=rel.confidence,
                        suggestion=DELETE_SUGGESTION,
                    )
                )

        tables = len(matches)
        refs = len(report.impacted_references)
        report.severity = severity_for(tables)
        if report.severity is ImpactSeverity.SAFE:
            report.summary = SAFE_DELETE_SUMMARY
        elif report.severity is ImpactSeverity.WARNING:
            report.summary = (
                f"Warning: deleting this data affects {tables} table(s) "
                f"with {refs} reference(s)"
            )
        else:
            report.summary = (
                f"Critical: deleting this data affects {tables} tables with "
                f"{refs} references and may leave the data inconsistent"
            )

        report.generate_cascade_actions()
        return report

    def analyze_update_impact(
        self, table: str, field: str, old_value: str, new_value: str
    ) -> ImpactReport:
        """Which references need a synchronized update if the value changes."""
        report = ImpactReport(
            type=ImpactType.UPDATE,
            table_name=table,
            field_name=field,
            value=old_value,
            new_value=new_value,
        )

        if not self.index.referencing(table):
            report.summary = SAFE_UPDATE_SUMMARY
            report.severity = ImpactSeverity.SAFE
            return report

        matches = self._matching_references(table, field)
        for referencing_table, rels in matches:
            for rel in rels:
                report.impacted_references.append(
                    ImpactedReference(
                        table_name=referencing_table,
                        field_name=rel.source_field,
                        confidence=rel.confidence,
                        suggestion=(
                            f"Update {rel.source_field} from '{old_value}' "
                            f"to '{new_value}'"
                        ),
                    )
                )

        tables = len(matches)
        report.severity = severity_for(tables)
        if report.severity is ImpactSeverity.SAFE:
            report.summary = SAFE_UPDATE_SUMMARY
        else:
            report.summary = (
                f"Updating this field affects {tables} table(s) with "
                f"{len(report.impacted_references)} reference(s) that need a "
                "synchronized update"
            )

        report.generate_cascade_actions()
        return report

    def build_dependency_graph(self, root_table: str, max_depth: int) -> DependencyGraph:
        """Expand dependents and dependencies around ``root_table``.

        Edges always point from the depended-upon table to the dependent one.
        Each table is expanded at most once.
        """
        graph = DependencyGraph(root_table=root_table)
        visited: Set[str] = set()
        self._expand(root_table, graph, visited, 0, max_depth)
        logger.debug(
            "Dependency graph for %s: %d tables, %d edges",
            root_table,
            len(graph.all_tables()),
            graph.edge_count,
        )
        return graph

    def _expand(
        self,
        table: str,
        graph: DependencyGraph,
        visited: Set[str],
        depth: int,
        max_depth: int,
    ) -> None:
        if depth >= max_depth or table in visited:
            return
        visited.add(table)

        for dependent, rels in self.index.referencing(table).items():
            graph.add_dependency(table, dependent, rels)
            self._expand(dependent, graph, visited, depth + 1, max_depth)

        for depended, rels in self.index.referenced_by(table).items():
            graph.add_dependency(depended, table, rels)
            self._expand(depended, graph, visited, depth + 1, max_depth)


def cyclic_groups(graph: DependencyGraph) -> List[List[str]]:
    """Groups of tables that depend on each other in a loop.

    Strongly connected components of the ``from -> to`` edges (Tarjan),
    keeping those with more than one table or a table depending on itself.
    Each group lists its tables in discovery order; groups are ordered by
    their first table. Runs in time linear in tables plus edges.
    """
    index: Dict[str, int] = {}
    low: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    groups: List[List[str]] = []

    def open_table(table: str) -> None:
        index[table] = low[table] = len(index)
        stack.append(table)
        on_stack.add(table)

    for start in graph.all_tables():
        if start in index:
            continue
        open_table(start)
        work = [(start, iter(graph.dependent_tables(start)))]
        while work:
            table, successors = work[-1]
            descended = False
            for nxt in successors:
                if nxt not in index:
                    open_table(nxt)
                    work.append((nxt, iter(graph.dependent_tables(nxt))))
                    descended = True
                    break
                if nxt in on_stack:
                    low[table] = min(low[table], index[nxt])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[table])
            if low[table] != index[table]:
                continue

            group = []
            while True:
                member = stack.pop()
                on_stack.discard(member)
                group.append(member)
                if member == table:
                    break
            group.reverse()
            if len(group) > 1 or table in graph.dependencies.get(table, ()):
                groups.append(group)

    groups.sort(key=lambda g: index[g[0]])
    return groups


def representative_cycle(graph: DependencyGraph, group: List[str]) -> List[str]:
    """Shortest loop from the group's first table back to itself."""
    start = group[0]
    members = set(group)
    parents: Dict[str, str] = {}
    queue = deque([start])
    while queue:
        table = queue.popleft()
        for nxt in graph.dependent_tables(table):
            if nxt == start:
                path = [table]
                while path[-1] != start:
                    path.append(parents[path[-1]])
                return path[::-1]
            if nxt in members and nxt not in parents:
                parents[nxt] = table
                queue.append(nxt)
    return [start]


def find_cycles(graph: DependencyGraph) -> List[List[str]]:
    """One loop of tables per cyclic group, as returned by ``cyclic_groups``.

    Densely linked tables form a single group however many distinct loops
    run through them.
    """
    return [representative_cycle(graph, group) for group in cyclic_groups(graph)]


def impacted_tables(report: ImpactReport) -> List[str]:
    return list(report.references_by_table())


def highest_confidence(report: ImpactReport) -> Optional[float]:
    if not report.impacted_references:
        return None
    return max(ref.confidence for ref in report.impacted_references)


__all__ = [
    "ImpactAnalyzer",
    "severity_for",
    "cyclic_groups",
    "representative_cycle",
    "find_cycles",
    "impacted_tables",
    "highest_confidence",
    "SAFE_DELETE_SUMMARY",
    "SAFE_UPDATE_SUMMARY",
    "DELETE_SUGGESTION",
]
