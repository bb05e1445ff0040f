"""
Designer-facing rendering of analysis results.

This module turns the report objects produced by the analysis core into:
  - plain or colorized text for the terminal,
  - markdown for pasting into design docs or review threads, and
  - JSON (pydantic ``model_dump``), syntax highlighted with pygments when
    color is enabled.

Renderers return strings; printing is left to the caller. Colors are passed
as the ``(RED, GRN, YEL, CYN, RST)`` tuple produced by ``Config.colors()``.
"""

from __future__ import annotations

import json
from typing import Any, List, Union

from pydantic import BaseModel
from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer

from .config import Config
from .constants import REPORT_RULE_WIDTH
from .impact_analyzer import cyclic_groups, representative_cycle
from .models import (
    DependencyGraph,
    DesignerInsight,
    ImpactReport,
    ImpactSeverity,
    ImpactType,
    InsightSeverity,
)

Colors = tuple  # (RED, GRN, YEL, CYN, RST)
NO_COLORS: Colors = ("", "", "", "", "")

Renderable = Union[ImpactReport, DependencyGraph, DesignerInsight]


def _severity_color(severity: Union[ImpactSeverity, InsightSeverity], colors: Colors) -> str:
    RED, GRN, YEL, CYN, _ = colors
    return {
        "safe": GRN,
        "info": CYN,
        "warning": YEL,
        "critical": RED,
    }.get(severity.value, "")


# ──────────────────────────────────────────────────────────────────────────────
# Impact reports
# ──────────────────────────────────────────────────────────────────────────────


def format_impact_report(report: ImpactReport, colors: Colors = NO_COLORS) -> str:
    """
    Render an impact report for designers.

    Layout: double rule, title, double rule, metadata (table, field, value,
    new value for updates, severity), summary, impacted references grouped
    by table with confidence as a percentage, numbered cascade actions and a
    closing double rule.
    """
    RED, GRN, YEL, CYN, RST = colors
    heavy = "═" * REPORT_RULE_WIDTH
    light = "─" * REPORT_RULE_WIDTH
    title = (
        "Delete Impact Report"
        if report.type is ImpactType.DELETE
        else "Update Impact Report"
    )
    sev = _severity_color(report.severity, colors)

    lines = [heavy, f"{CYN}{title}{RST}", heavy, ""]
    lines.append(f"Table: {report.table_name}")
    lines.append(f"Field: {report.field_name}")
    lines.append(f"Value: {report.value}")
    if report.new_value is not None:
        lines.append(f"New value: {report.new_value}")
    lines.append(f"Severity: {sev}{report.severity.display_name}{RST}")
    lines.append("")
    lines.append("Summary:")
    lines.append(report.summary)
    lines.append("")

    if report.impacted_references:
        lines.append("Impacted references (by table):")
        lines.append(light)
        for table, refs in report.references_by_table().items():
            lines.append("")
            lines.append(f"{YEL}[{table}]{RST} {len(refs)} reference(s)")
            for ref in refs:
                lines.append(
                    f"  • field: {ref.field_name} "
                    f"(confidence: {ref.confidence * 100:.1f}%)"
                )
                lines.append(f"    → {ref.suggestion}")

    if report.cascade_actions:
        lines.append("")
        lines.append("Cascade actions:")
        lines.append(light)
        for action in report.cascade_actions:
            lines.append(f"{action.step}. {action.description}")

    lines.append("")
    lines.append(heavy)
    return "\n".join(lines) + "\n"


def impact_report_markdown(report: ImpactReport) -> str:
    title = "Delete" if report.type is ImpactType.DELETE else "Update"
    lines = [f"# {title} impact: `{report.table_name}.{report.field_name}`", ""]
    lines.append(f"- **Value:** `{report.value}`")
    if report.new_value is not None:
        lines.append(f"- **New value:** `{report.new_value}`")
    lines.append(f"- **Severity:** {report.severity.display_name}")
    lines.append("")
    lines.append(report.summary)

    if report.impacted_references:
        lines += ["", "## Impacted references", ""]
        lines.append("| Table | Field | Confidence | Suggestion |")
        lines.append("|---|---|---|---|")
        for ref in report.impacted_references:
            lines.append(
                f"| {ref.table_name} | {ref.field_name} | "
                f"{ref.confidence * 100:.1f}% | {ref.suggestion} |"
            )

    if report.cascade_actions:
        lines += ["", "## Cascade actions", ""]
        for action in report.cascade_actions:
            lines.append(f"{action.step}. {action.description}")

    return "\n".join(lines) + "\n"


# ──────────────────────────────────────────────────────────────────────────────
# Dependency graphs
# ──────────────────────────────────────────────────────────────────────────────


def _edge_fields(graph: DependencyGraph, from_table: str, to_table: str) -> List[str]:
    # edges point from the referenced table to the referencing one
    return [
        f"{rel.source_table}.{rel.source_field} -> {rel.target_table}.{rel.target_field}"
        for rel in graph.relationships_between(from_table, to_table)
    ]


def _loop_line(graph: DependencyGraph, group: List[str], arrow: str) -> str:
    cycle = representative_cycle(graph, group)
    line = arrow.join(cycle + [cycle[0]])
    others = len(group) - len(cycle)
    if others:
        line += f" (+{others} more table(s) in the same loop)"
    return line


def format_dependency_graph(graph: DependencyGraph, colors: Colors = NO_COLORS) -> str:
    RED, GRN, YEL, CYN, RST = colors
    tables = graph.all_tables()
    lines = [
        f"{CYN}=== Dependency graph: {graph.root_table} ==={RST}",
        f"Tables: {len(tables)}, edges: {graph.edge_count}",
    ]

    if not graph.dependencies:
        lines.append("")
        lines.append("No dependencies found.")
        return "\n".join(lines) + "\n"

    for from_table, targets in graph.dependencies.items():
        lines.append("")
        lines.append(f"{YEL}{from_table}{RST} is used by:")
        for to_table in targets:
            lines.append(f"  {GRN}{to_table}{RST}")
            for pair in _edge_fields(graph, from_table, to_table):
                lines.append(f"    {pair}")

    groups = cyclic_groups(graph)
    if groups:
        lines.append("")
        lines.append(f"{RED}Circular dependencies ({len(groups)}):{RST}")
        for group in groups:
            lines.append("  " + _loop_line(graph, group, " -> "))

    return "\n".join(lines) + "\n"


def dependency_graph_markdown(graph: DependencyGraph) -> str:
    lines = [f"# Dependency graph: `{graph.root_table}`", ""]
    lines.append(f"{len(graph.all_tables())} tables, {graph.edge_count} edges.")
    for from_table, targets in graph.dependencies.items():
        lines += ["", f"## `{from_table}`", ""]
        for to_table in targets:
            lines.append(f"- used by `{to_table}`")
            for pair in _edge_fields(graph, from_table, to_table):
                lines.append(f"  - `{pair}`")

    groups = cyclic_groups(graph)
    if groups:
        lines += ["", "## Circular dependencies", ""]
        for group in groups:
            lines.append("- " + _loop_line(graph, group, " → "))

    return "\n".join(lines) + "\n"


# ──────────────────────────────────────────────────────────────────────────────
# Designer insights
# ──────────────────────────────────────────────────────────────────────────────


def _fmt_number(value: Any) -> str:
    if value is None:
        return "-"
    return f"{value:g}" if isinstance(value, float) else str(value)


def format_designer_insight(insight: DesignerInsight, colors: Colors = NO_COLORS) -> str:
    RED, GRN, YEL, CYN, RST = colors
    summary = insight.file_summary
    name = summary.display_name or summary.source or "records"
    lines = [f"{CYN}=== Designer insight: {name} ==={RST}"]

    if not insight.parsed:
        lines.append(f"{RED}File could not be parsed.{RST}")

    if insight.metrics:
        lines.append(f"\n{YEL}-- Metrics -- ({len(insight.metrics)}){RST}")
        for metric in insight.metrics:
            lines.append(f"  {metric.name}: {metric.value}")

    lines.append(f"\n{YEL}-- Suggestions -- ({len(insight.suggestions)}){RST}")
    for suggestion in insight.suggestions:
        sev = _severity_color(suggestion.severity, colors)
        lines.append(f"  {sev}[{suggestion.severity.value.upper()}]{RST} {suggestion.title}")
        lines.append(f"      {suggestion.description}")

    if insight.attribute_insights:
        lines.append(f"\n{YEL}-- Fields -- ({len(insight.attribute_insights)}){RST}")
        for attr in insight.attribute_insights:
            unique = f"{attr.unique_count}{'+' if attr.unique_count_truncated else ''}"
            attr_type = insight.attribute_types.get(attr.name)
            category = f" [{attr_type.category.display_name}]" if attr_type else ""
            lines.append(
                f"  {GRN}{attr.name}{RST}{category}: present {attr.present_count}, "
                f"unique {unique}, blank {attr.blank_count}, "
                f"duplicates {attr.duplicate_samples}"
            )
            if attr.average_value is not None:
                lines.append(
                    f"      min {_fmt_number(attr.minimum_value)}, "
                    f"max {_fmt_number(attr.maximum_value)}, "
                    f"avg {attr.average_value:.2f}"
                )

    if insight.distributions:
        lines.append(f"\n{YEL}-- Top values --{RST}")
        for dist in insight.distributions:
            top = ", ".join(
                f"{vc.value} ({vc.count}, {vc.percentage:.1f}%)" for vc in dist.top_values
            )
            lines.append(f"  {dist.attribute_name}: {top}")

    if insight.correlations:
        lines.append(f"\n{YEL}-- Correlations -- ({len(insight.correlations)}){RST}")
        for corr in insight.correlations:
            lines.append(
                f"  {corr.field1} ~ {corr.field2}: r={corr.correlation:.2f} "
                f"{corr.type.display_name}"
            )
            lines.append(f"      {corr.insight}")

    if insight.distribution_profiles:
        lines.append(
            f"\n{YEL}-- Distributions -- ({len(insight.distribution_profiles)}){RST}"
        )
        for profile in insight.distribution_profiles:
            lines.append(
                f"  {profile.field_name}: {profile.type.display_name} "
                f"(skewness {profile.skewness:.2f}, evenness {profile.evenness:.2f})"
            )
            lines.append(f"      {profile.insight}")
            for gap in profile.gaps:
                lines.append(f"      gap: {gap.description}")

    if insight.balance_issues:
        lines.append(f"\n{YEL}-- Balance issues -- ({len(insight.balance_issues)}){RST}")
        for issue in insight.balance_issues:
            sev = _severity_color(issue.severity, colors)
            lines.append(f"  {sev}{issue.category}{RST}: {issue.description}")
            for label in issue.affected_records:
                lines.append(f"      {label}")
            lines.append(f"      → {issue.suggestion}")

    if insight.sample_records:
        lines.append(f"\n{YEL}-- Samples -- ({len(insight.sample_records)}){RST}")
        for i, record in enumerate(insight.sample_records, 1):
            lines.append(f"  {i}. {json.dumps(record, ensure_ascii=False)}")

    return "\n".join(lines) + "\n"


def designer_insight_markdown(insight: DesignerInsight) -> str:
    summary = insight.file_summary
    name = summary.display_name or summary.source or "records"
    lines = [f"# Designer insight: `{name}`", ""]
    if not insight.parsed:
        lines += ["**The file could not be parsed.**", ""]

    if insight.metrics:
        lines += ["## Metrics", "", "| Metric | Value | Detail |", "|---|---|---|"]
        for metric in insight.metrics:
            lines.append(f"| {metric.name} | {metric.value} | {metric.detail} |")
        lines.append("")

    if insight.suggestions:
        lines += ["## Suggestions", ""]
        for suggestion in insight.suggestions:
            lines.append(
                f"- **{suggestion.severity.value.upper()}** {suggestion.title}: "
                f"{suggestion.description}"
            )
        lines.append("")

    if insight.attribute_insights:
        lines += [
            "## Fields",
            "",
            "| Field | Type | Present | Unique | Blank | Duplicates | Min | Max | Avg |",
            "|---|---|---|---|---|---|---|---|---|",
        ]
        for attr in insight.attribute_insights:
            attr_type = insight.attribute_types.get(attr.name)
            lines.append(
                f"| {attr.name} | {attr_type.category.display_name if attr_type else ''} "
                f"| {attr.present_count} | {attr.unique_count} | {attr.blank_count} "
                f"| {attr.duplicate_samples} | {_fmt_number(attr.minimum_value)} "
                f"| {_fmt_number(attr.maximum_value)} "
                f"| {_fmt_number(attr.average_value)} |"
            )
        lines.append("")

    if insight.correlations:
        lines += ["## Correlations", ""]
        for corr in insight.correlations:
            lines.append(
                f"- `{corr.field1}` ~ `{corr.field2}` (r={corr.correlation:.2f}, "
                f"{corr.type.display_name}): {corr.insight}"
            )
        lines.append("")

    if insight.distribution_profiles:
        lines += ["## Distributions", ""]
        for profile in insight.distribution_profiles:
            lines.append(
                f"- `{profile.field_name}`: {profile.type.display_name}. {profile.insight}"
            )
            for gap in profile.gaps:
                lines.append(f"  - {gap.description}")
        lines.append("")

    if insight.balance_issues:
        lines += ["## Balance issues", ""]
        for issue in insight.balance_issues:
            lines.append(f"- **{issue.category}**: {issue.description}")
            for label in issue.affected_records:
                lines.append(f"  - {label}")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


# ──────────────────────────────────────────────────────────────────────────────
# JSON and dispatch
# ──────────────────────────────────────────────────────────────────────────────


def to_json(model: BaseModel, color_enabled: bool = False) -> str:
    """Serialize a report model, highlighted for terminals when requested."""
    text = json.dumps(model.model_dump(mode="json"), ensure_ascii=False, indent=2)
    if color_enabled:
        return highlight(text, JsonLexer(), Terminal256Formatter())
    return text + "\n"


_TEXT_RENDERERS = {
    ImpactReport: format_impact_report,
    DependencyGraph: format_dependency_graph,
    DesignerInsight: format_designer_insight,
}

_MARKDOWN_RENDERERS = {
    ImpactReport: impact_report_markdown,
    DependencyGraph: dependency_graph_markdown,
    DesignerInsight: designer_insight_markdown,
}


def render(obj: Renderable, fmt: str = "text", config: Config | None = None) -> str:
    """Render any report object in one of ``text``, ``markdown`` or ``json``."""
    config = config or Config(color_enabled=False)
    if fmt == "json":
        return to_json(obj, config.color_enabled)
    if fmt == "markdown":
        return _MARKDOWN_RENDERERS[type(obj)](obj)
    if fmt == "text":
        return _TEXT_RENDERERS[type(obj)](obj, config.colors())
    raise ValueError(f"Unknown output format: {fmt}")


__all__ = [
    "format_impact_report",
    "impact_report_markdown",
    "format_dependency_graph",
    "dependency_graph_markdown",
    "format_designer_insight",
    "designer_insight_markdown",
    "to_json",
    "render",
    "NO_COLORS",
]
