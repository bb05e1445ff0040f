#!/usr/bin/env python3
"""Impact subcommand: what breaks if a value is deleted or changed."""
from __future__ import annotations

from ..impact_analyzer import ImpactAnalyzer
from ..logging_config import get_logger
from ..relationships import load_relationship_catalogue
from ..report import render
from .common import add_common_arguments, emit, prepare

logger = get_logger(__name__)


def add_impact_subcommand(subparsers) -> None:
    """Add the impact subcommand to the CLI."""
    from ..helpfmt import ColorDefaultsFormatter
    from .colors import BLUE, RESET, example, section_header

    parser = subparsers.add_parser(
        "impact",
        help="Analyze the impact of deleting or updating a value",
        formatter_class=ColorDefaultsFormatter,
        description=f"""
List every table and field that references a value, rate how risky the
change is, and suggest cascade actions.

{section_header("SEVERITY")}
  {BLUE}safe{RESET}       nothing references the value
  {BLUE}warning{RESET}    1 to 3 tables reference it
  {BLUE}critical{RESET}   more than 3 tables reference it

{section_header("EXAMPLES")}
  {example("What breaks if item 1001 is deleted?")}
  gamedata-insight impact relationships.json --table items --field id --value 1001

  {example("Renumber an item")}
  gamedata-insight impact relationships.json --table items --field id --value 1001 --new-value 2001
        """,
    )
    parser.add_argument(
        "catalogue",
        help="Relationship catalogue (JSON, NDJSON or YAML, optionally gzipped)",
    )
    parser.add_argument("--table", required=True, help="Table holding the value")
    parser.add_argument(
        "--field",
        required=True,
        help="Field holding the value; matches referenced fields containing it",
    )
    parser.add_argument("--value", required=True, help="Current value")
    parser.add_argument(
        "--new-value",
        help="Replacement value; analyzes an update instead of a delete",
    )
    add_common_arguments(parser)
    parser.set_defaults(func=cmd_impact)


def cmd_impact(args) -> None:
    """Handle 'gamedata-insight impact'."""
    ctx = prepare(args)
    analyzer = ImpactAnalyzer.from_catalogue(load_relationship_catalogue(args.catalogue))

    if args.new_value is None:
        report = analyzer.analyze_delete_impact(args.table, args.field, args.value)
    else:
        report = analyzer.analyze_update_impact(
            args.table, args.field, args.value, args.new_value
        )
    logger.info(
        "%s impact on %s.%s: %s",
        report.type.display_name,
        args.table,
        args.field,
        report.severity.value,
    )
    emit(render(report, ctx.output_format, ctx.config))
