#!/usr/bin/env python3
"""Graph subcommand: tables depending on, and depended on by, a table."""
from __future__ import annotations

from ..impact_analyzer import ImpactAnalyzer
from ..relationships import load_relationship_catalogue
from ..report import render
from .common import add_common_arguments, emit, prepare


def add_graph_subcommand(subparsers) -> None:
    """Add the graph subcommand to the CLI."""
    from ..helpfmt import ColorDefaultsFormatter
    from .colors import example, section_header

    parser = subparsers.add_parser(
        "graph",
        help="Build the dependency graph around a table",
        formatter_class=ColorDefaultsFormatter,
        description=f"""
Walk references in both directions from a table, up to a depth, and print
which tables depend on which. Edges point from the referenced table to the
table holding the reference. Circular dependencies are flagged.

{section_header("EXAMPLES")}
  {example("Everything within three hops of the items table")}
  gamedata-insight graph relationships.json --table items

  {example("Direct neighbours only, as JSON")}
  gamedata-insight graph relationships.json --table items --max-depth 1 --format json
        """,
    )
    parser.add_argument(
        "catalogue",
        help="Relationship catalogue (JSON, NDJSON or YAML, optionally gzipped)",
    )
    parser.add_argument("--table", required=True, help="Root table")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum traversal depth (default: from config, else 3)",
    )
    add_common_arguments(parser)
    parser.set_defaults(func=cmd_graph)


def cmd_graph(args) -> None:
    """Handle 'gamedata-insight graph'."""
    ctx = prepare(args)
    max_depth = ctx.config.default_max_depth if args.max_depth is None else args.max_depth
    if max_depth < 0:
        raise ValueError("--max-depth must not be negative")

    analyzer = ImpactAnalyzer.from_catalogue(load_relationship_catalogue(args.catalogue))
    graph = analyzer.build_dependency_graph(args.table, max_depth)
    emit(render(graph, ctx.output_format, ctx.config))
