#!/usr/bin/env python3
"""Command-line interface for gamedata-insight.

Each subcommand lives in its own module exposing ``add_<name>_subcommand``
and ``cmd_<name>``.
"""
from __future__ import annotations

from .config import cmd_config
from .graph import cmd_graph
from .impact import cmd_impact
from .insight import cmd_insight


# Main entry point
def main(argv=None) -> int:
    """Main entry point for the CLI."""
    import argparse
    import sys

    from ..helpfmt import ColorDefaultsFormatter
    from .colors import error

    parser = argparse.ArgumentParser(
        prog="gamedata-insight",
        description=(
            "Impact analysis and statistical insight for cross-referencing game data files"
        ),
        formatter_class=ColorDefaultsFormatter,
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        metavar="{impact,graph,insight,config}",
    )

    from .config import add_config_subcommand
    from .graph import add_graph_subcommand
    from .impact import add_impact_subcommand
    from .insight import add_insight_subcommand

    add_impact_subcommand(subparsers)
    add_graph_subcommand(subparsers)
    add_insight_subcommand(subparsers)
    add_config_subcommand(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        args.func(args)
        return 0
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(error(f"Error: {e}"), file=sys.stderr)
        return 1


__all__ = ["main", "cmd_impact", "cmd_graph", "cmd_insight", "cmd_config"]
