#!/usr/bin/env python3
"""Config command implementation for gamedata-insight CLI.

Shows the effective configuration or writes a starter config file.
"""
from __future__ import annotations

from pathlib import Path

from ..config import InsightConfig
from ..exceptions import ConfigurationError


def add_config_subcommand(subparsers) -> None:
    """Add config subcommand to the parser."""
    from ..helpfmt import ColorDefaultsFormatter
    from .colors import example, section_header

    config_parser = subparsers.add_parser(
        "config",
        help="Show or initialize configuration",
        formatter_class=ColorDefaultsFormatter,
        description=f"""
Display the configuration resolved from the config file and GAMEDATA_INSIGHT_*
environment variables, or create a config file with default values.

{section_header("EXAMPLES")}
  {example("Show effective configuration")}
  gamedata-insight config

  {example("Write gamedata-insight.yml in the current directory")}
  gamedata-insight config --init
        """,
    )
    config_parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: auto-discover)",
    )
    config_parser.add_argument(
        "--init",
        nargs="?",
        const="gamedata-insight.yml",
        metavar="PATH",
        help="Create a config file with default values (default path: gamedata-insight.yml)",
    )
    config_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file with --init",
    )
    config_parser.set_defaults(func=cmd_config)


def cmd_config(args) -> None:
    """Handle 'gamedata-insight config'."""
    if args.init:
        _init_config(args.init, args.force)
    else:
        _show_config(args.config)


def _show_config(config_path) -> None:
    from .colors import GREEN, RESET

    config = InsightConfig.load(config_path)

    print("Current gamedata-insight configuration:")
    print("=" * 40)

    categories = {
        "Output": ["color_mode", "output_format"],
        "Analysis": ["sample_record_limit", "check_database_sync", "default_max_depth"],
        "Logging": ["log_level", "log_file"],
    }

    for category, keys in categories.items():
        print(f"\n{GREEN}{category}:{RESET}")
        for key in keys:
            value = getattr(config, key, None)
            if value is None:
                value = "(not set)"
            print(f"  {key}: {value}")

    config_file = config_path or InsightConfig._find_config_file()
    if config_file:
        print(f"\nConfig file: {config_file}")
    else:
        print("\nNo config file found (using defaults)")


def _init_config(config_path: str, force: bool) -> None:
    path = Path(config_path)
    if path.exists() and not force:
        raise ConfigurationError(
            f"Config file {path} already exists. Use --force to overwrite.",
            config_key="config_path",
        )

    InsightConfig().save(str(path))
    print(f"Created config file: {path}")
    print("\nGenerated configuration:")
    print("-" * 30)
    print(path.read_text(encoding="utf-8"))
